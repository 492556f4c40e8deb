"""
Frame geometry
Maps linear frame indices of a sheet description to slice rectangles and pivots
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..utils.diagnostics import ImportLog, resolve_log
from .config import CustomPivotMode, SlicingConfig
from .data_structures import FrameSlice, PivotPlacement, Rect, SheetDescription
from .errors import ConfigurationError, OutOfRangeError
from .texture import PixelBuffer
from .trim import find_trim_region

# Normalized pivots of the fixed alignments
ALIGNMENT_PIVOTS = {
    PivotPlacement.CENTER: (0.5, 0.5),
    PivotPlacement.TOP_LEFT: (0.0, 1.0),
    PivotPlacement.TOP_CENTER: (0.5, 1.0),
    PivotPlacement.TOP_RIGHT: (1.0, 1.0),
    PivotPlacement.LEFT_CENTER: (0.0, 0.5),
    PivotPlacement.RIGHT_CENTER: (1.0, 0.5),
    PivotPlacement.BOTTOM_LEFT: (0.0, 0.0),
    PivotPlacement.BOTTOM_CENTER: (0.5, 0.0),
    PivotPlacement.BOTTOM_RIGHT: (1.0, 0.0),
}


@dataclass(frozen=True)
class SheetGrid:
    """Effective grid after subdivision"""
    columns: int
    rows: int
    cell_width: int
    cell_height: int
    padding_height: int = 0

    @property
    def frame_count(self) -> int:
        return self.columns * self.rows


def effective_grid(description: SheetDescription, config: SlicingConfig,
                   log: Optional[ImportLog] = None) -> SheetGrid:
    """
    Compute the grid frames are addressed in

    A frame size that does not divide evenly by the subdivisions is only
    reported; the floored cell size is used.
    """
    log = resolve_log(log)
    config.validate(description.id)
    sub_cols, sub_rows = config.subdivision_counts

    if description.num_columns <= 0 or description.num_rows <= 0:
        raise ConfigurationError(
            f"Sheet grid must have at least one row and column, got "
            f"{description.num_rows} rows by {description.num_columns} columns",
            description.id,
        )

    if description.frame_width % sub_cols or description.frame_height % sub_rows:
        log.warning(
            f"Sprite size {description.frame_width}x{description.frame_height} does not divide "
            f"evenly into {sub_cols}x{sub_rows} subdivisions; cells are rounded down",
            category="slice", description_id=description.id,
            extra={"subdivisions": [sub_cols, sub_rows]},
        )

    return SheetGrid(
        columns=description.num_columns * sub_cols,
        rows=description.num_rows * sub_rows,
        cell_width=description.frame_width // sub_cols,
        cell_height=description.frame_height // sub_rows,
        padding_height=description.padding_height,
    )


def grid_position(frame_index: int, columns: int, rows: int) -> Tuple[int, int]:
    """
    Row and column of a frame, rows counted from the bottom

    Sheets are row-major from the top left; slice coordinates start at the
    bottom left, so the row is flipped.
    """
    row = rows - frame_index // columns - 1
    column = frame_index % columns
    return row, column


def frame_index_at(row: int, column: int, columns: int, rows: int) -> int:
    """Inverse of grid_position"""
    return (rows - row - 1) * columns + column


def frame_rect(grid: SheetGrid, frame_index: int) -> Rect:
    row, column = grid_position(frame_index, grid.columns, grid.rows)
    # Padding sits at the right and bottom of the image. Both coordinate systems
    # share the left edge, so only the vertical padding needs to be added.
    return Rect(
        float(grid.cell_width * column),
        float(grid.padding_height + grid.cell_height * row),
        float(grid.cell_width),
        float(grid.cell_height),
    )


def compute_pivot(rect: Rect, config: SlicingConfig,
                  description_id: Optional[str] = None) -> Tuple[float, float]:
    """Normalized pivot for a slice"""
    placement = config.pivot_placement
    if placement in ALIGNMENT_PIVOTS:
        return ALIGNMENT_PIVOTS[placement]
    if placement is not PivotPlacement.CUSTOM:
        raise ConfigurationError(f"Unknown pivot placement {placement!r}", description_id)

    if config.custom_pivot_mode is CustomPivotMode.TILEMAP:
        ppu = config.pixels_per_unit
        grid_x, grid_y = config.tilemap_grid_size
        if ppu <= 0 or grid_x <= 0 or grid_y <= 0:
            raise ConfigurationError(
                f"Tilemap pivots need positive pixels per unit and grid size, got "
                f"{ppu:g} and {grid_x:g}x{grid_y:g}",
                description_id,
            )
        return (
            _tile_pivot(rect.w, ppu * grid_x),
            _tile_pivot(rect.h, ppu * grid_y),
        )

    raise ConfigurationError(f"Unknown custom pivot mode {config.custom_pivot_mode!r}", description_id)


def _tile_pivot(length: float, tile_length: float) -> float:
    if length <= 0:
        return 0.5
    tiles = length / tile_length
    return 1 / (2 * tiles)


def derive_frame_slice(description: SheetDescription, frame_index: int, name: str,
                       config: SlicingConfig, pixels: Optional[PixelBuffer] = None,
                       log: Optional[ImportLog] = None,
                       grid: Optional[SheetGrid] = None) -> FrameSlice:
    """
    Build the slice for one frame of a sheet

    Args:
        description: Sheet description
        frame_index: Zero-based linear index in the effective grid
        name: Slice name, already formatted
        config: Slicing settings
        pixels: Texture alpha, required when trimming
        log: Diagnostics log
        grid: Precomputed effective grid

    Returns:
        The frame's slice
    """
    log = resolve_log(log)
    if grid is None:
        grid = effective_grid(description, config, log)

    if frame_index < 0 or frame_index >= grid.frame_count:
        raise OutOfRangeError(
            f"Frame {frame_index} ({name}) is outside the {grid.rows}x{grid.columns} sheet grid",
            description.id, index=frame_index, limit=grid.frame_count,
        )

    rect = frame_rect(grid, frame_index)
    row, column = grid_position(frame_index, grid.columns, grid.rows)
    log.verbose(
        f"Frame {frame_index} ({name}) is in row {row} and column {column}; its subrect is {rect}",
        category="slice", description_id=description.id,
    )

    if config.trim_individual_sprites:
        if pixels is None:
            raise ConfigurationError("Trimming is enabled but no pixel data was supplied", description.id)
        area = rect.to_int_rect()
        if not pixels.bounds.contains(area):
            raise OutOfRangeError(
                f"Frame {frame_index} ({name}) rect {area} extends beyond the "
                f"{pixels.width}x{pixels.height} texture",
                description.id, index=frame_index,
            )
        trimmed = find_trim_region(pixels, config.trim_alpha_threshold, area).to_rect()
        log.verbose(f"Trimmed sprite rect from {rect} to {trimmed}", category="trim",
                    description_id=description.id)
        rect = trimmed

    return FrameSlice(
        name=name,
        rect=rect,
        pivot=compute_pivot(rect, config, description.id),
        alignment=config.pivot_placement,
        source_frame_index=frame_index,
    )
