"""
Sheet slicing
Produces the ordered slice set of one texture and decides whether it changed
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..utils.diagnostics import ImportLog, resolve_log
from .config import SlicingConfig, StillsSubdivision
from .data_structures import FrameSlice, IntRect, SheetDescription
from .frame_rect import SheetGrid, derive_frame_slice, effective_grid
from .texture import PixelBuffer


@dataclass(frozen=True)
class SliceSetResult:
    image_file: str
    slices: Tuple[FrameSlice, ...]
    changed: bool

    def names(self) -> List[str]:
        return [s.name for s in self.slices]


def format_name(name: str, enabled: bool = True) -> str:
    """Replace spaces and hyphens with underscores and lower-case the name"""
    if not enabled:
        return name
    return name.replace(' ', '_').replace('-', '_').lower()


def format_rotation(rotation: float) -> str:
    """Render a rotation the way it appears in names: 90, 22.5"""
    if float(rotation).is_integer():
        return str(int(rotation))
    return f"{rotation:g}"


def still_frames(description: SheetDescription, config: SlicingConfig,
                 grid: SheetGrid) -> List[Tuple[int, str]]:
    """(effective frame index, raw name) for every still"""
    sub_cols, sub_rows = config.subdivision_counts
    cells = sub_cols * sub_rows
    base = description.base_name

    if cells == 1 or config.stills_subdivision is StillsSubdivision.MULTIPLY_COUNT:
        # Still i addresses effective cell i; names are not grouped per undivided still
        return [(i, f"{base}_{i}") for i in range(len(description.stills) * cells)]

    frames = []
    for still_index in range(len(description.stills)):
        base_row = still_index // description.num_columns
        base_column = still_index % description.num_columns
        for sub_row in range(sub_rows):
            for sub_column in range(sub_cols):
                frame = ((base_row * sub_rows + sub_row) * grid.columns
                         + base_column * sub_cols + sub_column)
                cell = sub_row * sub_cols + sub_column
                frames.append((frame, f"{base}_{still_index}_{cell}"))
    return frames


def animation_frames(description: SheetDescription) -> List[Tuple[int, str]]:
    """(frame index, raw name) for every animation frame, in definition order"""
    frames = []
    for animation in description.animations:
        rotation = format_rotation(animation.rotation)
        for frame in range(animation.start_frame, animation.end_frame):
            local = frame - animation.start_frame
            frames.append((frame, f"{description.base_name}_{animation.name}_rot{rotation}_{local}"))
    return frames


def slices_changed(new_slices: Sequence[FrameSlice],
                   previous_slices: Optional[Sequence[FrameSlice]],
                   was_multiple: bool = True) -> bool:
    """
    Whether a texture needs re-importing with the new slices

    The comparison is positional; any doubt counts as a change.
    """
    if not was_multiple or previous_slices is None:
        return True
    if len(new_slices) != len(previous_slices):
        return True
    return any(
        not new.same_geometry(old)
        for new, old in zip(new_slices, previous_slices)
    )


def slice_image(description: SheetDescription, image_file: str, config: SlicingConfig,
                pixels: Optional[PixelBuffer] = None,
                previous: Optional[Sequence[FrameSlice]] = None,
                was_multiple: bool = True,
                texture_size: Optional[Tuple[int, int]] = None,
                log: Optional[ImportLog] = None) -> SliceSetResult:
    """
    Slice one texture of a sheet description

    Stills come first, then every animation frame in definition order. Even a
    single sprite is sliced in multiple mode so trimming can apply to it.

    Args:
        description: Sheet description
        image_file: Texture being sliced, used for reporting
        config: Slicing settings
        pixels: Texture alpha, required when trimming
        previous: Slices currently stored for the texture
        was_multiple: Whether the texture was already imported as a multi-sprite sheet
        texture_size: (width, height) of the texture, if known
        log: Diagnostics log

    Returns:
        SliceSetResult with the new slices and the change flag
    """
    log = resolve_log(log)
    grid = effective_grid(description, config, log)

    slices = []
    for frame, raw_name in still_frames(description, config, grid) + animation_frames(description):
        name = format_name(raw_name, config.format_file_names)
        slices.append(derive_frame_slice(description, frame, name, config, pixels, log, grid))

    if texture_size is None and pixels is not None:
        texture_size = pixels.size
    if texture_size is not None:
        bounds = IntRect(0, 0, texture_size[0], texture_size[1])
        for frame_slice in slices:
            if not bounds.contains(frame_slice.rect.to_int_rect()):
                log.warning(
                    f"Slice {frame_slice.name} {frame_slice.rect} extends beyond the "
                    f"{texture_size[0]}x{texture_size[1]} texture {image_file}",
                    category="slice", description_id=description.id,
                )

    log.info(f"Asset \"{image_file}\" has been sliced into {len(slices)} sprites",
             category="slice", description_id=description.id)

    changed = slices_changed(slices, previous, was_multiple)
    if changed:
        log.verbose(f"Asset at \"{image_file}\" will be re-imported due to new slices",
                    category="slice", description_id=description.id)
    else:
        log.verbose(f"Asset at \"{image_file}\" was already sliced correctly",
                    category="slice", description_id=description.id)

    return SliceSetResult(image_file=image_file, slices=tuple(slices), changed=changed)
