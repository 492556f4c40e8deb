"""Tests for frame rectangle and pivot derivation."""

from dataclasses import replace

import pytest

from sheetslice.core import (
    ConfigurationError,
    CustomPivotMode,
    OutOfRangeError,
    PivotPlacement,
    PixelBuffer,
    Rect,
    derive_frame_slice,
    effective_grid,
    frame_index_at,
    grid_position,
)
from sheetslice.core.frame_rect import compute_pivot


class TestGridPosition:
    def test_bottom_row_is_last_sheet_row(self):
        assert grid_position(5, 4, 2) == (0, 1)
        assert grid_position(0, 4, 2) == (1, 0)

    def test_inverse_recovers_every_index(self):
        columns, rows = 5, 3
        for index in range(columns * rows):
            row, column = grid_position(index, columns, rows)
            assert frame_index_at(row, column, columns, rows) == index


class TestEffectiveGrid:
    def test_without_subdivision(self, make_description, config):
        grid = effective_grid(make_description(), config)
        assert (grid.columns, grid.rows, grid.cell_width, grid.cell_height) == (4, 2, 32, 32)

    def test_subdivision_multiplies_grid(self, make_description, config):
        config = replace(config, subdivide_sprites=True, subdivisions=(2, 4))
        grid = effective_grid(make_description(), config)
        assert (grid.columns, grid.rows, grid.cell_width, grid.cell_height) == (8, 8, 16, 8)

    def test_subdivisions_ignored_when_disabled(self, make_description, config):
        config = replace(config, subdivisions=(2, 2))
        assert effective_grid(make_description(), config).columns == 4

    def test_remainder_warns_and_floors(self, make_description, config, log):
        description = make_description(spriteWidth=30)
        config = replace(config, subdivide_sprites=True, subdivisions=(4, 1))
        grid = effective_grid(description, config, log)
        assert grid.cell_width == 7
        assert len(log.entries("WARNING")) == 1

    def test_zero_columns_is_configuration_error(self, make_description, config):
        with pytest.raises(ConfigurationError):
            effective_grid(make_description(numColumns=0), config)

    def test_zero_subdivisions_is_configuration_error(self, make_description, config):
        config = replace(config, subdivide_sprites=True, subdivisions=(0, 1))
        with pytest.raises(ConfigurationError):
            effective_grid(make_description(), config)


class TestDeriveFrameSlice:
    def test_scenario_frame_five(self, make_description, config):
        frame = derive_frame_slice(make_description(), 5, "obj_5", config)
        assert frame.rect == Rect(32, 0, 32, 32)
        assert frame.pivot == (0.5, 0.5)
        assert frame.source_frame_index == 5

    def test_vertical_padding_is_added(self, make_description, config):
        description = make_description(paddingHeight=8, paddingWidth=12)
        frame = derive_frame_slice(description, 0, "obj_0", config)
        assert frame.rect == Rect(0, 40, 32, 32)

    def test_subdivided_cell(self, make_description, config):
        config = replace(config, subdivide_sprites=True, subdivisions=(2, 2))
        frame = derive_frame_slice(make_description(), 0, "obj_0", config)
        assert frame.rect == Rect(0, 48, 16, 16)

    def test_index_past_grid(self, make_description, config):
        with pytest.raises(OutOfRangeError) as exc_info:
            derive_frame_slice(make_description(), 8, "obj_8", config)
        assert exc_info.value.description_id == "sheets/hero.ssdata"
        assert exc_info.value.limit == 8

    def test_trim_replaces_rect(self, make_description, config):
        rows = [[0.0] * 8 for _ in range(4)]
        rows[1][5] = 1.0
        pixels = PixelBuffer.from_rows(rows)
        description = make_description(spriteWidth=4, spriteHeight=4, numColumns=2, numRows=1)
        config = replace(config, trim_individual_sprites=True)
        frame = derive_frame_slice(description, 1, "obj_1", config, pixels)
        assert frame.rect == Rect(4, 1, 3, 3)

    def test_trim_without_pixels(self, make_description, config):
        config = replace(config, trim_individual_sprites=True)
        with pytest.raises(ConfigurationError):
            derive_frame_slice(make_description(), 0, "obj_0", config)

    def test_trim_beyond_texture(self, make_description, config):
        pixels = PixelBuffer.from_rows([[1.0] * 16 for _ in range(16)])
        config = replace(config, trim_individual_sprites=True)
        with pytest.raises(OutOfRangeError):
            derive_frame_slice(make_description(), 0, "obj_0", config, pixels)


class TestPivots:
    def test_fixed_alignments(self, config):
        rect = Rect(0, 0, 32, 32)
        assert compute_pivot(rect, replace(config, pivot_placement=PivotPlacement.BOTTOM_CENTER)) == (0.5, 0.0)
        assert compute_pivot(rect, replace(config, pivot_placement=PivotPlacement.TOP_LEFT)) == (0.0, 1.0)

    def test_tilemap_pivot(self, config):
        config = replace(config, pivot_placement=PivotPlacement.CUSTOM, pixels_per_unit=16.0)
        assert compute_pivot(Rect(0, 0, 32, 32), config) == pytest.approx((0.25, 0.25))
        wide = replace(config, tilemap_grid_size=(2.0, 1.0))
        assert compute_pivot(Rect(0, 0, 32, 32), wide) == pytest.approx((0.5, 0.25))

    def test_tilemap_pivot_of_empty_slice(self, config):
        config = replace(config, pivot_placement=PivotPlacement.CUSTOM)
        assert compute_pivot(Rect(3, 3, 0, 0), config) == (0.5, 0.5)

    def test_unknown_custom_mode(self, make_description, config):
        config = replace(config, pivot_placement=PivotPlacement.CUSTOM, custom_pivot_mode="isometric")
        with pytest.raises(ConfigurationError):
            derive_frame_slice(make_description(), 0, "obj_0", config)

    def test_non_positive_pixels_per_unit(self, config):
        config = replace(config, pivot_placement=PivotPlacement.CUSTOM,
                         custom_pivot_mode=CustomPivotMode.TILEMAP, pixels_per_unit=0.0)
        with pytest.raises(ConfigurationError):
            compute_pivot(Rect(0, 0, 32, 32), config)

    def test_slice_records_alignment(self, make_description, config):
        config = replace(config, pivot_placement=PivotPlacement.BOTTOM_LEFT)
        frame = derive_frame_slice(make_description(), 0, "obj_0", config)
        assert frame.alignment is PivotPlacement.BOTTOM_LEFT
        assert frame.pivot == (0.0, 0.0)
