"""Tests for the trim region finder."""

import numpy as np
import pytest

from sheetslice.core import ConfigurationError, IntRect, PixelBuffer, find_trim_region
from sheetslice.core.trim import trimmed_region


def blank(width: int, height: int) -> list:
    return [[0.0] * width for _ in range(height)]


@pytest.fixture
def single_pixel() -> PixelBuffer:
    """6x6 texture with one opaque pixel, three columns in and two rows down."""
    rows = blank(6, 6)
    rows[2][3] = 1.0
    return PixelBuffer.from_rows(rows)


class TestPixelBuffer:
    def test_rows_are_flipped_to_bottom_origin(self, single_pixel):
        # Row 2 from the top is row 3 from the bottom
        assert single_pixel.alpha_at(3, 3) == 1.0
        assert single_pixel.alpha_at(3, 2) == 0.0
        assert single_pixel.size == (6, 6)

    def test_region_outside_texture_raises(self, single_pixel):
        with pytest.raises(ValueError):
            single_pixel.region(IntRect(4, 4, 4, 4))

    def test_rejects_non_2d_alpha(self):
        with pytest.raises(ValueError):
            PixelBuffer(np.zeros((2, 2, 4)))


class TestFindTrimRegion:
    def test_single_pixel_gets_one_pixel_margin(self, single_pixel):
        assert find_trim_region(single_pixel) == IntRect(2, 2, 3, 3)

    def test_trimming_is_idempotent(self, single_pixel):
        first = find_trim_region(single_pixel)
        assert find_trim_region(single_pixel, area=first) == first

    def test_margin_is_clamped_to_search_area(self):
        rows = blank(4, 4)
        rows[0][0] = 1.0
        pixels = PixelBuffer.from_rows(rows)
        # Top-left pixel sits at x=0, y=3 in bottom-left coordinates
        assert find_trim_region(pixels) == IntRect(0, 2, 2, 2)

    def test_transparent_area_gives_zero_area_at_origin(self):
        pixels = PixelBuffer.from_rows(blank(4, 4))
        result = find_trim_region(pixels, area=IntRect(2, 0, 2, 2))
        assert result == IntRect(2, 0, 0, 0)
        assert result.area == 0

    def test_alpha_at_threshold_counts_as_empty(self):
        rows = blank(4, 4)
        rows[1][1] = 0.5
        pixels = PixelBuffer.from_rows(rows)
        assert find_trim_region(pixels, 0.5).area == 0
        assert find_trim_region(pixels, 0.4).area > 0

    def test_corner_notches_are_not_trimmed(self):
        # Opposite corners only: rows and columns are scanned separately
        rows = blank(4, 4)
        rows[0][0] = 1.0
        rows[3][3] = 1.0
        pixels = PixelBuffer.from_rows(rows)
        assert find_trim_region(pixels) == IntRect(0, 0, 4, 4)

    def test_search_area_offsets_result(self):
        rows = blank(8, 4)
        rows[1][5] = 1.0
        pixels = PixelBuffer.from_rows(rows)
        assert find_trim_region(pixels, area=IntRect(4, 0, 4, 4)) == IntRect(4, 1, 3, 3)

    def test_pixels_outside_search_area_are_ignored(self):
        rows = blank(8, 4)
        rows[1][1] = 1.0
        pixels = PixelBuffer.from_rows(rows)
        assert find_trim_region(pixels, area=IntRect(4, 0, 4, 4)) == IntRect(4, 0, 0, 0)

    def test_threshold_out_of_range(self, single_pixel):
        with pytest.raises(ConfigurationError):
            find_trim_region(single_pixel, 1.5)

    def test_trimmed_region_values(self, single_pixel):
        region = trimmed_region(single_pixel)
        assert region.shape == (3, 3)
        assert region[1, 1] == 1.0
        assert region.sum() == 1.0
