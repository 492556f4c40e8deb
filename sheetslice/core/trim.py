"""
Trim region search
Finds the bounding box of visible pixels inside a search area of a texture
"""

from typing import Optional

import numpy as np

from .data_structures import IntRect
from .errors import ConfigurationError
from .texture import PixelBuffer


def find_trim_region(pixels: PixelBuffer, threshold: float = 0.0,
                     area: Optional[IntRect] = None) -> IntRect:
    """
    Find the smallest rectangle holding every pixel with alpha above threshold

    Each edge is found independently by scanning inward until a non-empty row
    or column appears; the edge then backs off one pixel so anti-aliased
    borders survive, without leaving the search area. Corner notches are not
    trimmed since rows and columns are scanned separately.

    Args:
        pixels: Texture alpha
        threshold: Alpha at or below this counts as empty, in [0, 1]
        area: Search area in texture coordinates (default: whole texture)

    Returns:
        Trimmed rectangle in texture coordinates; a zero-area rectangle at the
        search area's origin if nothing is visible
    """
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"Trim alpha threshold must be within [0, 1], got {threshold}")

    if area is None:
        area = pixels.bounds
    if area.is_empty:
        return IntRect(area.x, area.y, 0, 0)

    visible = pixels.region(area) > threshold
    filled_rows = np.flatnonzero(visible.any(axis=1))
    if filled_rows.size == 0:
        return IntRect(area.x, area.y, 0, 0)
    filled_cols = np.flatnonzero(visible.any(axis=0))

    last_row = area.h - 1
    last_col = area.w - 1

    bottom = max(int(filled_rows[0]) - 1, 0)
    top = min(int(filled_rows[-1]) + 1, last_row)
    left = max(int(filled_cols[0]) - 1, 0)
    right = min(int(filled_cols[-1]) + 1, last_col)

    return IntRect(area.x + left, area.y + bottom, right - left + 1, top - bottom + 1)


def trimmed_region(pixels: PixelBuffer, threshold: float = 0.0,
                   area: Optional[IntRect] = None) -> np.ndarray:
    """Alpha values of the trimmed region, for previews"""
    return pixels.region(find_trim_region(pixels, threshold, area))
