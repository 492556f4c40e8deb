"""
Pixel access for sheet textures
Loads images through Pillow and exposes their alpha channel in bottom-left coordinates
"""

import os
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

try:
    # pillow-heif registers AVIF/HEIF loaders without requiring the user to
    # build Pillow with AVIF support.
    from pillow_heif import open_heif, register_heif_opener

    register_heif_opener()
    _heif_available_error: Optional[str] = None
except ImportError as heif_exc:  # pragma: no cover - optional dependency
    open_heif = None
    _heif_available_error = str(heif_exc)

HEIF_EXTENSIONS = ('.avif', '.avifs', '.heif', '.heic')

from .data_structures import IntRect


class PixelBuffer:
    """
    Read-only alpha channel of a texture

    Alpha values are floats in [0, 1]. Row 0 of the stored array is the bottom
    row of the image, matching the slice coordinate space.
    """

    def __init__(self, alpha: np.ndarray):
        alpha = np.asarray(alpha, dtype=np.float32)
        if alpha.ndim != 2:
            raise ValueError(f"Alpha channel must be 2D, got shape {alpha.shape}")
        self.alpha = alpha

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        img_data = np.array(img.convert('RGBA'), dtype=np.float32) / 255.0
        # Image rows run top to bottom; slices count from the bottom
        return cls(np.flipud(img_data[:, :, 3]))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "PixelBuffer":
        """Build a buffer from alpha rows listed top to bottom, as they appear in an image"""
        return cls(np.flipud(np.array(rows, dtype=np.float32)))

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def bounds(self) -> IntRect:
        return IntRect(0, 0, self.width, self.height)

    def alpha_at(self, x: int, y: int) -> float:
        return float(self.alpha[y, x])

    def region(self, rect: IntRect) -> np.ndarray:
        """Alpha values inside rect, row 0 being the rect's bottom row"""
        if not self.bounds.contains(rect):
            raise ValueError(f"Region {rect} lies outside the {self.width}x{self.height} texture")
        return self.alpha[rect.y:rect.y_max, rect.x:rect.x_max]


def load_pixel_buffer(image_path: str) -> PixelBuffer:
    """
    Load the alpha channel of a sheet texture

    Falls back to pillow-heif for AVIF/HEIF sources Pillow cannot decode.

    Args:
        image_path: Path to the image file

    Returns:
        PixelBuffer for the image
    """
    suffix = os.path.splitext(image_path)[1].lower()
    try:
        with Image.open(image_path) as img:
            return PixelBuffer.from_image(img)
    except UnidentifiedImageError as pil_exc:
        if suffix not in HEIF_EXTENSIONS:
            raise
        pil_error = pil_exc

    if open_heif is None:
        extra = f" ({_heif_available_error})" if _heif_available_error else ""
        raise RuntimeError(
            f"Failed to decode HEIF/AVIF texture '{os.path.basename(image_path)}': "
            f"{pil_error}; pillow-heif unavailable{extra}"
        )
    heif_file = open_heif(image_path, convert_hdr_to_8bit=True)
    return PixelBuffer.from_image(heif_file.to_pillow())


def probe_image_size(image_path: str) -> Tuple[int, int]:
    """Return the on-disk pixel dimensions of a texture, (0, 0) if unreadable."""
    try:
        with Image.open(image_path) as img:
            return img.width, img.height
    except (OSError, UnidentifiedImageError):
        return 0, 0
