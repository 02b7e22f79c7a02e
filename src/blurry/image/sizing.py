"""Thumbnail dimensions for placeholder bitmaps."""

import math

from blurry.config.constants import PIXEL_TARGET
from blurry.exceptions import SizingError


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_thumbnail_size(
    width: float, height: float, pixel_target: int = PIXEL_TARGET
) -> tuple[int, int]:
    """Calculate bitmap dimensions of roughly ``pixel_target`` pixels.

    The bitmap keeps the source aspect ratio r = width / height while
    w * h ~= P:

        h * r * h = P  =>  h = sqrt(P / r),  w = P / h

    Both sides are rounded half up and never drop below one pixel.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        pixel_target: Approximate pixel count of the bitmap

    Returns:
        Tuple of (width, height)

    Raises:
        SizingError: If either dimension is zero, negative or not finite
    """
    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise SizingError(width, height)

    ratio = width / height
    bitmap_height = math.sqrt(pixel_target / ratio)
    bitmap_width = pixel_target / bitmap_height
    return max(1, _round_half_up(bitmap_width)), max(1, _round_half_up(bitmap_height))
