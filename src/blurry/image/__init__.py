"""Bitmap sizing and encoding for placeholders."""

from blurry.image.encoder import BitmapEncoder, DataURIResult
from blurry.image.sizing import compute_thumbnail_size

__all__ = [
    "BitmapEncoder",
    "DataURIResult",
    "compute_thumbnail_size",
]
