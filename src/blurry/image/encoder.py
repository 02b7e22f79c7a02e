"""Decode, downsample and re-encode source images into bitmap data URIs."""

import base64
import io
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

import anyio
from PIL import Image, ImageOps

from blurry.config.constants import BITMAP_FORMAT, BITMAP_MIME_TYPE, PIXEL_TARGET
from blurry.exceptions import ImageProcessingError
from blurry.image.sizing import compute_thumbnail_size
from blurry.utils.logging import get_logger
from blurry.utils.paths import is_absolute_url

log = get_logger(__name__)

# Modes that resize smoothly and can be written as PNG without conversion
_RESIZABLE_MODES = {"RGB", "RGBA", "L", "LA"}


@dataclass(frozen=True)
class DataURIResult:
    """A bitmap encoded as a data URI along with its pixel dimensions."""

    src: str
    width: int
    height: int


class BitmapEncoder:
    """Turn a source raster image into a tiny PNG data URI."""

    def __init__(self, pixel_target: int = PIXEL_TARGET) -> None:
        """Initialize the encoder.

        Args:
            pixel_target: Approximate pixel count of the generated bitmap
        """
        self.pixel_target = pixel_target

    async def encode(self, image_path: str) -> DataURIResult:
        """Create the placeholder bitmap for an image.

        Decoding and resampling are CPU bound, so they run in a worker thread.
        If the caller is cancelled (e.g. by a timeout) the thread is abandoned.

        Args:
            image_path: Absolute file path or ``file:`` URL of the source image

        Returns:
            The PNG data URI and the bitmap's width and height

        Raises:
            ImageProcessingError: If the image cannot be read, decoded or encoded
        """
        return await anyio.to_thread.run_sync(
            self._encode_sync, image_path, abandon_on_cancel=True
        )

    def _encode_sync(self, image_path: str) -> DataURIResult:
        """Synchronous decode, resize and encode."""
        source = self._to_local_path(image_path)

        try:
            with Image.open(source) as img:
                img.load()
                thumbnail = self._resize(ImageOps.exif_transpose(img))
            data = self._save_png(thumbnail)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageProcessingError(image_path, str(e), cause=e) from e

        width, height = thumbnail.size
        log.debug(
            "Placeholder bitmap encoded",
            path=image_path,
            width=width,
            height=height,
            size=len(data),
        )
        return DataURIResult(
            src=f"data:{BITMAP_MIME_TYPE};base64,{base64.b64encode(data).decode('ascii')}",
            width=width,
            height=height,
        )

    def _to_local_path(self, image_path: str) -> Path:
        """Map a file path or file: URL to a local path; other URLs are not fetched."""
        if not is_absolute_url(image_path):
            return Path(image_path)

        parts = urlsplit(image_path)
        if parts.scheme != "file":
            raise ImageProcessingError(
                image_path, f"unsupported URL scheme '{parts.scheme}', remote images are not fetched"
            )
        return Path(url2pathname(parts.path))

    def _resize(self, img: Image.Image) -> Image.Image:
        """Downsample to the thumbnail size with a bicubic filter."""
        width, height = compute_thumbnail_size(img.width, img.height, self.pixel_target)

        # Pillow falls back to nearest-neighbour for palette and bilevel images
        if img.mode not in _RESIZABLE_MODES:
            has_alpha = "A" in img.getbands() or "transparency" in img.info
            img = img.convert("RGBA" if has_alpha else "RGB")

        return img.resize((width, height), Image.Resampling.BICUBIC)

    def _save_png(self, img: Image.Image) -> bytes:
        """Encode an image as PNG."""
        output = io.BytesIO()
        img.save(output, format=BITMAP_FORMAT, optimize=True)
        return output.getvalue()
