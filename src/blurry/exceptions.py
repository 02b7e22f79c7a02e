"""Custom exceptions for blurry."""

from pathlib import Path


class BlurryError(Exception):
    """Base exception class for blurry."""

    pass


class SizingError(BlurryError, ValueError):
    """Source dimensions cannot produce a thumbnail."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid source dimensions for thumbnail: {width}x{height}")


class ImageProcessingError(BlurryError):
    """Error while decoding, resizing or encoding an image."""

    def __init__(self, path: str | Path, message: str, cause: Exception | None = None) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Could not create placeholder for {path}. Reason: {message}")


class DocumentStructureError(BlurryError):
    """The document tree lacks an element the transform requires."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(f"Document has no <{tag_name}> element")


class ConfigurationError(BlurryError):
    """Configuration error."""

    pass
