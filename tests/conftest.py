"""Pytest configuration and fixtures."""

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_image(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a solid-colour image into the temporary directory."""

    def _make_image(
        name: str = "photo.jpg",
        size: tuple[int, int] = (400, 300),
        color: str = "orange",
        mode: str = "RGB",
        fmt: str = "JPEG",
    ) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color=color).save(path, format=fmt)
        return path

    return _make_image


@pytest.fixture
def sample_jpeg(make_image) -> Path:
    """A 400x300 JPEG."""
    return make_image("photo.jpg")


@pytest.fixture
def broken_jpeg(temp_dir: Path) -> Path:
    """A file with a .jpg name that is not an image."""
    path = temp_dir / "broken.jpg"
    path.write_bytes(b"this is not a jpeg")
    return path
