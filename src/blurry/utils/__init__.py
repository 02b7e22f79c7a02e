"""Utility module for blurry."""

from blurry.utils.concurrency import ConcurrencyManager, TaskResult
from blurry.utils.paths import is_absolute_url, resolve_image_path

__all__ = [
    # Concurrency
    "ConcurrencyManager",
    "TaskResult",
    # Paths
    "is_absolute_url",
    "resolve_image_path",
]
