"""Document transforms."""

from blurry.transform.blurry_placeholders import (
    AddBlurryImagePlaceholders,
    add_blurry_image_placeholders,
)
from blurry.transform.selection import PlaceholderCandidate, iter_candidates, select_candidates

__all__ = [
    "AddBlurryImagePlaceholders",
    "PlaceholderCandidate",
    "add_blurry_image_placeholders",
    "iter_candidates",
    "select_candidates",
]
