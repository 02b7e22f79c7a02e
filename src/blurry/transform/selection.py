"""Selection of the elements that receive blurry placeholders."""

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice

from blurry.config.constants import (
    IMAGE_TAG,
    LAYOUT_ATTR,
    MAX_BLURRED_PLACEHOLDERS,
    NO_LOADING_ATTR,
    PLACEHOLDER_ATTR,
    POSTER_ATTR,
    QUALIFYING_SUFFIXES,
    RESPONSIVE_LAYOUT,
    SRC_ATTR,
    TEMPLATE_TAG,
    VIDEO_TAG,
)
from blurry.dom.cursor import PreOrderCursor
from blurry.dom.protocols import DocumentNode


@dataclass(frozen=True, eq=False)
class PlaceholderCandidate:
    """An element selected for a placeholder and the image it is built from."""

    node: DocumentNode
    src: str
    tag_name: str

    def __str__(self) -> str:
        return f"<{self.tag_name}> {self.src}"


def get_image_reference(node: DocumentNode) -> str | None:
    """The image a placeholder would be built from: an amp-img's src or an amp-video's poster."""
    if node.tag_name == IMAGE_TAG:
        return node.attributes.get(SRC_ATTR)
    if node.tag_name == VIDEO_TAG:
        return node.attributes.get(POSTER_ATTR)
    return None


def has_placeholder(node: DocumentNode) -> bool:
    """Check if an element already has a placeholder child."""
    return any(PLACEHOLDER_ATTR in child.attributes for child in node.children)


def should_add_blurry_placeholder(node: DocumentNode, src: str | None) -> bool:
    """Check if an element should get a blurred image placeholder.

    The first failing check excludes the element:

    - there is an image reference and no existing placeholder child;
    - the reference is a JPEG (blurring suits photos, not icons or diagrams);
    - an amp-img does not opt out of loading indicators with ``noloading``;
    - the element is an amp-video poster or a responsive amp-img, the two
      places blurred placeholders are most often wanted.
    """
    if not src:
        return False
    if has_placeholder(node):
        return False
    if not src.endswith(QUALIFYING_SUFFIXES):
        return False

    tag_name = node.tag_name
    if tag_name == IMAGE_TAG and NO_LOADING_ATTR in node.attributes:
        return False

    is_poster = tag_name == VIDEO_TAG
    is_responsive_image = (
        tag_name == IMAGE_TAG and node.attributes.get(LAYOUT_ATTR) == RESPONSIVE_LAYOUT
    )
    return is_poster or is_responsive_image


def iter_candidates(body: DocumentNode) -> Iterator[PlaceholderCandidate]:
    """Yield qualifying elements under ``body`` in document order.

    Template content is inert and its subtree is never inspected.
    """
    cursor = PreOrderCursor(body)
    for node in cursor:
        if node.tag_name == TEMPLATE_TAG:
            cursor.skip_subtree()
            continue

        src = get_image_reference(node)
        if should_add_blurry_placeholder(node, src):
            yield PlaceholderCandidate(node=node, src=src, tag_name=node.tag_name)


def select_candidates(
    body: DocumentNode, limit: int = MAX_BLURRED_PLACEHOLDERS
) -> list[PlaceholderCandidate]:
    """Return the first ``limit`` candidates; the walk stops once the cap is reached."""
    return list(islice(iter_candidates(body), limit))
