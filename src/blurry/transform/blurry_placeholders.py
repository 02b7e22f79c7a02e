"""Adds blurry placeholders to amp-img elements and amp-video posters.

A placeholder is a blurred, very low resolution copy of the original image,
inlined as an SVG data URI. It is displayed while the element renders and fades
out once the real image has loaded. Only JPEGs qualify, and only when they are
responsive amp-imgs or amp-video posters, where such placeholders are most
commonly wanted. At most five placeholders are added per document.

Supported options:

* ``imageBasePath``: base path or URL used to resolve image references.
"""

from collections.abc import Mapping
from contextlib import nullcontext
from typing import Any

import anyio

from blurry.config.constants import (
    CLASS_ATTR,
    MAX_BLURRED_PLACEHOLDERS,
    PLACEHOLDER_ATTR,
    PLACEHOLDER_CLASS,
    PLACEHOLDER_TAG,
    SRC_ATTR,
    TRANSFORMER_NAME,
)
from blurry.config.settings import BlurrySettings, TransformOptions
from blurry.dom.protocols import DocumentNode, DocumentTree
from blurry.exceptions import DocumentStructureError, ImageProcessingError
from blurry.image.encoder import BitmapEncoder
from blurry.markup.svg import build_placeholder_src
from blurry.transform.selection import PlaceholderCandidate, select_candidates
from blurry.utils.concurrency import ConcurrencyManager, TaskResult
from blurry.utils.logging import get_logger
from blurry.utils.paths import resolve_image_path

log = get_logger(__name__)


def _first_child_by_tag(node: DocumentNode, tag_name: str) -> DocumentNode:
    for child in node.children:
        if child.tag_name == tag_name:
            return child
    raise DocumentStructureError(tag_name)


class AddBlurryImagePlaceholders:
    """Transformer that appends blurry placeholder images to a document."""

    def __init__(
        self,
        encoder: BitmapEncoder | None = None,
        concurrency: ConcurrencyManager | None = None,
        max_placeholders: int = MAX_BLURRED_PLACEHOLDERS,
        encode_timeout: float | None = None,
    ) -> None:
        """Initialize the transformer.

        Args:
            encoder: Bitmap encoder (default BitmapEncoder())
            concurrency: Concurrency manager bounding parallel image work
            max_placeholders: Maximum placeholders added per document
            encode_timeout: Optional per-image time limit in seconds
        """
        self.encoder = encoder or BitmapEncoder()
        self.concurrency = concurrency or ConcurrencyManager()
        self.max_placeholders = max_placeholders
        self.encode_timeout = encode_timeout

    @classmethod
    def from_settings(cls, settings: BlurrySettings) -> "AddBlurryImagePlaceholders":
        """Create a transformer configured from application settings."""
        return cls(
            concurrency=ConcurrencyManager(image_workers=settings.image_workers),
            encode_timeout=settings.encode_timeout,
        )

    async def transform(
        self,
        tree: DocumentTree,
        options: TransformOptions | Mapping[str, Any] | None = None,
    ) -> list[TaskResult[PlaceholderCandidate]]:
        """Add blurred placeholders in all appropriate places of a document.

        Every placeholder is built concurrently; the call returns once all of
        them have either been appended or failed. A failure only affects its
        own element and is logged, never raised.

        Args:
            tree: The document to modify in place
            options: Transform options (``imageBasePath``)

        Returns:
            One TaskResult per selected element, in document order. Successful
            results carry the appended placeholder node.

        Raises:
            DocumentStructureError: If the document has no html or body element
        """
        params = TransformOptions.coerce(options)
        html = _first_child_by_tag(tree.root, "html")
        body = _first_child_by_tag(html, "body")

        candidates = select_candidates(body, self.max_placeholders)
        if not candidates:
            return []

        log.debug("Adding blurry placeholders", count=len(candidates))

        async def add_placeholder(candidate: PlaceholderCandidate) -> DocumentNode:
            placeholder = await self._create_placeholder(tree, candidate.src, params)
            candidate.node.append_child(placeholder)
            return placeholder

        results = await self.concurrency.map_image_tasks(
            candidates,
            add_placeholder,
            task_name=TRANSFORMER_NAME,
        )

        added = sum(1 for r in results if r.success)
        log.debug("Blurry placeholders added", added=added, failed=len(results) - added)
        return results

    async def _create_placeholder(
        self, tree: DocumentTree, src: str, params: TransformOptions
    ) -> DocumentNode:
        """Build the placeholder img element for an image reference."""
        image_path = resolve_image_path(params.image_base_path, src)

        timeout = anyio.fail_after(self.encode_timeout) if self.encode_timeout else nullcontext()
        try:
            with timeout:
                bitmap = await self.encoder.encode(image_path)
        except TimeoutError as e:
            raise ImageProcessingError(
                image_path, f"timed out after {self.encode_timeout}s", cause=e
            ) from e

        return tree.create_element(
            PLACEHOLDER_TAG,
            {
                CLASS_ATTR: PLACEHOLDER_CLASS,
                PLACEHOLDER_ATTR: "",
                SRC_ATTR: build_placeholder_src(bitmap.src, bitmap.width, bitmap.height),
            },
        )


async def add_blurry_image_placeholders(
    tree: DocumentTree,
    options: TransformOptions | Mapping[str, Any] | None = None,
) -> list[TaskResult[PlaceholderCandidate]]:
    """Run the default transformer over a document."""
    return await AddBlurryImagePlaceholders().transform(tree, options)
