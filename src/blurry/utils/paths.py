"""Resolution of image references against a base path or URL."""

import os
import posixpath
from urllib.parse import urljoin, urlsplit, urlunsplit

# Schemes whose URLs have an authority and a "/"-rooted path
_HIERARCHICAL_SCHEMES = {"http", "https", "ftp", "ws", "wss", "file"}


def is_absolute_url(value: str) -> bool:
    """Check whether ``value`` is an absolute URL.

    A single-letter scheme is a Windows drive letter, not a URL.
    """
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return len(parts.scheme) > 1


def _remove_dot_segments(path: str) -> str:
    if not path:
        return path
    normalized = posixpath.normpath(path)
    # normpath keeps a leading "//" and drops a trailing "/"
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if path.endswith(("/", "/.", "/..")) and normalized != "/":
        normalized += "/"
    return normalized


def normalize_url(url: str) -> str:
    """Normalize an absolute URL: lowercase scheme and host, no dot segments."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.netloc.lower()
    path = parts.path
    if scheme in _HIERARCHICAL_SCHEMES:
        path = _remove_dot_segments(path) or "/"
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def _merge_url(base: str, reference: str) -> str:
    # Reference merge for schemes urljoin does not treat as hierarchical
    ref = urlsplit(reference)
    parts = urlsplit(base)
    if ref.netloc:
        return urlunsplit((parts.scheme, ref.netloc, ref.path, ref.query, ref.fragment))
    if not ref.path:
        path, query = parts.path, ref.query or parts.query
    elif ref.path.startswith("/"):
        path, query = ref.path, ref.query
    else:
        path = parts.path[: parts.path.rfind("/") + 1] + ref.path
        if parts.netloc and not path.startswith("/"):
            path = "/" + path
        query = ref.query
    return urlunsplit(
        (parts.scheme, parts.netloc, _remove_dot_segments(path), query, ref.fragment)
    )


def _join_segments(base: str, reference: str) -> str:
    # Segments are concatenated: a rooted reference stays under the base
    if not base:
        return reference
    if not reference:
        return base
    return base.rstrip("/\\") + os.sep + reference.lstrip("/\\")


def resolve_image_path(base_path: str, reference: str) -> str:
    """Resolve an image reference to a loadable URL or absolute file path.

    If the reference is an absolute URL, or the base is one, the joined URL is
    returned normalized. Otherwise both are treated as path segments, joined
    and made absolute. Never raises.

    Args:
        base_path: The configured base (may be empty)
        reference: The image reference taken from the document

    Returns:
        The resolved URL or absolute filesystem path
    """
    if is_absolute_url(reference):
        return normalize_url(reference)
    if is_absolute_url(base_path):
        try:
            joined = urljoin(base_path, reference)
            if not is_absolute_url(joined):
                joined = _merge_url(base_path, reference)
            return normalize_url(joined)
        except ValueError:
            pass
    joined = _join_segments(base_path, reference)
    # abspath keeps a leading "//", a resolved path never starts with one
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    return os.path.abspath(joined)
