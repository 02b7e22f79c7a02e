"""Inline SVG markup for blurred placeholders."""

from blurry.markup.svg import build_placeholder_src, build_svg, collapse_whitespace, escape_svg

__all__ = [
    "build_placeholder_src",
    "build_svg",
    "collapse_whitespace",
    "escape_svg",
]
