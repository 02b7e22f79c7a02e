"""SVG wrapper that blurs an embedded bitmap, packed for use as a data URI."""

import re

from blurry.config.constants import BLUR_STD_DEVIATION, SVG_DATA_URI_PREFIX, SVG_ESCAPE_TABLE

_WHITESPACE = re.compile(r"\s+")
_ESCAPES = str.maketrans(SVG_ESCAPE_TABLE)

# The alpha transfer flattens partial transparency left by resampling at the edges
_SVG_TEMPLATE = """<svg xmlns="http://www.w3.org/2000/svg"
    xmlns:xlink="http://www.w3.org/1999/xlink"
    viewBox="0 0 {width} {height}">
  <filter id="b" color-interpolation-filters="sRGB">
    <feGaussianBlur stdDeviation="{std_deviation}"></feGaussianBlur>
    <feComponentTransfer>
      <feFuncA type="discrete" tableValues="1 1"></feFuncA>
    </feComponentTransfer>
  </filter>
  <image filter="url(#b)" x="0" y="0"
    height="100%" width="100%"
    xlink:href="{href}">
  </image>
</svg>"""


def build_svg(data_uri: str, width: int, height: int) -> str:
    """Wrap a bitmap data URI in an SVG that blurs it across the viewBox."""
    return _SVG_TEMPLATE.format(
        width=width,
        height=height,
        std_deviation=BLUR_STD_DEVIATION,
        href=data_uri,
    )


def collapse_whitespace(markup: str) -> str:
    """Shrink markup: whitespace runs become one space, spaces between tags go."""
    return _WHITESPACE.sub(" ", markup).replace("> <", "><")


def escape_svg(markup: str) -> str:
    """Escape the characters that are unsafe in a ``data:image/svg+xml`` payload.

    ``# % : < >`` are percent-encoded and double quotes become single quotes,
    all in a single pass so produced ``%`` signs are never re-escaped.
    """
    return markup.translate(_ESCAPES)


def build_placeholder_src(data_uri: str, width: int, height: int) -> str:
    """Build the ``src`` of a blurry placeholder for a bitmap data URI.

    Args:
        data_uri: The bitmap as a data URI
        width: Bitmap width, used for the viewBox
        height: Bitmap height, used for the viewBox

    Returns:
        A ``data:image/svg+xml;charset=utf-8,`` URI
    """
    svg = collapse_whitespace(build_svg(data_uri, width, height))
    return SVG_DATA_URI_PREFIX + escape_svg(svg)
