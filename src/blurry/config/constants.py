"""Constants for blurry."""

# Application constants
TRANSFORMER_NAME = "AddBlurryImagePlaceholders"

DEFAULT_CONFIG_FILE = "blurry.yaml"

# Thumbnail sizing
PIXEL_TARGET = 60  # Aim for a bitmap of ~60 pixels (w * h)
MAX_BLURRED_PLACEHOLDERS = 5

# Tags inspected by the transform
IMAGE_TAG = "amp-img"
VIDEO_TAG = "amp-video"
TEMPLATE_TAG = "template"
PLACEHOLDER_TAG = "img"

# Only JPEGs are treated as suitable for blurred placeholders (case-sensitive)
QUALIFYING_SUFFIXES = (".jpg", "jpeg")
RESPONSIVE_LAYOUT = "responsive"

# Attributes
PLACEHOLDER_ATTR = "placeholder"
NO_LOADING_ATTR = "noloading"
LAYOUT_ATTR = "layout"
POSTER_ATTR = "poster"
SRC_ATTR = "src"
CLASS_ATTR = "class"
PLACEHOLDER_CLASS = "i-amphtml-blurry-placeholder"

# Bitmap encoding
BITMAP_MIME_TYPE = "image/png"
BITMAP_FORMAT = "PNG"

# SVG wrapper
BLUR_STD_DEVIATION = ".5"
SVG_DATA_URI_PREFIX = "data:image/svg+xml;charset=utf-8,"
SVG_ESCAPE_TABLE = {
    "#": "%23",
    "%": "%25",
    ":": "%3A",
    "<": "%3C",
    ">": "%3E",
    '"': "'",
}

# Concurrency defaults
DEFAULT_IMAGE_WORKERS = 4
