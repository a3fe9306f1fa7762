from __future__ import annotations

import os
from pathlib import Path

# Edit ranges
PAN_MIN = 0.0
PAN_MAX = 100.0
ZOOM_MIN = 50
ZOOM_MAX = 200
TONE_MIN = 0.5
TONE_MAX = 1.5
OVERLAY_TEXT_MAX_CHARS = 8

COLOR_FILTERS = ("none", "grayscale", "sepia")
OUTPUT_SIZES = (64, 128, 256, 512)
PREVIEW_SIZE = 256

# Defaults
DEFAULT_PAN = 50.0
DEFAULT_ZOOM = 100
DEFAULT_OUTPUT_SIZE = 128

# Background key
KEY_TOLERANCE = 30

# Text overlay, as fractions of the output side
OVERLAY_FONT_RATIO = 0.2
OVERLAY_BASELINE_MARGIN_RATIO = 0.05
OVERLAY_STROKE_RATIO = 0.04
OVERLAY_STROKE_RGBA = (0, 0, 0, 204)
OVERLAY_FILL_RGBA = (255, 255, 255, 255)

# Upload validation
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_FORMATS = ("PNG", "JPEG")
ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")

# Export / share / gallery
DOWNLOAD_FILENAME = "logo-emoji.png"
PNG_MIME = "image/png"
SHARE_FRAGMENT_PREFIX = "#img="
DEFAULT_SHARE_BASE_URL = "https://logo-emoji.local/"
GALLERY_CAPACITY = 24
GALLERY_FILE_VERSION = 1

HOME_ENV_VAR = "LOGO_EMOJI_HOME"
LOG_LEVEL_ENV_VAR = "LOGO_EMOJI_LOG_LEVEL"


def app_home() -> Path:
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".logo_emoji"


def gallery_path() -> Path:
    return app_home() / "gallery.json"
