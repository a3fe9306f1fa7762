from __future__ import annotations

import logging
from typing import Callable, Optional

from core.errors import ClipboardUnavailable
from core.io import to_data_url

logger = logging.getLogger(__name__)

COPIED_IMAGE = "image"
COPIED_TEXT = "text"


def copy_emoji_to_clipboard(
    png_bytes: bytes,
    write_image: Optional[Callable[[bytes], None]] = None,
    write_text: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Put the emoji on the clipboard, preferring the image itself and falling
    back to its data URL as text. Returns which of the two was written.
    """
    if write_image is None and write_text is None:
        raise ClipboardUnavailable("Clipboard API not supported.")

    if write_image is not None:
        try:
            write_image(png_bytes)
            return COPIED_IMAGE
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning("Image clipboard write failed: %s", e)
            if write_text is None:
                raise ClipboardUnavailable("Unable to copy to clipboard.") from e

    try:
        write_text(to_data_url(png_bytes))
    except (OSError, RuntimeError, ValueError) as e:
        raise ClipboardUnavailable("Unable to copy to clipboard.") from e
    return COPIED_TEXT
