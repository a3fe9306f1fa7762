from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import ALLOWED_EXTENSIONS, ALLOWED_FORMATS, MAX_UPLOAD_BYTES, PNG_MIME
from core.errors import UploadRejected

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = f"data:{PNG_MIME};base64,"


def validate_upload(path: str) -> None:
    p = Path(path)
    try:
        size = p.stat().st_size
    except OSError as e:
        raise UploadRejected(f"Unable to read file: {e}") from e
    if size > MAX_UPLOAD_BYTES:
        logger.warning("Rejected %s: %d bytes exceeds limit", p.name, size)
        raise UploadRejected("File is too large. Max 10 MB.")
    if p.suffix.lower() not in ALLOWED_EXTENSIONS:
        logger.warning("Rejected %s: unsupported extension", p.name)
        raise UploadRejected("Unsupported file type. Use PNG or JPG.")

    try:
        with Image.open(p) as img:
            fmt = img.format
    except Image.DecompressionBombError as e:
        logger.warning("Rejected %s: %s", p.name, e)
        raise UploadRejected("Image dimensions are too large.") from e
    except (UnidentifiedImageError, OSError):
        fmt = None
    if fmt not in ALLOWED_FORMATS:
        logger.warning("Rejected %s: unsupported format %s", p.name, fmt)
        raise UploadRejected("Unsupported file type. Use PNG or JPG.")


def load_image_rgba(path: str) -> Image.Image:
    validate_upload(path)
    try:
        with Image.open(path) as img:
            # Convert to RGBA for consistent alpha work
            rgba = img.convert("RGBA")
    except Image.DecompressionBombError as e:
        raise UploadRejected("Image dimensions are too large.") from e
    except OSError as e:
        raise UploadRejected(f"Unable to decode image: {e}") from e
    logger.info("Loaded %s (%dx%d)", Path(path).name, rgba.width, rgba.height)
    return rgba


def encode_png(rgba: np.ndarray) -> bytes:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")
    buf = io.BytesIO()
    # PNG preserves alpha
    Image.fromarray(rgba, mode="RGBA").save(buf, format="PNG")
    return buf.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(data)) as img:
        return np.array(img.convert("RGBA"), dtype=np.uint8)


def save_image(path: str, png_bytes: bytes) -> None:
    Path(path).write_bytes(png_bytes)


def to_data_url(png_bytes: bytes) -> str:
    return _DATA_URL_PREFIX + base64.b64encode(png_bytes).decode("ascii")


def from_data_url(data_url: str) -> bytes:
    if not data_url.startswith(_DATA_URL_PREFIX):
        raise ValueError("not a PNG data URL")
    try:
        return base64.b64decode(data_url[len(_DATA_URL_PREFIX):], validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e
