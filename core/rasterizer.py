from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
from PIL import Image

from core.adjustments import apply_adjustments_rgba
from core.constants import PREVIEW_SIZE
from core.geometry import CropRect, resolve_crop_rect
from core.mask_color_key import apply_corner_color_key
from core.state import EditState, RenderedEmoji
from core.text_overlay import draw_overlay_text

logger = logging.getLogger(__name__)


def pil_to_np_rgba(img: Image.Image) -> np.ndarray:
    arr = np.array(img.convert("RGBA"), dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError("Expected RGBA image")
    return arr


def np_rgba_to_pil(arr: np.ndarray) -> Image.Image:
    return Image.fromarray(arr, mode="RGBA")


def _edge_extended(src: Image.Image, rect: CropRect) -> Image.Image:
    """Replicate the right/bottom edges so the crop window never leaves the image."""
    pad_x = max(0, int(math.ceil(rect.sx + rect.side)) - src.width)
    pad_y = max(0, int(math.ceil(rect.sy + rect.side)) - src.height)
    if pad_x == 0 and pad_y == 0:
        return src
    arr = np.pad(pil_to_np_rgba(src), ((0, pad_y), (0, pad_x), (0, 0)), mode="edge")
    return np_rgba_to_pil(arr)


def sample_crop(src: Image.Image, rect: CropRect, size: int) -> np.ndarray:
    """Single resize blit of the crop window onto a size x size square."""
    side = max(1, int(size))
    img = _edge_extended(src.convert("RGBA"), rect)
    out = img.resize((side, side), resample=Image.Resampling.LANCZOS, box=rect.box())
    return pil_to_np_rgba(out)


def rasterize(
    src: Optional[Image.Image],
    state: EditState,
    size: Optional[int] = None,
    remove_background: Optional[bool] = None,
) -> Optional[np.ndarray]:
    """
    Render `src` through crop -> color adjustment -> background key -> text overlay.

    `size` overrides state.output_size (any side length is accepted).
    `remove_background` overrides state.remove_background when not None.
    Returns None when there is no source image.
    """
    if src is None:
        return None

    st = state.clamped()
    side = st.output_size if size is None else max(1, int(size))
    rect = resolve_crop_rect(src.width, src.height, st.pan_x, st.pan_y, st.zoom)

    buf = sample_crop(src, rect, side)
    buf = apply_adjustments_rgba(
        buf,
        brightness=st.brightness,
        contrast=st.contrast,
        color_filter=st.color_filter,
    )

    key = st.remove_background if remove_background is None else bool(remove_background)
    if key:
        buf = apply_corner_color_key(buf)

    if st.overlay_text:
        buf = draw_overlay_text(buf, st.overlay_text)

    logger.debug("Rasterized %dx%d crop=%s key=%s", side, side, tuple(rect), key)
    return buf


def render_emoji(
    src: Optional[Image.Image],
    state: EditState,
    size: Optional[int] = None,
    remove_background: Optional[bool] = None,
) -> Optional[RenderedEmoji]:
    buf = rasterize(src, state, size=size, remove_background=remove_background)
    if buf is None:
        return None
    return RenderedEmoji(rgba=buf, state=state.clamped())


def render_preview(src: Optional[Image.Image], state: EditState) -> Optional[RenderedEmoji]:
    # The live preview always shows the background key so it can be judged before export.
    return render_emoji(src, state, size=PREVIEW_SIZE, remove_background=True)


def render_export(src: Optional[Image.Image], state: EditState) -> Optional[RenderedEmoji]:
    return render_emoji(src, state)
