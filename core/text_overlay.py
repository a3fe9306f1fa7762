from __future__ import annotations

import math
from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from core.constants import (
    OVERLAY_BASELINE_MARGIN_RATIO,
    OVERLAY_FILL_RGBA,
    OVERLAY_FONT_RATIO,
    OVERLAY_STROKE_RATIO,
    OVERLAY_STROKE_RGBA,
)
from core.state import truncate_overlay_text

_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "DejaVuSans.ttf", "Arial.ttf", "arial.ttf")


@lru_cache(maxsize=16)
def load_overlay_font(px: int) -> ImageFont.FreeTypeFont:
    for name in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, px)
        except OSError:
            continue
    # Pillow's bundled scalable font
    return ImageFont.load_default(size=px)


def overlay_metrics(size: int) -> tuple[float, float, int, int]:
    """Anchor x, baseline y, font px and outward stroke px for a canvas of side `size`."""
    s = float(size)
    font_px = max(1, int(math.floor(s * OVERLAY_FONT_RATIO)))
    # The outline straddles the glyph edge, so half of it extends outward.
    stroke_px = max(1, int(round(s * OVERLAY_STROKE_RATIO * 0.5)))
    return s / 2.0, s - s * OVERLAY_BASELINE_MARGIN_RATIO, font_px, stroke_px


def draw_overlay_text(rgba: np.ndarray, text: str) -> np.ndarray:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")

    label = truncate_overlay_text(text)
    if not label:
        return rgba.copy()

    h, w = rgba.shape[:2]
    x, y, font_px, stroke_px = overlay_metrics(min(w, h))
    font = load_overlay_font(font_px)

    layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    # Outline first, then the solid fill on top of it.
    draw.text(
        (x, y),
        label,
        font=font,
        fill=OVERLAY_STROKE_RGBA,
        anchor="ms",
        stroke_width=stroke_px,
        stroke_fill=OVERLAY_STROKE_RGBA,
    )
    draw.text((x, y), label, font=font, fill=OVERLAY_FILL_RGBA, anchor="ms")

    base = Image.fromarray(rgba, mode="RGBA")
    out = Image.alpha_composite(base, layer)
    return np.array(out, dtype=np.uint8)
