from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

import numpy as np
from PIL import Image

from core.constants import (
    COLOR_FILTERS,
    DEFAULT_OUTPUT_SIZE,
    DEFAULT_PAN,
    DEFAULT_ZOOM,
    OUTPUT_SIZES,
    OVERLAY_TEXT_MAX_CHARS,
    PAN_MAX,
    PAN_MIN,
    TONE_MAX,
    TONE_MIN,
    ZOOM_MAX,
    ZOOM_MIN,
)
from core.io import encode_png


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def clamp_zoom(zoom: float) -> int:
    z = float(zoom)
    if not math.isfinite(z):
        return DEFAULT_ZOOM
    return int(clamp(int(round(z)), ZOOM_MIN, ZOOM_MAX))


def snap_output_size(size: int) -> int:
    return min(OUTPUT_SIZES, key=lambda s: (abs(s - int(size)), s))


def truncate_overlay_text(text: Optional[str]) -> str:
    return (text or "")[:OVERLAY_TEXT_MAX_CHARS]


@dataclass
class EditState:
    # Crop window (percent of pan travel, percent zoom)
    pan_x: float = DEFAULT_PAN
    pan_y: float = DEFAULT_PAN
    zoom: int = DEFAULT_ZOOM

    # Color adjustments
    brightness: float = 1.0
    contrast: float = 1.0
    color_filter: str = "none"

    remove_background: bool = True
    overlay_text: str = ""

    # Export size; the live preview always renders at PREVIEW_SIZE
    output_size: int = DEFAULT_OUTPUT_SIZE

    def clamped(self) -> "EditState":
        color_filter = str(self.color_filter or "none").strip().lower()
        if color_filter not in COLOR_FILTERS:
            color_filter = "none"
        return EditState(
            pan_x=clamp(float(self.pan_x), PAN_MIN, PAN_MAX),
            pan_y=clamp(float(self.pan_y), PAN_MIN, PAN_MAX),
            zoom=clamp_zoom(self.zoom),
            brightness=clamp(float(self.brightness), TONE_MIN, TONE_MAX),
            contrast=clamp(float(self.contrast), TONE_MIN, TONE_MAX),
            color_filter=color_filter,
            remove_background=bool(self.remove_background),
            overlay_text=truncate_overlay_text(self.overlay_text),
            output_size=snap_output_size(self.output_size),
        )

    def copy(self, **changes) -> "EditState":
        return replace(self, **changes)


@dataclass(eq=False)
class RenderedEmoji:
    """Square RGBA buffer produced by the rasterizer, plus the state behind it."""

    rgba: np.ndarray
    state: EditState
    size: int = field(init=False)

    def __post_init__(self) -> None:
        if self.rgba.dtype != np.uint8 or self.rgba.ndim != 3 or self.rgba.shape[2] != 4:
            raise ValueError("rgba must be HxWx4 uint8")
        if self.rgba.shape[0] != self.rgba.shape[1]:
            raise ValueError("rendered emoji must be square")
        self.size = int(self.rgba.shape[0])

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.rgba, mode="RGBA")

    def to_png_bytes(self) -> bytes:
        return encode_png(self.rgba)


@dataclass
class GalleryEntry:
    entry_id: int
    data_url: str
    created_at: str
    size: int

    @classmethod
    def create(cls, data_url: str, size: int, now: Optional[datetime] = None) -> "GalleryEntry":
        now = now or datetime.now(timezone.utc)
        return cls(
            entry_id=int(now.timestamp() * 1000),
            data_url=data_url,
            created_at=now.isoformat(),
            size=int(size),
        )
