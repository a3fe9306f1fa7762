from __future__ import annotations

from typing import NamedTuple

from core.constants import PAN_MAX, PAN_MIN, ZOOM_MAX, ZOOM_MIN
from core.state import clamp


class CropRect(NamedTuple):
    """Square source window: top-left corner and side length in source pixels."""

    sx: float
    sy: float
    side: float

    @property
    def crop_w(self) -> float:
        return self.side

    @property
    def crop_h(self) -> float:
        return self.side

    def box(self) -> tuple[float, float, float, float]:
        return (self.sx, self.sy, self.sx + self.side, self.sy + self.side)


def crop_side(min_side: float, zoom: float) -> float:
    # Higher zoom means a smaller window, i.e. magnified content.
    z = clamp(float(zoom), ZOOM_MIN, ZOOM_MAX) / 100.0
    return float(min_side) / z


def _offset(pan: float, max_offset: float) -> float:
    p = clamp(float(pan), PAN_MIN, PAN_MAX) / 100.0
    # A window larger than the image has no travel; pin it to the origin.
    return max(0.0, min(max_offset, p * max_offset))


def resolve_crop_rect(width: int, height: int, pan_x: float, pan_y: float, zoom: float) -> CropRect:
    w = max(1, int(width))
    h = max(1, int(height))
    side = crop_side(min(w, h), zoom)
    return CropRect(
        sx=_offset(pan_x, w - side),
        sy=_offset(pan_y, h - side),
        side=side,
    )
