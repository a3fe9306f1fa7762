from __future__ import annotations

from typing import Tuple

import numpy as np

from core.constants import KEY_TOLERANCE


def corner_reference_rgb(rgba: np.ndarray) -> Tuple[int, int, int]:
    r, g, b = (int(c) for c in rgba[0, 0, :3])
    return r, g, b


def build_corner_key_mask(rgba: np.ndarray, tolerance: int = KEY_TOLERANCE) -> np.ndarray:
    """
    True where every RGB channel lies within `tolerance` of the top-left pixel.
    Interior pixels that happen to match the corner color are keyed too.
    """
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")
    if rgba.shape[0] == 0 or rgba.shape[1] == 0:
        return np.zeros(rgba.shape[:2], dtype=bool)

    ref = np.array(corner_reference_rgb(rgba), dtype=np.int16)
    diff = np.abs(rgba[..., :3].astype(np.int16) - ref)
    return np.all(diff <= int(tolerance), axis=2)


def apply_corner_color_key(rgba: np.ndarray, tolerance: int = KEY_TOLERANCE) -> np.ndarray:
    """
    rgba: HxWx4 uint8
    Returns: new rgba with alpha set to 0 for pixels close to the corner color.
    RGB is left as-is.
    """
    remove = build_corner_key_mask(rgba, tolerance)
    out = rgba.copy()
    out[..., 3][remove] = 0
    return out
