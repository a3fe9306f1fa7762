from __future__ import annotations

import numpy as np

# Rec. 709 luma weights
_LUMA = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)

_SEPIA = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float64,
)


def apply_adjustments_rgba(
    rgba: np.ndarray,
    brightness: float = 1.0,
    contrast: float = 1.0,
    color_filter: str = "none",
) -> np.ndarray:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be HxWx4 uint8")

    out = rgba.copy()
    rgb = rgba[..., :3].astype(np.float64) / 255.0

    # Brightness
    rgb = np.clip(rgb * float(brightness), 0.0, 1.0)

    # Contrast around mid-gray
    rgb = np.clip((rgb - 0.5) * float(contrast) + 0.5, 0.0, 1.0)

    mode = (color_filter or "none").lower()
    if mode == "grayscale":
        luma = rgb @ _LUMA
        rgb = np.repeat(luma[..., None], 3, axis=2)
    elif mode == "sepia":
        rgb = np.clip(rgb @ _SEPIA.T, 0.0, 1.0)

    out[..., :3] = np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8)
    return out
