from __future__ import annotations

import unittest

import numpy as np

from core.text_overlay import draw_overlay_text, overlay_metrics


def _canvas(size: int = 128) -> np.ndarray:
    buf = np.zeros((size, size, 4), dtype=np.uint8)
    buf[..., :3] = (40, 90, 160)
    buf[..., 3] = 255
    return buf


class TextOverlayTests(unittest.TestCase):
    def test_empty_text_is_byte_identical(self) -> None:
        buf = _canvas()
        out = draw_overlay_text(buf, "")
        self.assertEqual(out.tobytes(), buf.tobytes())

    def test_metrics_scale_with_canvas(self) -> None:
        x, y, font_px, stroke_px = overlay_metrics(256)
        self.assertEqual(x, 128.0)
        self.assertAlmostEqual(y, 256 - 12.8)
        self.assertEqual(font_px, 51)
        self.assertGreaterEqual(stroke_px, 1)

    def test_label_is_drawn_near_the_bottom(self) -> None:
        buf = _canvas()
        out = draw_overlay_text(buf, "VIP")
        # Top half untouched, something changed below
        np.testing.assert_array_equal(out[:64], buf[:64])
        self.assertFalse(np.array_equal(out[64:], buf[64:]))

    def test_fill_is_white_and_outline_is_dark(self) -> None:
        out = draw_overlay_text(_canvas(256), "WWW")
        rgb = out[..., :3].astype(int)
        white = np.all(rgb >= 250, axis=2)
        dark = np.all(rgb <= 40, axis=2)
        self.assertTrue(white.any())
        self.assertTrue(dark.any())

    def test_label_is_opaque_over_transparent_pixels(self) -> None:
        buf = _canvas()
        buf[..., 3] = 0
        out = draw_overlay_text(buf, "OK")
        self.assertTrue((out[..., 3] == 255).any())

    def test_long_text_is_truncated_to_eight_characters(self) -> None:
        buf = _canvas()
        a = draw_overlay_text(buf, "ABCDEFGH")
        b = draw_overlay_text(buf, "ABCDEFGHIJKL")
        np.testing.assert_array_equal(a, b)


if __name__ == "__main__":
    unittest.main()
