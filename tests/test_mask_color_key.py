from __future__ import annotations

import unittest

import numpy as np

from core.mask_color_key import apply_corner_color_key, build_corner_key_mask


def _buffer_with_corner(ref=(200, 200, 200)) -> np.ndarray:
    buf = np.zeros((4, 4, 4), dtype=np.uint8)
    buf[..., :3] = (10, 20, 30)
    buf[..., 3] = 255
    buf[0, 0, :3] = ref
    return buf


class CornerColorKeyTests(unittest.TestCase):
    def test_pixels_within_tolerance_become_transparent(self) -> None:
        buf = _buffer_with_corner()
        buf[1, 1, :3] = (230, 170, 215)
        buf[2, 3, :3] = (200, 200, 200)
        out = apply_corner_color_key(buf)
        self.assertEqual(int(out[0, 0, 3]), 0)
        self.assertEqual(int(out[1, 1, 3]), 0)
        self.assertEqual(int(out[2, 3, 3]), 0)

    def test_pixel_one_step_beyond_tolerance_is_untouched(self) -> None:
        buf = _buffer_with_corner()
        buf[1, 0, :3] = (231, 200, 200)
        buf[1, 1, :3] = (200, 169, 200)
        buf[1, 2, :3] = (200, 200, 231)
        out = apply_corner_color_key(buf)
        self.assertEqual(int(out[1, 0, 3]), 255)
        self.assertEqual(int(out[1, 1, 3]), 255)
        self.assertEqual(int(out[1, 2, 3]), 255)

    def test_rgb_and_unkeyed_alpha_are_preserved(self) -> None:
        buf = _buffer_with_corner()
        buf[3, 3, 3] = 128
        out = apply_corner_color_key(buf)
        np.testing.assert_array_equal(out[..., :3], buf[..., :3])
        self.assertEqual(int(out[3, 3, 3]), 128)

    def test_input_buffer_is_not_mutated(self) -> None:
        buf = _buffer_with_corner()
        before = buf.copy()
        apply_corner_color_key(buf)
        np.testing.assert_array_equal(buf, before)

    def test_interior_match_is_keyed_as_well(self) -> None:
        # Single-sample keying has no notion of connectivity.
        buf = _buffer_with_corner((255, 255, 255))
        buf[2, 2, :3] = (250, 250, 250)
        mask = build_corner_key_mask(buf)
        self.assertTrue(bool(mask[2, 2]))
        self.assertEqual(int(mask.sum()), 2)

    def test_no_underflow_for_dark_reference(self) -> None:
        buf = _buffer_with_corner((0, 0, 0))
        buf[1, 1, :3] = (255, 255, 255)
        mask = build_corner_key_mask(buf)
        self.assertFalse(bool(mask[1, 1]))


if __name__ == "__main__":
    unittest.main()
