from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
import unittest
from unittest import mock

import numpy as np
from PIL import Image

from core.constants import MAX_UPLOAD_BYTES
from core.errors import UploadRejected
from core.io import (
    decode_png,
    encode_png,
    from_data_url,
    load_image_rgba,
    to_data_url,
    validate_upload,
)


class UploadValidationTests(unittest.TestCase):
    def test_png_and_jpeg_are_accepted(self) -> None:
        with TemporaryDirectory() as td:
            png = Path(td) / "logo.png"
            jpg = Path(td) / "logo.jpg"
            Image.new("RGBA", (8, 6), (1, 2, 3, 4)).save(png)
            Image.new("RGB", (8, 6), (200, 10, 10)).save(jpg, quality=95)

            img = load_image_rgba(str(png))
            self.assertEqual(img.mode, "RGBA")
            self.assertEqual(img.size, (8, 6))
            self.assertEqual(load_image_rgba(str(jpg)).mode, "RGBA")

    def test_other_formats_are_rejected(self) -> None:
        with TemporaryDirectory() as td:
            gif = Path(td) / "logo.gif"
            Image.new("RGB", (4, 4)).save(gif)
            with self.assertRaises(UploadRejected) as ctx:
                validate_upload(str(gif))
            self.assertIn("Unsupported", ctx.exception.message)

    def test_non_image_bytes_are_rejected(self) -> None:
        with TemporaryDirectory() as td:
            fake = Path(td) / "logo.png"
            fake.write_bytes(b"definitely not a png")
            with self.assertRaises(UploadRejected):
                load_image_rgba(str(fake))

    def test_oversized_file_is_rejected(self) -> None:
        with TemporaryDirectory() as td:
            big = Path(td) / "big.png"
            with big.open("wb") as fh:
                fh.truncate(MAX_UPLOAD_BYTES + 1)
            with self.assertRaises(UploadRejected) as ctx:
                validate_upload(str(big))
            self.assertIn("too large", ctx.exception.message)

    def test_missing_file_is_rejected(self) -> None:
        with self.assertRaises(UploadRejected):
            validate_upload("/nonexistent/logo.png")

    def test_extension_must_match_an_allowed_type(self) -> None:
        with TemporaryDirectory() as td:
            renamed = Path(td) / "logo.gif"
            Image.new("RGBA", (4, 4)).save(renamed, format="PNG")
            with self.assertRaises(UploadRejected) as ctx:
                validate_upload(str(renamed))
            self.assertIn("Unsupported", ctx.exception.message)

            upper = Path(td) / "LOGO.JPEG"
            Image.new("RGB", (4, 4)).save(upper, format="JPEG")
            validate_upload(str(upper))

    def test_decompression_bomb_is_rejected(self) -> None:
        with TemporaryDirectory() as td:
            bomb = Path(td) / "logo.png"
            Image.new("1", (64, 64)).save(bomb)
            with mock.patch.object(Image, "MAX_IMAGE_PIXELS", 1000):
                with self.assertRaises(UploadRejected) as ctx:
                    validate_upload(str(bomb))
                self.assertIn("too large", ctx.exception.message)
                with self.assertRaises(UploadRejected):
                    load_image_rgba(str(bomb))


class EncodingTests(unittest.TestCase):
    def test_png_keeps_exact_pixels(self) -> None:
        rng = np.random.default_rng(5)
        arr = rng.integers(0, 256, size=(9, 9, 4), dtype=np.uint8)
        np.testing.assert_array_equal(decode_png(encode_png(arr)), arr)

    def test_data_url_shape(self) -> None:
        url = to_data_url(b"\x89PNG")
        self.assertTrue(url.startswith("data:image/png;base64,"))
        self.assertEqual(from_data_url(url), b"\x89PNG")

    def test_bad_data_url_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            from_data_url("data:text/plain;base64,AAAA")
        with self.assertRaises(ValueError):
            from_data_url("data:image/png;base64,@@@")


if __name__ == "__main__":
    unittest.main()
