from __future__ import annotations

import unittest

from core.clipboard import COPIED_IMAGE, COPIED_TEXT, copy_emoji_to_clipboard
from core.errors import ClipboardUnavailable

PNG = b"\x89PNG\r\n\x1a\nfake"


class ClipboardTests(unittest.TestCase):
    def test_image_is_preferred(self) -> None:
        images: list[bytes] = []
        texts: list[str] = []
        how = copy_emoji_to_clipboard(PNG, images.append, texts.append)
        self.assertEqual(how, COPIED_IMAGE)
        self.assertEqual(images, [PNG])
        self.assertEqual(texts, [])

    def test_falls_back_to_data_url_text(self) -> None:
        texts: list[str] = []
        how = copy_emoji_to_clipboard(PNG, None, texts.append)
        self.assertEqual(how, COPIED_TEXT)
        self.assertTrue(texts[0].startswith("data:image/png;base64,"))

    def test_failed_image_write_falls_back_to_text(self) -> None:
        def broken(_: bytes) -> None:
            raise RuntimeError("no image support")

        texts: list[str] = []
        self.assertEqual(copy_emoji_to_clipboard(PNG, broken, texts.append), COPIED_TEXT)
        self.assertEqual(len(texts), 1)

    def test_no_clipboard_at_all(self) -> None:
        with self.assertRaises(ClipboardUnavailable):
            copy_emoji_to_clipboard(PNG, None, None)

    def test_failed_image_write_without_text_fallback(self) -> None:
        def broken(_: bytes) -> None:
            raise OSError("denied")

        with self.assertRaises(ClipboardUnavailable):
            copy_emoji_to_clipboard(PNG, broken, None)


if __name__ == "__main__":
    unittest.main()
