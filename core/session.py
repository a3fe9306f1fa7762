from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from PIL import Image

from core.clipboard import copy_emoji_to_clipboard
from core.constants import DEFAULT_SHARE_BASE_URL, DOWNLOAD_FILENAME
from core.errors import MissingPrecondition
from core.gallery_store import Gallery, MemoryGalleryStore
from core.io import decode_png, from_data_url, load_image_rgba, save_image, to_data_url
from core.rasterizer import render_export, render_preview
from core.share import build_share_link, parse_share_link
from core.state import EditState, GalleryEntry, RenderedEmoji, truncate_overlay_text

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "Upload and edit a logo first."
NO_RESULT_MESSAGE = "Generate an emoji first."

Listener = Callable[["EmojiSession"], None]


class EmojiSession:
    """
    One editing session: the loaded logo, the current edit state, the live
    preview and the last generated emoji. Every change re-renders the preview
    synchronously and then notifies subscribers.
    """

    def __init__(self, gallery: Optional[Gallery] = None, state: Optional[EditState] = None) -> None:
        self.gallery = gallery if gallery is not None else Gallery(MemoryGalleryStore())
        self.state = (state or EditState()).clamped()
        self.source: Optional[Image.Image] = None
        self.preview: Optional[RenderedEmoji] = None
        self.result: Optional[RenderedEmoji] = None
        self.share_url: Optional[str] = None
        self._listeners: List[Listener] = []

    # ---- observers ----
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ---- inputs ----
    @property
    def has_image(self) -> bool:
        return self.source is not None

    def load_file(self, path: str) -> None:
        # Rejected files raise before any session state changes.
        self.load_image(load_image_rgba(path))

    def load_image(self, img: Image.Image) -> None:
        self.source = img.convert("RGBA")
        self.state = self.state.copy(overlay_text="")
        self.result = None
        self.share_url = None
        self.refresh_preview()

    def update(self, **changes) -> None:
        if "overlay_text" in changes:
            changes["overlay_text"] = truncate_overlay_text(changes["overlay_text"])
        nxt = self.state.copy(**changes).clamped()
        if nxt == self.state:
            return
        self.state = nxt
        self.refresh_preview()

    def refresh_preview(self) -> None:
        self.preview = render_preview(self.source, self.state)
        self._notify()

    # ---- results ----
    def generate(self) -> RenderedEmoji:
        if self.source is None:
            raise MissingPrecondition(NO_IMAGE_MESSAGE)
        result = render_export(self.source, self.state)
        self.result = result
        self.share_url = None
        logger.info("Generated %dx%d emoji", result.size, result.size)
        self._notify()
        return result

    def _require_result(self) -> RenderedEmoji:
        if self.result is None:
            raise MissingPrecondition(NO_RESULT_MESSAGE)
        return self.result

    def png_bytes(self) -> bytes:
        return self._require_result().to_png_bytes()

    def download(self, target: str) -> Path:
        png = self.png_bytes()
        path = Path(target)
        if path.is_dir():
            path = path / DOWNLOAD_FILENAME
        save_image(str(path), png)
        logger.info("Saved emoji to %s", path)
        return path

    def copy_to_clipboard(
        self,
        write_image: Optional[Callable[[bytes], None]] = None,
        write_text: Optional[Callable[[str], None]] = None,
    ) -> str:
        return copy_emoji_to_clipboard(self.png_bytes(), write_image, write_text)

    def make_share_link(self, base_url: str = DEFAULT_SHARE_BASE_URL) -> str:
        self.share_url = build_share_link(self.png_bytes(), base_url)
        self._notify()
        return self.share_url

    def _adopt_png(self, png: bytes) -> bool:
        try:
            rgba = decode_png(png)
            result = RenderedEmoji(rgba=rgba, state=EditState())
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.debug("Ignoring undecodable emoji payload: %s", e)
            return False
        self.result = result
        self._notify()
        return True

    def restore_from_link(self, url: str) -> bool:
        png = parse_share_link(url)
        if png is None:
            return False
        return self._adopt_png(png)

    # ---- gallery ----
    def save_to_gallery(self) -> GalleryEntry:
        result = self._require_result()
        entry = GalleryEntry.create(to_data_url(result.to_png_bytes()), result.size)
        self.gallery.add(entry)
        self._notify()
        return entry

    def use_gallery_entry(self, entry: GalleryEntry) -> bool:
        try:
            png = from_data_url(entry.data_url)
        except ValueError as e:
            logger.debug("Gallery entry %s is unreadable: %s", entry.entry_id, e)
            return False
        return self._adopt_png(png)
