from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from core.constants import GALLERY_CAPACITY, GALLERY_FILE_VERSION
from core.state import GalleryEntry

logger = logging.getLogger(__name__)


class GalleryStore(Protocol):
    def load(self) -> Optional[List[GalleryEntry]]:
        ...

    def save(self, entries: List[GalleryEntry]) -> None:
        ...


def _entry_to_raw(entry: GalleryEntry) -> dict:
    return {
        "id": entry.entry_id,
        "dataUrl": entry.data_url,
        "createdAt": entry.created_at,
        "size": entry.size,
    }


def _entry_from_raw(raw: dict) -> Optional[GalleryEntry]:
    data_url = raw.get("dataUrl")
    if not isinstance(data_url, str) or not data_url:
        return None
    try:
        return GalleryEntry(
            entry_id=int(raw.get("id", 0)),
            data_url=data_url,
            created_at=str(raw.get("createdAt", "")),
            size=int(raw.get("size", 0)),
        )
    except (TypeError, ValueError, OverflowError):
        return None


class JsonGalleryStore:
    """Gallery persisted as a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[List[GalleryEntry]]:
        if not self.path.exists():
            return None
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        # Older files hold the bare list
        items = raw.get("entries", []) if isinstance(raw, dict) else raw
        if not isinstance(items, list):
            raise ValueError("gallery file has no entry list")
        entries: List[GalleryEntry] = []
        for item in items:
            if isinstance(item, dict):
                entry = _entry_from_raw(item)
                if entry is not None:
                    entries.append(entry)
        return entries

    def save(self, entries: List[GalleryEntry]) -> None:
        payload = {
            "version": GALLERY_FILE_VERSION,
            "entries": [_entry_to_raw(e) for e in entries],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class MemoryGalleryStore:
    def __init__(self, entries: Optional[List[GalleryEntry]] = None) -> None:
        self.entries = None if entries is None else list(entries)

    def load(self) -> Optional[List[GalleryEntry]]:
        return None if self.entries is None else list(self.entries)

    def save(self, entries: List[GalleryEntry]) -> None:
        self.entries = list(entries)


class Gallery:
    """
    Newest-first list of saved emojis, capped at GALLERY_CAPACITY.
    Storage is best-effort: read or write failures never reach the caller.
    """

    def __init__(self, store: GalleryStore, capacity: int = GALLERY_CAPACITY) -> None:
        self._store = store
        self._capacity = max(1, int(capacity))
        self._entries: List[GalleryEntry] = self._load()

    def _load(self) -> List[GalleryEntry]:
        try:
            loaded = self._store.load()
        except (OSError, ValueError, OverflowError) as e:
            logger.warning("Gallery could not be read, starting empty: %s", e)
            return []
        return list(loaded or [])[: self._capacity]

    @property
    def entries(self) -> List[GalleryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: GalleryEntry) -> None:
        self._entries = [entry, *self._entries][: self._capacity]
        try:
            self._store.save(self._entries)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Gallery could not be saved: %s", e)
