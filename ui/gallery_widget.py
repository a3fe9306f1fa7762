from __future__ import annotations
from typing import Callable, Optional

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QListWidget, QListWidgetItem

from core.io import from_data_url
from core.state import GalleryEntry


class GalleryWidget(QWidget):
    """
    Icon grid of saved emojis, newest first.
    - Each item stores its GalleryEntry in Qt.UserRole
    - Clicking an item hands the entry to on_pick
    """
    def __init__(self, on_pick: Callable[[GalleryEntry], None], parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._on_pick = on_pick

        self.listw = QListWidget()
        self.listw.setViewMode(QListWidget.IconMode)
        self.listw.setIconSize(QSize(64, 64))
        self.listw.setResizeMode(QListWidget.Adjust)
        self.listw.setMovement(QListWidget.Static)
        self.listw.itemClicked.connect(self._on_item_clicked)

        self.empty_label = QLabel("No emojis in your gallery yet.")
        self.empty_label.setAlignment(Qt.AlignCenter)

        lay = QVBoxLayout()
        lay.addWidget(QLabel("Saved emojis (stored locally). Click one to reuse it."))
        lay.addWidget(self.empty_label)
        lay.addWidget(self.listw)
        self.setLayout(lay)

    def set_entries(self, entries: list[GalleryEntry]) -> None:
        self.listw.clear()
        for entry in entries:
            self.listw.addItem(self._make_item(entry))
        self.empty_label.setVisible(not entries)

    def _make_item(self, entry: GalleryEntry) -> QListWidgetItem:
        item = QListWidgetItem(f"{entry.size}×{entry.size}")
        try:
            data = from_data_url(entry.data_url)
        except ValueError:
            data = b""
        pm = QPixmap()
        if data and pm.loadFromData(data, "PNG"):
            item.setIcon(QIcon(pm))
        item.setData(Qt.UserRole, entry)
        item.setToolTip(entry.created_at)
        return item

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        entry = item.data(Qt.UserRole)
        if isinstance(entry, GalleryEntry):
            self._on_pick(entry)
