from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainter, QImage, QPixmap, QColor, QPen
from PySide6.QtWidgets import QWidget


class PreviewWidget(QWidget):
    """
    Shows a rendered emoji (QImage) centered over a checkerboard so keyed-out
    pixels are visible. The image is drawn at an integer multiple of its size
    when it fits, otherwise scaled down.
    """
    def __init__(self, placeholder: str = "Drop a logo or File → Open…", parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._image: Optional[QImage] = None
        self._placeholder = placeholder
        self.setMinimumSize(280, 280)

    def set_image(self, qimg: Optional[QImage]) -> None:
        self._image = qimg
        self.update()

    def paintEvent(self, _) -> None:
        p = QPainter(self)
        p.fillRect(self.rect(), QColor(30, 30, 30))

        if self._image is None:
            p.setPen(QPen(QColor(220, 220, 220)))
            p.drawText(self.rect(), Qt.AlignCenter, self._placeholder)
            return

        w, h = self._image.width(), self._image.height()
        avail = max(1, min(self.width(), self.height()) - 16)
        zoom = max(1, avail // max(w, h)) if max(w, h) <= avail else avail / max(w, h)
        draw_w = w * zoom
        draw_h = h * zoom
        x0 = (self.width() - draw_w) * 0.5
        y0 = (self.height() - draw_h) * 0.5

        # Checkerboard underlay (to visualize transparency)
        self._draw_checkerboard(p, QRectF(x0, y0, draw_w, draw_h), 16)

        p.setRenderHint(QPainter.SmoothPixmapTransform, zoom < 1)
        pm = QPixmap.fromImage(self._image)
        p.drawPixmap(int(x0), int(y0), int(draw_w), int(draw_h), pm)

        p.setPen(QPen(QColor(240, 240, 240), 1))
        p.drawRect(QRectF(x0, y0, draw_w, draw_h))

    def _draw_checkerboard(self, p: QPainter, r: QRectF, cell: int) -> None:
        c1 = QColor(60, 60, 60)
        c2 = QColor(90, 90, 90)

        x0 = int(r.left())
        y0 = int(r.top())
        x1 = int(r.right())
        y1 = int(r.bottom())

        for y in range(y0, y1, cell):
            for x in range(x0, x1, cell):
                use_c1 = (((x - x0) // cell) + ((y - y0) // cell)) % 2 == 0
                p.fillRect(x, y, min(cell, x1 - x), min(cell, y1 - y), c1 if use_c1 else c2)
