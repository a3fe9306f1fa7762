from __future__ import annotations
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QColor, QGuiApplication, QImage, QKeySequence, QPalette
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QFileDialog, QVBoxLayout, QHBoxLayout, QLabel,
    QSlider, QCheckBox, QPushButton, QMessageBox, QDockWidget, QComboBox, QLineEdit,
    QGroupBox, QButtonGroup,
)

from core.constants import (
    COLOR_FILTERS, DOWNLOAD_FILENAME, OUTPUT_SIZES, OVERLAY_TEXT_MAX_CHARS,
    PAN_MAX, PAN_MIN, TONE_MAX, TONE_MIN, ZOOM_MAX, ZOOM_MIN,
)
from core.errors import EmojiError, MissingPrecondition, UploadRejected
from core.rasterizer import np_rgba_to_pil
from core.session import EmojiSession
from core.state import GalleryEntry
from ui.gallery_widget import GalleryWidget
from ui.preview_widget import PreviewWidget


def pil_rgba_to_qimage(img: Image.Image) -> QImage:
    img = img.convert("RGBA")
    w, h = img.size
    data = img.tobytes("raw", "RGBA")
    qimg = QImage(data, w, h, QImage.Format_RGBA8888)
    # Important: keep a copy because Python-owned bytes may be freed
    return qimg.copy()


def np_rgba_to_qimage(arr: np.ndarray) -> QImage:
    return pil_rgba_to_qimage(np_rgba_to_pil(arr))


class MainWindow(QMainWindow):
    def __init__(self, session: EmojiSession):
        super().__init__()
        self.setWindowTitle("Logo → Emoji")

        self.session = session
        self._dark = True

        # Central: live preview next to the generated emoji
        self.preview = PreviewWidget()
        self.result_view = PreviewWidget(placeholder="No emoji generated yet.")

        central = QWidget()
        lay = QHBoxLayout(central)
        lay.addLayout(self._titled("Live preview (256×256)", self.preview), 1)
        lay.addLayout(self._titled("Emoji", self.result_view), 1)
        self.setCentralWidget(central)

        self._build_menu()
        self._build_controls_dock()
        self._build_gallery_dock()

        self.setAcceptDrops(True)
        self.resize(1100, 700)
        self._apply_theme(self._dark)

        self.session.subscribe(self._on_session_changed)
        self._sync_ui_from_state()
        self._on_session_changed(self.session)

    # ---------------------------
    # Menu / Actions
    # ---------------------------
    def _build_menu(self) -> None:
        open_act = QAction("Open…", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self.open_file)

        download_act = QAction("Download PNG…", self)
        download_act.setShortcut(QKeySequence.StandardKey.Save)
        download_act.triggered.connect(self.download_png)

        quit_act = QAction("Quit", self)
        quit_act.setShortcut(QKeySequence.StandardKey.Quit)
        quit_act.triggered.connect(self.close)

        generate_act = QAction("Generate Emoji", self)
        generate_act.setShortcut("Ctrl+G")
        generate_act.triggered.connect(self.generate_emoji)

        copy_act = QAction("Copy to Clipboard", self)
        copy_act.setShortcut(QKeySequence.StandardKey.Copy)
        copy_act.triggered.connect(self.copy_to_clipboard)

        share_act = QAction("Generate Shareable Link", self)
        share_act.triggered.connect(self.generate_share_link)

        gallery_act = QAction("Save to Gallery", self)
        gallery_act.triggered.connect(self.save_to_gallery)

        self._theme_act = QAction("Dark Mode", self)
        self._theme_act.setCheckable(True)
        self._theme_act.setChecked(self._dark)
        self._theme_act.toggled.connect(self._apply_theme)

        mfile = self.menuBar().addMenu("File")
        mfile.addAction(open_act)
        mfile.addAction(download_act)
        mfile.addSeparator()
        mfile.addAction(quit_act)

        memoji = self.menuBar().addMenu("Emoji")
        memoji.addAction(generate_act)
        memoji.addAction(copy_act)
        memoji.addAction(share_act)
        memoji.addAction(gallery_act)

        mview = self.menuBar().addMenu("View")
        mview.addAction(self._theme_act)

    # ---------------------------
    # Controls dock
    # ---------------------------
    def _build_controls_dock(self) -> None:
        dock = QDockWidget("Controls", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)

        panel = QWidget()
        v = QVBoxLayout(panel)

        g_crop, gl_crop = self._make_group("Crop")
        self.pan_x = self._slider(int(PAN_MIN), int(PAN_MAX), lambda val: self.session.update(pan_x=float(val)))
        self.pan_y = self._slider(int(PAN_MIN), int(PAN_MAX), lambda val: self.session.update(pan_y=float(val)))
        self.zoom = self._slider(ZOOM_MIN, ZOOM_MAX, lambda val: self.session.update(zoom=int(val)))
        self.pan_x_val = self._add_slider_row(gl_crop, "Horizontal", self.pan_x)
        self.pan_y_val = self._add_slider_row(gl_crop, "Vertical", self.pan_y)
        self.zoom_val = self._add_slider_row(gl_crop, "Zoom", self.zoom)
        v.addWidget(g_crop)

        g_color, gl_color = self._make_group("Color")
        lo, hi = int(TONE_MIN * 100), int(TONE_MAX * 100)
        self.brightness = self._slider(lo, hi, lambda val: self.session.update(brightness=val / 100.0))
        self.contrast = self._slider(lo, hi, lambda val: self.session.update(contrast=val / 100.0))
        self.brightness_val = self._add_slider_row(gl_color, "Brightness", self.brightness)
        self.contrast_val = self._add_slider_row(gl_color, "Contrast", self.contrast)
        self.filter_combo = QComboBox()
        for name in COLOR_FILTERS:
            self.filter_combo.addItem(name.capitalize(), userData=name)
        self.filter_combo.currentIndexChanged.connect(
            lambda idx: self.session.update(color_filter=str(self.filter_combo.itemData(idx)))
        )
        self._add_labeled_row(gl_color, "Filter", self.filter_combo)
        v.addWidget(g_color)

        g_bg, gl_bg = self._make_group("Background")
        self.remove_bg_chk = QCheckBox("Remove background on export")
        self.remove_bg_chk.toggled.connect(lambda on: self.session.update(remove_background=bool(on)))
        gl_bg.addWidget(self.remove_bg_chk)
        gl_bg.addWidget(QLabel("The live preview always shows the removal."))
        v.addWidget(g_bg)

        g_text, gl_text = self._make_group("Overlay text (optional)")
        self.overlay_edit = QLineEdit()
        self.overlay_edit.setMaxLength(OVERLAY_TEXT_MAX_CHARS)
        self.overlay_edit.setPlaceholderText("e.g. VIP or initials")
        self.overlay_edit.textChanged.connect(lambda text: self.session.update(overlay_text=text))
        gl_text.addWidget(self.overlay_edit)
        v.addWidget(g_text)

        g_size, gl_size = self._make_group("Emoji size")
        size_row = QHBoxLayout()
        self.size_group = QButtonGroup(self)
        self.size_group.setExclusive(True)
        for size in OUTPUT_SIZES:
            btn = QPushButton(f"{size}×{size}")
            btn.setCheckable(True)
            self.size_group.addButton(btn, size)
            size_row.addWidget(btn)
        self.size_group.idClicked.connect(lambda size: self.session.update(output_size=int(size)))
        gl_size.addLayout(size_row)
        v.addWidget(g_size)

        g_act, gl_act = self._make_group("Actions")
        for label, slot in (
            ("Generate emoji", self.generate_emoji),
            ("Download PNG", self.download_png),
            ("Copy to clipboard", self.copy_to_clipboard),
            ("Generate shareable link", self.generate_share_link),
            ("Save to gallery", self.save_to_gallery),
        ):
            btn = QPushButton(label)
            btn.clicked.connect(slot)
            gl_act.addWidget(btn)
        self.share_edit = QLineEdit()
        self.share_edit.setReadOnly(True)
        self.share_edit.setPlaceholderText("Shareable link")
        gl_act.addWidget(self.share_edit)
        v.addWidget(g_act)

        v.addStretch(1)
        dock.setWidget(panel)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    def _build_gallery_dock(self) -> None:
        dock = QDockWidget("Gallery", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea | Qt.BottomDockWidgetArea)
        self.gallery_widget = GalleryWidget(on_pick=self._use_gallery_entry)
        dock.setWidget(self.gallery_widget)
        self.addDockWidget(Qt.BottomDockWidgetArea, dock)

    # ---------------------------
    # File / result actions
    # ---------------------------
    def open_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Logo", "", "Images (*.png *.jpg *.jpeg)")
        if not path:
            return
        self.load_path(path)

    def load_path(self, path: str) -> None:
        try:
            self.session.load_file(path)
        except UploadRejected as e:
            QMessageBox.critical(self, "Open failed", e.message)
            return
        self._sync_ui_from_state()
        self.statusBar().showMessage(f"Loaded {Path(path).name}", 3000)

    def generate_emoji(self) -> None:
        if self._run(self.session.generate):
            self.statusBar().showMessage("Emoji generated.", 3000)

    def download_png(self) -> None:
        if self.session.result is None:
            self._report(MissingPrecondition("Generate an emoji first."))
            return
        path, _ = QFileDialog.getSaveFileName(self, "Download PNG", DOWNLOAD_FILENAME, "PNG (*.png)")
        if not path:
            return
        try:
            self.session.download(path)
        except OSError as e:
            QMessageBox.critical(self, "Save failed", str(e))
            return
        self.statusBar().showMessage(f"Saved {Path(path).name}", 3000)

    def copy_to_clipboard(self) -> None:
        clipboard = QGuiApplication.clipboard()
        write_image = write_text = None
        if clipboard is not None:
            write_image = lambda png: clipboard.setImage(QImage.fromData(png, "PNG"))
            write_text = clipboard.setText
        copied = self._run(lambda: self.session.copy_to_clipboard(write_image, write_text))
        if copied == "image":
            self.statusBar().showMessage("Emoji image copied to clipboard.", 3000)
        elif copied == "text":
            self.statusBar().showMessage("Emoji data URL copied to clipboard.", 3000)

    def generate_share_link(self) -> None:
        if self._run(self.session.make_share_link):
            self.statusBar().showMessage("Shareable link generated.", 3000)

    def save_to_gallery(self) -> None:
        if self._run(self.session.save_to_gallery):
            self.statusBar().showMessage("Saved to gallery.", 3000)

    def _use_gallery_entry(self, entry: GalleryEntry) -> None:
        if not self.session.use_gallery_entry(entry):
            self.statusBar().showMessage("That gallery entry could not be read.", 3000)

    def _run(self, action):
        try:
            return action()
        except EmojiError as e:
            self._report(e)
            return None

    def _report(self, err: EmojiError) -> None:
        if isinstance(err, MissingPrecondition):
            QMessageBox.information(self, "Nothing to do yet", err.message)
        else:
            QMessageBox.warning(self, "Action failed", err.message)

    # ---------------------------
    # Drag & drop support
    # ---------------------------
    def dragEnterEvent(self, e) -> None:
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e) -> None:
        urls = e.mimeData().urls()
        if not urls:
            return
        path = urls[0].toLocalFile()
        if path:
            self.load_path(path)

    # ---------------------------
    # Session -> widgets
    # ---------------------------
    def _on_session_changed(self, session: EmojiSession) -> None:
        self.preview.set_image(None if session.preview is None else np_rgba_to_qimage(session.preview.rgba))
        self.result_view.set_image(None if session.result is None else np_rgba_to_qimage(session.result.rgba))
        self.share_edit.setText(session.share_url or "")
        self.gallery_widget.set_entries(session.gallery.entries)
        self._update_value_labels()

    def _sync_ui_from_state(self) -> None:
        st = self.session.state
        widgets = (self.pan_x, self.pan_y, self.zoom, self.brightness, self.contrast,
                   self.filter_combo, self.remove_bg_chk, self.overlay_edit)
        for w in widgets:
            w.blockSignals(True)
        self.pan_x.setValue(int(round(st.pan_x)))
        self.pan_y.setValue(int(round(st.pan_y)))
        self.zoom.setValue(int(st.zoom))
        self.brightness.setValue(int(round(st.brightness * 100)))
        self.contrast.setValue(int(round(st.contrast * 100)))
        self.filter_combo.setCurrentIndex(max(0, self.filter_combo.findData(st.color_filter)))
        self.remove_bg_chk.setChecked(st.remove_background)
        self.overlay_edit.setText(st.overlay_text)
        for w in widgets:
            w.blockSignals(False)
        btn = self.size_group.button(st.output_size)
        if btn is not None:
            btn.setChecked(True)
        self._update_value_labels()

    def _update_value_labels(self) -> None:
        st = self.session.state
        self.pan_x_val.setText(f"{st.pan_x:.0f}%")
        self.pan_y_val.setText(f"{st.pan_y:.0f}%")
        self.zoom_val.setText(f"{st.zoom}%")
        self.brightness_val.setText(f"{st.brightness:.2f}")
        self.contrast_val.setText(f"{st.contrast:.2f}")

    # ---------------------------
    # Theme
    # ---------------------------
    def _apply_theme(self, dark: bool) -> None:
        self._dark = bool(dark)
        app = QApplication.instance()
        if app is None:
            return
        app.setStyle("Fusion")
        pal = app.style().standardPalette()
        if self._dark:
            pal.setColor(QPalette.Window, QColor(37, 37, 38))
            pal.setColor(QPalette.WindowText, QColor(230, 230, 230))
            pal.setColor(QPalette.Base, QColor(30, 30, 30))
            pal.setColor(QPalette.AlternateBase, QColor(45, 45, 48))
            pal.setColor(QPalette.Text, QColor(230, 230, 230))
            pal.setColor(QPalette.Button, QColor(50, 50, 52))
            pal.setColor(QPalette.ButtonText, QColor(230, 230, 230))
            pal.setColor(QPalette.Highlight, QColor(64, 128, 220))
            pal.setColor(QPalette.HighlightedText, QColor(255, 255, 255))
        app.setPalette(pal)

    # ---------------------------
    # Layout helpers
    # ---------------------------
    def _slider(self, lo: int, hi: int, on_change) -> QSlider:
        s = QSlider(Qt.Horizontal)
        s.setRange(lo, hi)
        s.valueChanged.connect(on_change)
        return s

    def _add_slider_row(self, layout: QVBoxLayout, label: str, slider: QSlider) -> QLabel:
        val = QLabel()
        val.setMinimumWidth(45)
        val.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        row = QHBoxLayout()
        row.addWidget(QLabel(label))
        row.addWidget(slider, 1)
        row.addWidget(val, 0)
        layout.addLayout(row)
        return val

    def _titled(self, title: str, widget: QWidget) -> QVBoxLayout:
        col = QVBoxLayout()
        col.addWidget(QLabel(title))
        col.addWidget(widget, 1)
        return col

    def _make_group(self, title: str) -> tuple[QGroupBox, QVBoxLayout]:
        g = QGroupBox(title)
        gl = QVBoxLayout()
        g.setLayout(gl)
        return g, gl

    def _add_labeled_row(self, layout: QVBoxLayout, label: str, widget: Optional[QWidget]) -> None:
        row = QHBoxLayout()
        row.addWidget(QLabel(label))
        if widget is not None:
            row.addWidget(widget, 1)
        layout.addLayout(row)
