import logging
import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from core.constants import LOG_LEVEL_ENV_VAR, gallery_path
from core.gallery_store import Gallery, JsonGalleryStore
from core.session import EmojiSession
from ui.main_window import MainWindow


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    _configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Logo Emoji")
    app.setOrganizationName("Logo Emoji")

    session = EmojiSession(gallery=Gallery(JsonGalleryStore(gallery_path())))

    # A share link (or an image path) may be passed on the command line.
    args = app.arguments()[1:]
    w = MainWindow(session)
    if args:
        arg = args[0]
        if not session.restore_from_link(arg) and Path(arg).is_file():
            w.load_path(arg)
    w.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
