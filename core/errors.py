from __future__ import annotations


class EmojiError(Exception):
    """Base class for errors that are reported to the user as a message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UploadRejected(EmojiError):
    """The file was refused before any pixel reached the pipeline."""


class MissingPrecondition(EmojiError):
    """An action was attempted before an image or a generated emoji exists."""


class ClipboardUnavailable(EmojiError):
    pass
