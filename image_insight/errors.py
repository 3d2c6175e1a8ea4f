"""Error types raised while handling an uploaded image.

Every error carries the upload filename (when known) so the request
boundary can log and report it.
"""


class ImageInsightError(Exception):
    """Base class for all user-facing processing failures."""

    def __init__(self, message: str, filename: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename


class EmptyInputError(ImageInsightError):
    """No file was provided, or the file has no content."""


class FileTooLargeError(ImageInsightError):
    """The upload exceeds the configured size limit."""


class UnsupportedFormatError(ImageInsightError):
    """The declared content type is not an accepted image format."""


class InvalidImageError(ImageInsightError):
    """The bytes could not be decoded into an image."""


class EngineFailureError(ImageInsightError):
    """The OCR engine failed during recognition."""


class ModelFailureError(ImageInsightError):
    """The vision model call failed or returned no text."""
