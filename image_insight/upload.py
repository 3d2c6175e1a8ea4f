"""In-memory representation of an uploaded image file."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from image_insight.errors import EmptyInputError, FileTooLargeError


@dataclass(frozen=True)
class Upload:
    """Raw bytes of an uploaded file with its declared metadata."""

    filename: str | None
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def display_size(self) -> str:
        """Size in kilobytes, formatted for result pages."""
        return f"{self.size / 1024.0:.2f} KB"

    @classmethod
    def from_path(cls, path: Path) -> "Upload":
        """Read a file from disk, guessing its content type from the name.

        Args:
            path: Path to the image file.

        Returns:
            Upload holding the file contents.
        """
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name, content_type=content_type, data=path.read_bytes()
        )


def check_size(size: int, max_size_mb: float | None, filename: str | None) -> None:
    """Raise FileTooLargeError when ``size`` bytes exceed ``max_size_mb``."""
    if max_size_mb is not None and size > max_size_mb * 1024 * 1024:
        raise FileTooLargeError(
            f"Image file exceeds the {max_size_mb:g} MB limit", filename
        )


def check_upload(upload: Upload, max_size_mb: float | None = None) -> None:
    """Reject empty or oversized uploads before any processing.

    Args:
        upload: The uploaded file.
        max_size_mb: Size limit in megabytes, or ``None`` for no limit.

    Raises:
        EmptyInputError: If the upload has no content.
        FileTooLargeError: If the upload exceeds ``max_size_mb``.
    """
    if upload.is_empty:
        raise EmptyInputError("Image file is empty", upload.filename)
    check_size(upload.size, max_size_mb, upload.filename)
