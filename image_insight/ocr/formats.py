"""Accepted upload formats for OCR."""

SUPPORTED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/bmp",
        "image/tiff",
        "image/gif",
    }
)

UNSUPPORTED_FORMAT_MESSAGE = (
    "Unsupported image format (only JPG, PNG, BMP, TIFF and GIF are accepted)"
)


def is_supported_format(content_type: str | None) -> bool:
    """Check a declared content type against the accepted image formats.

    The comparison is exact and case-sensitive.

    Args:
        content_type: MIME type declared by the client, possibly ``None``.

    Returns:
        ``True`` if the type is accepted.
    """
    return content_type is not None and content_type in SUPPORTED_CONTENT_TYPES
