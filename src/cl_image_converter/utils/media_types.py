"""MIME sniffing and upload acceptance rules."""

import re
from typing import Final

import magic

from ..common.errors import UnsupportedFileError
from ..common.schemas import RawFile

ACCEPTED_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/svg+xml",
        "image/heic",
        "image/hevc",
        "image/heif",
        "image/bmp",
        "image/tiff",
        "image/avif",
    }
)

# Browsers and some OS pickers report these with an empty or generic type.
ACCEPTED_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\.(heic|hevc|heif|avif)$", re.IGNORECASE
)

FALLBACK_MIME_TYPE: Final[str] = "application/octet-stream"


def sniff_mime(data: bytes) -> str:
    """Determine a MIME type from file contents using libmagic."""
    mime = magic.Magic(mime=True)
    file_type = mime.from_buffer(data)
    if not file_type:
        file_type = FALLBACK_MIME_TYPE
    return file_type


def with_mime_type(file: RawFile) -> RawFile:
    """Return ``file`` with a MIME type, sniffing one if none was declared."""
    if file.mime_type:
        return file
    return file.model_copy(update={"mime_type": sniff_mime(file.data)})


def is_accepted(file: RawFile) -> bool:
    return file.mime_type.lower() in ACCEPTED_MIME_TYPES or bool(
        ACCEPTED_SUFFIX_PATTERN.search(file.name)
    )


def validate_upload(file: RawFile, max_bytes: int) -> None:
    """Reject files the converter will not attempt.

    Raises:
        UnsupportedFileError: If the type is not accepted or the file exceeds max_bytes
    """
    if not is_accepted(file):
        raise UnsupportedFileError("Unsupported file format", file.name)
    if file.byte_size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise UnsupportedFileError(f"File is too large (max {limit_mb}MB)", file.name)
