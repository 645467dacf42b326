"""HEIC/HEVC to JPEG normalization (single file, in memory)."""

import re
from io import BytesIO
from typing import Final

import pillow_heif
from loguru import logger
from PIL import Image, ImageOps

from ..common.config import DEFAULT_NORMALIZATION_QUALITY
from ..common.errors import NormalizationError
from ..common.schemas import RawFile
from ..utils.profiling import timed

PROPRIETARY_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {"image/heic", "image/hevc", "image/heif"}
)
PROPRIETARY_SUFFIX: Final[re.Pattern[str]] = re.compile(r"\.(heic|hevc|heif)$", re.IGNORECASE)
_ANY_SUFFIX: Final[re.Pattern[str]] = re.compile(r"\.[^/.]+$")

_heif_registered = False


def register_heif_opener() -> None:
    """Teach Pillow to open HEIF containers. Idempotent."""
    global _heif_registered
    if not _heif_registered:
        pillow_heif.register_heif_opener()
        _heif_registered = True


def needs_normalization(name: str, mime_type: str) -> bool:
    """True when the file is a proprietary camera format by type or by name."""
    return mime_type.lower() in PROPRIETARY_MIME_TYPES or bool(PROPRIETARY_SUFFIX.search(name))


def normalized_name(name: str) -> str:
    """Swap the proprietary suffix (or, failing that, the last suffix) for ``.jpg``."""
    if PROPRIETARY_SUFFIX.search(name):
        return PROPRIETARY_SUFFIX.sub(".jpg", name)
    if _ANY_SUFFIX.search(name):
        return _ANY_SUFFIX.sub(".jpg", name)
    return f"{name}.jpg"


@timed
def heic_normalize(file: RawFile, quality: int = DEFAULT_NORMALIZATION_QUALITY) -> RawFile:
    """
    Convert a HEIC/HEVC file to a baseline JPEG, or pass anything else through.

    The normalization quality is independent of the user's output quality and
    is kept high so the later encode does not compound loss.

    Args:
        file: Uploaded file
        quality: JPEG quality for the intermediate file

    Returns:
        ``file`` itself when no normalization applies, else a new JPEG RawFile

    Raises:
        NormalizationError: If the container cannot be decoded or re-encoded
    """
    if not needs_normalization(file.name, file.mime_type):
        logger.debug(f"No normalization needed for {file.name} ({file.mime_type})")
        return file

    register_heif_opener()

    try:
        with Image.open(BytesIO(file.data)) as img:
            img.load()
            upright = ImageOps.exif_transpose(img)
            if upright.mode != "RGB":
                upright = upright.convert("RGB")

            buffer = BytesIO()
            upright.save(buffer, format="JPEG", quality=quality)
    except Exception as exc:
        raise NormalizationError("Failed to convert HEIC file", file.name) from exc

    data = buffer.getvalue()
    if not data:
        raise NormalizationError("Failed to convert HEIC file", file.name)

    normalized = RawFile(name=normalized_name(file.name), mime_type="image/jpeg", data=data)
    logger.info(
        f"Normalized {file.name} -> {normalized.name} "
        + f"({file.byte_size} -> {normalized.byte_size} bytes)"
    )
    return normalized
