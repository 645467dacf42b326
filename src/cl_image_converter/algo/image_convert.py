"""Pure image decode, resample and re-encode logic (single file, in memory)."""

from io import BytesIO
from pathlib import PurePath

from loguru import logger
from PIL import Image, ImageOps, features

from ..common.errors import EncodeError
from ..common.schemas import ConvertedImage, RawFile
from ..utils.profiling import timed
from .heic_normalize import register_heif_opener

LOAD_FAILED = "failed to load image"
CONVERT_FAILED = "failed to convert image"

# EXIF orientations that swap width and height when applied
_TRANSPOSED_ORIENTATIONS = frozenset({5, 6, 7, 8})
_EXIF_ORIENTATION_TAG = 0x0112


def get_pil_format(format_str: str) -> str:
    """Convert format string to PIL format name."""
    format_map = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "png": "PNG",
        "webp": "WEBP",
        "avif": "AVIF",
    }
    return format_map.get(format_str.lower(), format_str.upper())


def get_extension(format_str: str) -> str:
    """Canonical filename extension for a target format (jpeg -> jpg)."""
    fmt = format_str.lower()
    return "jpg" if fmt == "jpeg" else fmt


def get_mime_type(format_str: str) -> str:
    fmt = format_str.lower()
    return "image/jpeg" if fmt in ("jpg", "jpeg") else f"image/{fmt}"


def supports_format(format_str: str) -> bool:
    """Whether the installed Pillow can encode ``format_str``."""
    if format_str.lower() == "avif":
        return bool(features.check("avif"))
    return True


def output_name(name: str, format_str: str) -> str:
    """Replace the last suffix of ``name`` with the target format's extension."""
    path = PurePath(name)
    stem = path.stem if path.suffix else path.name
    return f"{stem}.{get_extension(format_str)}"


def probe_dimensions(file: RawFile) -> tuple[int, int]:
    """
    Read the displayed (orientation-corrected) size of an image from its header.

    Raises:
        EncodeError: If the bytes are not a decodable image
    """
    register_heif_opener()
    try:
        with Image.open(BytesIO(file.data)) as img:
            width, height = img.size
            orientation = img.getexif().get(_EXIF_ORIENTATION_TAG)
    except Exception as exc:
        raise EncodeError(LOAD_FAILED, file.name) from exc

    if orientation in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return width, height


def _to_resample_mode(img: Image.Image) -> Image.Image:
    # Pillow resizes P and 1 with NEAREST whatever filter is asked for
    if img.mode in ("P", "PA"):
        return img.convert("RGBA" if img.mode == "PA" or "transparency" in img.info else "RGB")
    if img.mode == "1":
        return img.convert("L")
    # 16/32-bit grayscale would clip to white on a plain convert
    if img.mode.startswith("I") or img.mode == "F":
        return img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    if img.mode not in ("RGB", "RGBA", "L", "LA"):
        return img.convert("RGBA" if img.mode.endswith("A") else "RGB")
    return img


def _to_output_mode(img: Image.Image, fmt: str) -> Image.Image:
    # JPEG does not support alpha channel
    if fmt == "jpeg" and img.mode != "RGB":
        return img.convert("RGB")
    return img


@timed
def image_convert(
    *,
    file: RawFile,
    format: str,
    width: int,
    height: int,
    quality: int | None = None,
    resample: Image.Resampling = Image.Resampling.LANCZOS,
) -> ConvertedImage:
    """
    Decode an image, stretch it to an exact pixel grid and encode it.

    The resize is a single-pass stretch to ``width x height``; no letterbox or
    crop is applied, so a mismatched aspect ratio distorts the image.

    Args:
        file: Decodable input (already normalized if it was HEIC/HEVC)
        format: Target format (jpeg, png, webp, avif)
        width: Target width in pixels
        height: Target height in pixels
        quality: 0-100, clamped. Ignored for PNG, which is lossless.
        resample: Pillow resampling filter

    Returns:
        ConvertedImage with the encoded bytes

    Raises:
        EncodeError: If decoding fails, the codec is unavailable, or encoding
            produces no data
    """
    fmt = "jpeg" if format.lower() == "jpg" else format.lower()
    if width <= 0 or height <= 0:
        raise ValueError(f"Target dimensions must be positive, got {width}x{height}")

    register_heif_opener()

    try:
        with Image.open(BytesIO(file.data)) as img:
            img.load()
            source = ImageOps.exif_transpose(img)
    except Exception as exc:
        raise EncodeError(LOAD_FAILED, file.name) from exc

    if not supports_format(fmt):
        logger.error(f"{get_pil_format(fmt)} encoder is not available in this Pillow build")
        raise EncodeError(CONVERT_FAILED, file.name) from RuntimeError(
            f"{get_pil_format(fmt)} encoding is not supported by the installed Pillow"
        )

    save_kwargs: dict[str, object] = {}

    if fmt in ("jpeg", "webp", "avif") and quality is not None:
        save_kwargs["quality"] = max(0, min(100, quality))

    if fmt == "png":
        save_kwargs["optimize"] = True

    buffer = BytesIO()
    try:
        resized = _to_resample_mode(source).resize((width, height), resample)
        resized = _to_output_mode(resized, fmt)
        resized.save(buffer, format=get_pil_format(fmt), **save_kwargs)
    except Exception as exc:
        raise EncodeError(CONVERT_FAILED, file.name) from exc

    data = buffer.getvalue()
    if not data:
        raise EncodeError(CONVERT_FAILED, file.name)

    return ConvertedImage(
        name=output_name(file.name, fmt),
        mime_type=get_mime_type(fmt),
        byte_size=len(data),
        width=width,
        height=height,
        format=fmt.upper(),
        data=data,
    )
