"""Target width/height policy: aspect-ratio lock, presets and settings updates."""

import math

from pydantic import ValidationError

from ..common.errors import InvalidSettingsError
from ..common.presets import get_preset
from ..common.schemas import (
    ConversionSettings,
    DimensionEdit,
    DimensionPreset,
    Dimensions,
    SourceImage,
    TargetFormat,
)

MIN_DIMENSION = 1
_FORMATS: tuple[TargetFormat, ...] = ("jpeg", "png", "webp", "avif")


def round_half_up(value: float) -> int:
    """Nearest integer, halves away from zero for positives (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_dimension(value: int) -> int:
    return max(MIN_DIMENSION, value)


def resolve_dimensions(
    edited: DimensionEdit,
    current: Dimensions,
    lock: bool,
    natural: Dimensions,
) -> Dimensions:
    """
    Apply one axis edit and derive the other axis when the ratio is locked.

    The ratio always comes from the natural (pre-resize) image, never from the
    current target, so repeated edits do not drift.

    Args:
        edited: Axis the user changed and its new value
        current: Target dimensions before the edit
        lock: Whether the aspect ratio is locked
        natural: Dimensions of the original image

    Returns:
        New target dimensions; neither axis is ever below 1
    """
    if edited.axis == "width":
        width = clamp_dimension(edited.value)
        height = current.height
        if lock:
            ratio = natural.width / natural.height
            height = clamp_dimension(round_half_up(width / ratio))
    else:
        height = clamp_dimension(edited.value)
        width = current.width
        if lock:
            ratio = natural.width / natural.height
            width = clamp_dimension(round_half_up(height * ratio))

    return Dimensions(width=width, height=height)


def apply_preset(preset: DimensionPreset) -> Dimensions:
    """Presets set both axes literally and ignore the aspect-ratio lock."""
    return Dimensions(width=preset.width, height=preset.height)


def initial_dimensions(source: SourceImage) -> Dimensions:
    return Dimensions(width=source.natural_width, height=source.natural_height)


def update_settings(
    settings: ConversionSettings,
    natural: Dimensions,
    *,
    format: str | None = None,
    quality: int | None = None,
    width: int | None = None,
    height: int | None = None,
    maintain_aspect_ratio: bool | None = None,
    preset: DimensionPreset | str | None = None,
) -> ConversionSettings:
    """
    Apply a batch of edits to a settings snapshot and return the new snapshot.

    Every dependent field is re-derived before the new value is built, so no
    intermediate state with a stale locked axis is ever observable.

    Args:
        settings: Current snapshot (not modified)
        natural: Natural dimensions of the image being converted
        format: New target format
        quality: New quality, 0-100
        width: Width edit (mutually exclusive with height)
        height: Height edit (mutually exclusive with width)
        maintain_aspect_ratio: New lock state, applied before any dimension edit
        preset: Preset or preset name; wins over width/height and ignores the lock

    Returns:
        A new, validated ConversionSettings

    Raises:
        InvalidSettingsError: On conflicting edits or out-of-range values
    """
    if width is not None and height is not None:
        raise InvalidSettingsError("Edit either width or height, not both")

    if format is not None and format not in _FORMATS:
        raise InvalidSettingsError(f"Unsupported output format '{format}'")

    if quality is not None and (isinstance(quality, bool) or not 0 <= quality <= 100):
        raise InvalidSettingsError(f"Quality must be between 0 and 100, got {quality}")

    lock = settings.maintain_aspect_ratio if maintain_aspect_ratio is None else maintain_aspect_ratio
    dims = settings.dimensions

    if preset is not None:
        if isinstance(preset, str):
            try:
                preset = get_preset(preset)
            except KeyError as exc:
                raise InvalidSettingsError(f"Unknown dimension preset '{preset}'") from exc
        dims = apply_preset(preset)
    elif width is not None:
        dims = resolve_dimensions(DimensionEdit(axis="width", value=width), dims, lock, natural)
    elif height is not None:
        dims = resolve_dimensions(DimensionEdit(axis="height", value=height), dims, lock, natural)

    values: dict[str, object] = {
        **settings.model_dump(),
        "format": format if format is not None else settings.format,
        "quality": quality if quality is not None else settings.quality,
        "width": dims.width,
        "height": dims.height,
        "maintain_aspect_ratio": lock,
    }
    try:
        return ConversionSettings.model_validate(values)
    except ValidationError as exc:
        raise InvalidSettingsError(
            f"Invalid conversion settings: {exc.errors()[0]['msg']}"
        ) from exc
