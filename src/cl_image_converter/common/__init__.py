"""Common module - schemas, errors, configuration and display URLs."""

from .config import ConverterConfig
from .display_urls import DisplayUrlRegistry, get_registry
from .errors import (
    ConversionError,
    EncodeError,
    InvalidSettingsError,
    NormalizationError,
    PipelineBusyError,
    UnsupportedFileError,
)
from .presets import DIMENSION_PRESETS, get_preset
from .schemas import (
    ConversionResult,
    ConversionSettings,
    ConvertedImage,
    DimensionEdit,
    DimensionPreset,
    Dimensions,
    RawFile,
    SourceImage,
)

__all__ = [
    "ConversionError",
    "ConversionResult",
    "ConversionSettings",
    "ConvertedImage",
    "ConverterConfig",
    "DIMENSION_PRESETS",
    "DimensionEdit",
    "DimensionPreset",
    "Dimensions",
    "DisplayUrlRegistry",
    "EncodeError",
    "InvalidSettingsError",
    "NormalizationError",
    "PipelineBusyError",
    "RawFile",
    "SourceImage",
    "UnsupportedFileError",
    "get_preset",
    "get_registry",
]
