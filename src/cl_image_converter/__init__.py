"""cl_image_converter - In-memory image format conversion and resizing."""

from .common.config import ConverterConfig
from .common.display_urls import DisplayUrlRegistry
from .common.errors import (
    ConversionError,
    EncodeError,
    InvalidSettingsError,
    NormalizationError,
    PipelineBusyError,
    UnsupportedFileError,
)
from .common.presets import DIMENSION_PRESETS, get_preset
from .common.schemas import (
    ConversionResult,
    ConversionSettings,
    ConvertedImage,
    DimensionPreset,
    RawFile,
    SourceImage,
)
from .pipeline import ConversionPipeline, ConversionSession, PipelineState, convert

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "ConversionPipeline",
    "ConversionResult",
    "ConversionSession",
    "ConversionSettings",
    "ConvertedImage",
    "ConverterConfig",
    "DIMENSION_PRESETS",
    "DimensionPreset",
    "DisplayUrlRegistry",
    "EncodeError",
    "InvalidSettingsError",
    "NormalizationError",
    "PipelineBusyError",
    "PipelineState",
    "RawFile",
    "SourceImage",
    "UnsupportedFileError",
    "__version__",
    "convert",
    "get_preset",
]
