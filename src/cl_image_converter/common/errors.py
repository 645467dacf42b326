"""Error taxonomy for the conversion pipeline."""

from typing import override


class ConversionError(Exception):
    """Base class for every failure the pipeline surfaces to its caller."""

    def __init__(self, message: str, filename: str | None = None):
        self.message: str = message
        self.filename: str | None = filename
        super().__init__(message)

    @override
    def __str__(self) -> str:
        if self.filename:
            return f"{self.message}: {self.filename}"
        return self.message


class NormalizationError(ConversionError):
    """HEIC/HEVC container could not be decoded."""


class EncodeError(ConversionError):
    """Decode-for-resample failed, or the target codec produced no data."""


class UnsupportedFileError(ConversionError):
    """Upload rejected before any decoding (type or size)."""


class InvalidSettingsError(ConversionError, ValueError):
    """A settings update was rejected."""


class PipelineBusyError(ConversionError):
    """convert() was called on a pipeline that already has a run in flight."""
