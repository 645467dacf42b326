"""Pipeline configuration."""

from typing import ClassVar, Final, Literal

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NORMALIZATION_QUALITY: Final[int] = 90
DEFAULT_MAX_UPLOAD_BYTES: Final[int] = 100 * 1024 * 1024

ResampleFilter = Literal["lanczos", "bicubic", "bilinear", "nearest"]

_RESAMPLE_MAP: Final[dict[str, Image.Resampling]] = {
    "lanczos": Image.Resampling.LANCZOS,
    "bicubic": Image.Resampling.BICUBIC,
    "bilinear": Image.Resampling.BILINEAR,
    "nearest": Image.Resampling.NEAREST,
}


class ConverterConfig(BaseModel):
    """Knobs that are fixed for a pipeline instance, not chosen per conversion.

    Attributes:
        normalization_quality: JPEG quality used when flattening HEIC/HEVC input.
            Kept high so the real encode step does not compound loss.
        max_upload_bytes: Largest accepted input file
        resample: Filter used when stretching to the target grid
        validate_uploads: Reject unsupported types and oversize files up front
    """

    normalization_quality: int = Field(default=DEFAULT_NORMALIZATION_QUALITY, ge=90, le=100)
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    resample: ResampleFilter = "lanczos"
    validate_uploads: bool = True

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def resample_filter(self) -> Image.Resampling:
        return _RESAMPLE_MAP[self.resample]
