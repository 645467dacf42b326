"""Pydantic models for files, settings and conversion results."""

from typing import ClassVar, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .display_urls import DisplayUrlRegistry

TargetFormat = Literal["jpeg", "png", "webp", "avif"]
Axis = Literal["width", "height"]

# ─────────────────────────────────────────────────────────────
# Files
# ─────────────────────────────────────────────────────────────


class RawFile(BaseModel):
    """A file as handed over by the caller: name, declared type and bytes."""

    name: str = Field(min_length=1, description="Original filename, including suffix")
    mime_type: str = Field(default="", description="Declared MIME type, may be empty")
    data: bytes = Field(repr=False, description="Encoded file contents")

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def byte_size(self) -> int:
        return len(self.data)


class SourceImage(BaseModel):
    """The image a conversion started from. Read-only after creation."""

    name: str
    mime_type: str
    byte_size: int = Field(ge=0)
    natural_width: int = Field(gt=0)
    natural_height: int = Field(gt=0)
    data: bytes = Field(repr=False)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @classmethod
    def from_raw(cls, file: RawFile, natural_width: int, natural_height: int) -> "SourceImage":
        return cls(
            name=file.name,
            mime_type=file.mime_type,
            byte_size=file.byte_size,
            natural_width=natural_width,
            natural_height=natural_height,
            data=file.data,
        )

    @computed_field
    @property
    def format(self) -> str:
        """Display label taken from the MIME subtype, e.g. ``JPEG``."""
        _, _, subtype = self.mime_type.partition("/")
        return subtype.upper()


class ConvertedImage(BaseModel):
    """Encoder output, tagged with the format actually used."""

    name: str
    mime_type: str
    byte_size: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    format: str = Field(description="Upper-cased target format name, e.g. WEBP")
    data: bytes = Field(repr=False)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


# ─────────────────────────────────────────────────────────────
# Settings and dimensions
# ─────────────────────────────────────────────────────────────


class Dimensions(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class DimensionEdit(BaseModel):
    """A single user edit to one axis. The value is not yet clamped."""

    axis: Axis
    value: int

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class DimensionPreset(BaseModel):
    name: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    description: str = ""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ConversionSettings(BaseModel):
    """Snapshot of the user's choices for one conversion.

    Attributes:
        format: Target format
        quality: Output quality, 0-100 (the slider offers 10-100)
        width: Target width in pixels
        height: Target height in pixels
        maintain_aspect_ratio: Derive the other axis from the natural ratio on edit
    """

    format: TargetFormat = "jpeg"
    quality: int = Field(default=80, ge=0, le=100)
    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    maintain_aspect_ratio: bool = True

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @classmethod
    def for_image(cls, source: SourceImage, **overrides: object) -> "ConversionSettings":
        """Defaults sized to the image's natural dimensions (identity resize)."""
        values: dict[str, object] = {
            "width": source.natural_width,
            "height": source.natural_height,
        }
        values.update(overrides)
        return cls.model_validate(values)

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(width=self.width, height=self.height)


# ─────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────


class ConversionMetrics(BaseModel):
    compression_ratio: float
    space_saved: int

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class DisplayedSource(BaseModel):
    image: SourceImage
    url: str

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class DisplayedConversion(BaseModel):
    image: ConvertedImage
    url: str

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class ConversionResult(BaseModel):
    """Everything a caller needs to show and download one conversion."""

    original: DisplayedSource
    converted: DisplayedConversion
    settings: ConversionSettings
    compression_ratio: float
    space_saved: int

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_space_saved(self) -> Self:
        expected = self.original.image.byte_size - self.converted.image.byte_size
        if self.space_saved != expected:
            raise ValueError(
                f"space_saved must equal original minus converted size ({expected}), "
                + f"got {self.space_saved}"
            )
        return self

    @property
    def urls(self) -> tuple[str, str]:
        return self.original.url, self.converted.url

    def release(self, registry: DisplayUrlRegistry) -> None:
        """Revoke both display URLs. Safe to call more than once."""
        for url in self.urls:
            _ = registry.revoke(url)
