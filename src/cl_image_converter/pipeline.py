"""Conversion pipeline runtime - sequences normalization, encoding and metrics."""

import asyncio
from collections.abc import Callable
from enum import Enum
from types import TracebackType
from typing import Self

from loguru import logger

from .algo.heic_normalize import heic_normalize, needs_normalization
from .algo.image_convert import image_convert, probe_dimensions
from .algo.metrics import compute_metrics
from .common.config import ConverterConfig
from .common.display_urls import DisplayUrlRegistry, get_registry
from .common.errors import PipelineBusyError
from .common.schemas import (
    ConversionResult,
    ConversionSettings,
    DisplayedConversion,
    DisplayedSource,
    RawFile,
    SourceImage,
)
from .utils.media_types import validate_upload, with_mime_type
from .utils.profiling import timed


class PipelineState(str, Enum):
    idle = "idle"
    normalizing = "normalizing"
    encoding = "encoding"
    done = "done"
    errored = "errored"


StateCallback = Callable[[PipelineState], None]


class ConversionPipeline:
    """Runs one conversion at a time: normalize (if needed), encode, measure.

    Responsibilities:
    - Validates the upload and sniffs a missing MIME type
    - Normalizes HEIC/HEVC input to JPEG before anything else decodes it
    - Resamples and encodes to the requested format, size and quality
    - Computes size metrics and hands out display URLs for both images

    The pipeline keeps no settings between calls. Failures are logged and
    re-raised unchanged; nothing is retried.

    Example:
        pipeline = ConversionPipeline()
        result = await pipeline.convert(raw_file, ConversionSettings(format="webp"))
        ...
        result.release(pipeline.urls)
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        urls: DisplayUrlRegistry | None = None,
        on_state_change: StateCallback | None = None,
    ):
        """Initialize pipeline.

        Args:
            config: Pipeline configuration. Defaults to ConverterConfig().
            urls: Registry for display URLs. Defaults to the process-wide one.
            on_state_change: Called with every state the pipeline enters
        """
        self.config: ConverterConfig = config if config is not None else ConverterConfig()
        self.urls: DisplayUrlRegistry = urls if urls is not None else get_registry()
        self._on_state_change: StateCallback | None = on_state_change
        self._state: PipelineState = PipelineState.idle
        self._running: bool = False

    @property
    def state(self) -> PipelineState:
        return self._state

    def _enter(self, state: PipelineState) -> None:
        self._state = state
        if self._on_state_change:
            self._on_state_change(state)

    async def _accept(self, file: RawFile) -> RawFile:
        # libmagic blocks
        file = await asyncio.to_thread(with_mime_type, file)
        if self.config.validate_uploads:
            validate_upload(file, self.config.max_upload_bytes)
        return file

    async def inspect(self, file: RawFile) -> SourceImage:
        """Accept a file and read its natural dimensions without converting it.

        Callers use this to seed width/height before the first edit.
        """
        file = await self._accept(file)
        working = file
        if needs_normalization(file.name, file.mime_type):
            working = await asyncio.to_thread(
                heic_normalize, file, self.config.normalization_quality
            )
        width, height = await asyncio.to_thread(probe_dimensions, working)
        return SourceImage.from_raw(file, width, height)

    @timed
    async def convert(self, file: RawFile, settings: ConversionSettings) -> ConversionResult:
        """Convert ``file`` according to a settings snapshot.

        Raises:
            PipelineBusyError: If a conversion is already running on this pipeline
            UnsupportedFileError: If the upload is rejected
            NormalizationError: If HEIC/HEVC decoding fails
            EncodeError: If decoding, resampling or encoding fails
        """
        if self._running:
            raise PipelineBusyError("A conversion is already in progress", file.name)
        self._running = True

        try:
            file = await self._accept(file)
            working = file

            if needs_normalization(file.name, file.mime_type):
                self._enter(PipelineState.normalizing)
                working = await asyncio.to_thread(
                    heic_normalize, file, self.config.normalization_quality
                )

            self._enter(PipelineState.encoding)
            natural_width, natural_height = await asyncio.to_thread(probe_dimensions, working)
            source = SourceImage.from_raw(file, natural_width, natural_height)

            converted = await asyncio.to_thread(
                lambda: image_convert(
                    file=working,
                    format=settings.format,
                    width=settings.width,
                    height=settings.height,
                    quality=settings.quality,
                    resample=self.config.resample_filter,
                )
            )

            metrics = compute_metrics(source.byte_size, converted.byte_size)

            original_url = self.urls.create(source.data, source.mime_type)
            converted_url = self.urls.create(converted.data, converted.mime_type)

            result = ConversionResult(
                original=DisplayedSource(image=source, url=original_url),
                converted=DisplayedConversion(image=converted, url=converted_url),
                settings=settings,
                compression_ratio=metrics.compression_ratio,
                space_saved=metrics.space_saved,
            )

            self._enter(PipelineState.done)
            logger.info(
                f"Converted {source.name} ({source.byte_size} bytes, "
                + f"{source.natural_width}x{source.natural_height}) -> {converted.name} "
                + f"({converted.byte_size} bytes, {converted.width}x{converted.height}), "
                + f"saved {metrics.compression_ratio:.1f}%"
            )
            return result

        except Exception as exc:
            self._enter(PipelineState.errored)
            logger.error(f"Conversion failed: {exc}")
            raise

        finally:
            self._running = False
            self._enter(PipelineState.idle)


class ConversionSession:
    """Holds the result currently on display and releases it when replaced.

    Example:
        async with ConversionSession(pipeline.urls) as session:
            session.replace(await pipeline.convert(file, settings))
            ...
            session.replace(await pipeline.convert(other_file, settings))
    """

    def __init__(self, urls: DisplayUrlRegistry | None = None):
        self.urls: DisplayUrlRegistry = urls if urls is not None else get_registry()
        self._current: ConversionResult | None = None

    @property
    def current(self) -> ConversionResult | None:
        return self._current

    def replace(self, result: ConversionResult | None) -> None:
        """Show ``result`` instead of the current one, releasing the old URLs."""
        previous, self._current = self._current, result
        if previous is not None and previous is not result:
            previous.release(self.urls)

    def close(self) -> None:
        self.replace(None)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


async def convert(
    file: RawFile,
    settings: ConversionSettings,
    *,
    config: ConverterConfig | None = None,
    urls: DisplayUrlRegistry | None = None,
) -> ConversionResult:
    """Convert one file with a fresh pipeline. The sole entry point UIs need."""
    return await ConversionPipeline(config=config, urls=urls).convert(file, settings)
