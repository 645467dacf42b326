"""Public algorithm API for cl_image_converter.

This module exports the pure conversion functions for direct use without the
pipeline runtime (no state machine, no display URLs).

Example:
    Normalize, resize and re-encode by hand::

        from cl_image_converter.algorithms import (
            compute_metrics,
            heic_normalize,
            image_convert,
        )

        jpeg = heic_normalize(raw_heic)
        webp = image_convert(file=jpeg, format="webp", width=1920, height=1080, quality=80)
        metrics = compute_metrics(raw_heic.byte_size, webp.byte_size)
        print(f"Saved {metrics.compression_ratio:.1f}%")

    Aspect-ratio locked edits::

        from cl_image_converter.algorithms import resolve_dimensions
        from cl_image_converter.common import DimensionEdit, Dimensions

        natural = Dimensions(width=4000, height=3000)
        dims = resolve_dimensions(
            DimensionEdit(axis="width", value=1920),
            current=natural,
            lock=True,
            natural=natural,
        )
        # dims == Dimensions(width=1920, height=1440)
"""

from .algo.dimensions import (
    apply_preset,
    initial_dimensions,
    resolve_dimensions,
    update_settings,
)
from .algo.heic_normalize import heic_normalize, needs_normalization, normalized_name
from .algo.image_convert import (
    get_extension,
    get_mime_type,
    get_pil_format,
    image_convert,
    output_name,
    probe_dimensions,
    supports_format,
)
from .algo.metrics import compute_metrics
from .utils.formatting import format_file_size

__all__ = [
    "apply_preset",
    "compute_metrics",
    "format_file_size",
    "get_extension",
    "get_mime_type",
    "get_pil_format",
    "heic_normalize",
    "image_convert",
    "initial_dimensions",
    "needs_normalization",
    "normalized_name",
    "output_name",
    "probe_dimensions",
    "resolve_dimensions",
    "supports_format",
    "update_settings",
]
