"""Size statistics for a finished conversion."""

from ..common.schemas import ConversionMetrics


def compute_metrics(original_bytes: int, converted_bytes: int) -> ConversionMetrics:
    """
    Bytes saved and the saving as a percentage of the original size.

    A conversion that grows the file gives negative values; that is a valid
    outcome, not an error. An empty original gives a ratio of 0.0 instead of
    dividing by zero.
    """
    space_saved = original_bytes - converted_bytes
    if original_bytes == 0:
        compression_ratio = 0.0
    else:
        compression_ratio = space_saved / original_bytes * 100
    return ConversionMetrics(compression_ratio=compression_ratio, space_saved=space_saved)
