"""Human-readable sizes for result summaries."""

from typing import Final

_UNITS: Final[tuple[str, ...]] = ("Bytes", "KB", "MB", "GB")
_BASE: Final[int] = 1024


def format_file_size(num_bytes: int) -> str:
    """Format a byte count with base-1024 units, e.g. ``1.5 KB``.

    Two decimals at most, trailing zeros dropped. Negative counts (a
    conversion that grew the file) keep their sign.
    """
    if num_bytes == 0:
        return "0 Bytes"
    sign = "-" if num_bytes < 0 else ""
    magnitude = abs(num_bytes)

    exponent = 0
    while exponent < len(_UNITS) - 1 and magnitude >= _BASE ** (exponent + 1):
        exponent += 1

    value = round(magnitude / _BASE**exponent, 2)
    return f"{sign}{value:g} {_UNITS[exponent]}"
