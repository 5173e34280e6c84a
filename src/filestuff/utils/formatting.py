"""Pure formatting utilities for human-readable output.

Stateless helpers used by the container accessors that file browsers show
next to an entry name.
"""

from typing import Final

# Binary unit steps (1024-based), smallest first
_UNITS: Final[tuple[str, ...]] = ("KB", "MB", "GB", "TB", "PB")
_STEP: Final[int] = 1024


def format_size(size: int, *, precision: int = 1) -> str:
    """Convert a byte count to a human-readable size.

    Uses binary units (1024-based) for consistency with system tools.

    Args:
        size: Number of bytes to format (must be non-negative)
        precision: Number of decimal places for KB and larger units

    Returns:
        Human-readable size such as ``"1 byte"``, ``"512 bytes"`` or ``"2.5 MB"``

    Examples:
        >>> format_size(1)
        '1 byte'
        >>> format_size(512)
        '512 bytes'
        >>> format_size(2048)
        '2.0 KB'
        >>> format_size(5 * 1024**3 // 2)
        '2.5 GB'
    """
    if size < 0:
        msg = "size must be non-negative"
        raise ValueError(msg)

    if size < _STEP:
        return "1 byte" if size == 1 else f"{size} bytes"

    value = float(size)
    unit = _UNITS[0]
    for unit in _UNITS:
        value /= _STEP
        if value < _STEP:
            break

    return f"{value:.{precision}f} {unit}"
