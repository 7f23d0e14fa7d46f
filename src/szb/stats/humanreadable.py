"""
Human-Readable Formatting
=========================

Compact size and duration strings for a 20-column display.

Example:
    >>> bibytes(1536)
    '1.5KiB'
    >>> duration(93784)
    '1d2h3m4s'
"""

from typing import Final, Sequence

IEC_SUFFIXES: Final[tuple[str, ...]] = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")
SI_SUFFIXES: Final[tuple[str, ...]] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def _size_string(size: float, unit: int, suffixes: Sequence[str]) -> str:
    for suffix in suffixes:
        if size < unit:
            return f"{size:.1f}{suffix}"
        size /= unit
    # Past the largest suffix; undo the last division
    return f"{size * unit:.1f}{suffixes[-1]}"


def bibytes(size: int) -> str:
    """Format a byte count with binary (1024-based) suffixes."""
    return _size_string(float(size), 1024, IEC_SUFFIXES)


def si_bytes(size: int) -> str:
    """Format a byte count with decimal (1000-based) suffixes."""
    return _size_string(float(size), 1000, SI_SUFFIXES)


def duration(seconds: float) -> str:
    """
    Format a duration as days, hours, minutes and seconds.

    Zero components are left out, so 3600 seconds is "1h". Fractions of a
    second are dropped; anything under one second is "0s".
    """
    total = int(seconds)
    if total <= 0:
        return "0s"

    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    parts = []
    for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (secs, "s")):
        if value:
            parts.append(f"{value}{unit}")
    return "".join(parts)
