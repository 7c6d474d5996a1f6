"""Human-readable sizes and bitrates (base 1024, one decimal digit)."""

from __future__ import annotations

SIZE_UNITS = ["", "K", "M", "G", "T", "P", "E", "Z", "Y"]


def humanize_size(value: float) -> str:
    """Format a value with the largest base-1024 unit that keeps it >= 1.

    >>> humanize_size(0), humanize_size(1536), humanize_size(1024 ** 2)
    ('0.0', '1.5K', '1.0M')
    """
    value = float(value)
    exponent = 0
    while exponent < len(SIZE_UNITS) - 1 and value >= 1024 ** (exponent + 1):
        exponent += 1
    return f"{value / 1024 ** exponent:.1f}{SIZE_UNITS[exponent]}"


def humanize_bps(bits_per_second: float) -> str:
    return f"{humanize_size(bits_per_second)}bps"


def format_rate(bytes_per_second: float) -> str:
    """Format a bytes/sec rate as a bitrate string, e.g. '8.0Kbps'."""
    return humanize_bps(bytes_per_second * 8)
