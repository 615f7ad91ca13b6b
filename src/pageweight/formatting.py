"""Display helpers for byte and time values."""


def format_number(value: float, granularity: float = 1) -> str:
    """Round to the nearest multiple of granularity and add thousands separators."""
    rounded = round(value / granularity) * granularity
    decimals = 0
    while granularity < 1 and round(granularity * 10**decimals, 9) % 1:
        decimals += 1
    return f"{rounded:,.{decimals}f}"


def format_bytes_to_kb(size: int, granularity: float = 1) -> str:
    """Format a byte count as kilobytes, e.g. ``format_bytes_to_kb(199680) == "195 KB"``."""
    return f"{format_number(size / 1024, granularity)} KB"


def format_ms(ms: float, granularity: float = 10) -> str:
    """Format milliseconds, e.g. ``format_ms(1234) == "1,230 ms"``."""
    return f"{format_number(ms, granularity)} ms"
