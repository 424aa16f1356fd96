"""Display strings for estimates. Missing values render as "--"."""

import math
from typing import Optional

from .profiles import currency_symbol
from .schemas import Dimensions


def _is_number(value) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


def format_print_time(seconds) -> str:
    """3720 → '1h 2m', 300 → '5m'."""
    if isinstance(seconds, str):
        return seconds
    if not _is_number(seconds):
        return "--"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_dimensions(dimensions: Optional[Dimensions]) -> str:
    if dimensions is None:
        return "--"
    if not all(dimensions.as_tuple()):
        return "--"
    return f"{dimensions.width:.1f} × {dimensions.depth:.1f} × {dimensions.height:.1f}"


def parse_dimensions_string(text: str) -> Optional[Dimensions]:
    """Inverse of format_dimensions. None if it isn't three numbers."""
    if not text or not isinstance(text, str):
        return None
    parts = text.split("×")
    if len(parts) != 3:
        return None
    try:
        width, depth, height = (float(p.strip()) for p in parts)
    except ValueError:
        return None
    if any(math.isnan(v) for v in (width, depth, height)):
        return None
    return Dimensions(width=width, depth=depth, height=height)


def format_currency(value, currency: str = "USD") -> str:
    if not _is_number(value):
        return "--"
    return f"{currency_symbol(currency)}{value:.2f}"


def format_file_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
