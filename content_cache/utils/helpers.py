"""
Utility helper functions for presenting cache data.
"""
from typing import Union

SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(num_bytes: Union[int, float]) -> str:
    """
    Format a byte count in human units.

    Args:
        num_bytes: Size in bytes

    Returns:
        String such as "1.5 KB" (one decimal, 1024-based)
    """
    size = float(num_bytes or 0)
    unit_index = 0
    while abs(size) >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.1f} {SIZE_UNITS[unit_index]}"
