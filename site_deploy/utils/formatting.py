"""Formatting utilities for display"""

from typing import Union

from ..constants import ANSI_ESCAPE_PATTERN


def format_size(size_bytes: Union[int, float]) -> str:
    """Format byte size to human readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size string

    Examples:
        >>> format_size(1024)
        '1.0 KB'
        >>> format_size(1048576)
        '1.0 MB'
    """
    if size_bytes < 0:
        return "Invalid size"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    if unit_index == 0:
        # Bytes - show as integer
        return f"{int(size)} {units[unit_index]}"
    else:
        # KB and above - show with one decimal
        return f"{size:.1f} {units[unit_index]}"


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable format

    Args:
        seconds: Duration in seconds

    Returns:
        Human readable duration string

    Examples:
        >>> format_duration(1.5)
        '1.5s'
        >>> format_duration(65)
        '1m 5s'
    """
    if seconds < 0:
        return "Invalid duration"

    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"


def strip_ansi(text: str) -> str:
    """Remove terminal color codes"""
    return ANSI_ESCAPE_PATTERN.sub('', text)
