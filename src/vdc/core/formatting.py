"""Formatting utilities.

Pure functions for formatting data for display.
"""

import math


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes.

    Returns:
        Formatted string (e.g., "4.2 GB", "128 MB", "1.5 KB").
    """
    if size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} B"


def format_eta(seconds: float | None) -> str:
    """Format an estimated time remaining.

    Args:
        seconds: Remaining seconds, or None/inf when unknown.

    Returns:
        Compact string such as "~42s" or "~3m05s", or "" when unknown.
    """
    if seconds is None or math.isinf(seconds) or math.isnan(seconds):
        return ""
    remaining = max(0, math.ceil(seconds))
    if remaining < 60:
        return f"~{remaining}s"
    minutes, secs = divmod(remaining, 60)
    return f"~{minutes}m{secs:02d}s"
