"""
sizes.py — Size Formatter
=========================
Human-readable module sizes for vertex labels and list rows.
"""

from typing import Optional


BYTES_IN_MB = 1000000
UNKNOWN_SIZE = "(unknown size)"


def format_size(size_bytes: Optional[int]) -> str:
    """
    Whole megabytes, rounded down, never "0mb" for a positive size.

    >>> format_size(2500000)
    '2mb'
    >>> format_size(500000)
    '1mb'
    >>> format_size(-1)
    '(unknown size)'
    """
    if size_bytes is None or size_bytes <= 0:
        return UNKNOWN_SIZE
    size_mb = size_bytes // BYTES_IN_MB
    return f"{size_mb if size_mb > 0 else 1}mb"


def vertex_label(vertex_id: str, size_bytes: Optional[int]) -> str:
    """Two-line glyph label: id, then formatted size."""
    return f"{vertex_id}\n{format_size(size_bytes)}"
