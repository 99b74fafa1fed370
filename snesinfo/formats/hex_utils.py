"""
SNES Header Info - Hex String Utilities

Utilities for formatting image bytes as hex strings in traces and
command-line output.
"""

from typing import Iterable, List


def format_hex_row(row: Iterable[int]) -> str:
    """
    Format integers as a space-separated hex string.

    Args:
        row: Byte values (0-255), e.g. a bytes object

    Returns:
        Space-separated uppercase hex string

    Example:
        >>> format_hex_row([1, 2, 163, 255])
        '01 02 A3 FF'
    """
    return " ".join(f"{b:02X}" for b in row)


def hex_dump(data: bytes, start: int = 0, width: int = 16) -> List[str]:
    """
    Format bytes as hex dump lines prefixed with their offset.

    Args:
        data: Bytes to dump
        start: Offset of data[0], used for the line prefixes
        width: Bytes per line

    Returns:
        Lines like '07FC0  41 42 43 ...'
    """
    return [
        f"{start + i:05X}  {format_hex_row(data[i : i + width])}"
        for i in range(0, len(data), width)
    ]
