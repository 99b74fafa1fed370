"""
SNES Header Info - Header layout constants and size classification.

This module provides:
- Image layout constants (copier header size, candidate base offsets)
- Header field offsets, relative to a candidate base
- Cart type and country byte tables
- Size classification (copier header present or not)
- Printable-ASCII helpers shared by the scorer and the decoder

Used by the scorer, the decoder and the header writer.
"""

from enum import Enum

from ..formats.header_data import CartType, Layout, Region
from .errors import UnrecognizedSizeError

# Image layout constants
COPIER_HEADER_SIZE = 0x200
SIZE_GRANULARITY = 1024
LOROM_BASE = 0x7F00
HIROM_BASE = 0xFF00
CANDIDATE_WINDOW_SIZE = 0x100

# Base offset used when both candidates score the same
TIED_SCORE_BASE = 0x0000

ROM_NAME_LEN = 23
TITLE_LENGTH = ROM_NAME_LEN - 2  # 21 bytes copied from the title field
EXTENDED_MARKER_LENGTH = 4

# ============================================================================
# Header Field Offsets (relative to candidate base)
# ============================================================================
OFFSET_MAKER_REGION = 0xB0  # 6 bytes, checked for printable ASCII
OFFSET_EXTENDED_TITLE = 0xB2
OFFSET_TITLE = 0xC0
OFFSET_MAP_MODE_HIGH = 0xD4  # last title byte, 0x20 on most HiROM carts
OFFSET_MAP_MODE = 0xD5
OFFSET_CART_TYPE = 0xD6
OFFSET_ROM_SIZE = 0xD7
OFFSET_RAM_SIZE = 0xD8
OFFSET_COUNTRY = 0xD9
OFFSET_LICENSEE = 0xDA
OFFSET_VERSION = 0xDB
OFFSET_COMPLEMENT = 0xDC  # 2 bytes, little-endian
OFFSET_CHECKSUM = 0xDE  # 2 bytes, little-endian
OFFSET_UNKNOWN1 = 0xE0  # 4 bytes, big-endian
OFFSET_RESET_VECTOR = 0xFC  # 2 bytes, little-endian

# Last byte the decoder needs, relative to the resolved offset
DECODE_SPAN = OFFSET_UNKNOWN1 + 4

# Map mode bits
MAP_MODE_HIROM_BIT = 0x01
MAP_MODE_FAST_BIT = 0x10
MAP_MODE_SA1 = 0x23
LICENSEE_EXTENDED = 0x33

PRINTABLE_MIN = 32
PRINTABLE_MAX = 126


class HeaderPresence(Enum):
    """Whether a 512-byte copier header precedes the cartridge image."""

    HEADERED = "headered"
    HEADERLESS = "headerless"

    @property
    def adjustment(self) -> int:
        """Bytes to add to an in-image offset to get a buffer offset."""
        return COPIER_HEADER_SIZE if self is HeaderPresence.HEADERED else 0


CART_TYPES: dict[int, CartType] = {
    0x00: CartType.ROM,
    0x01: CartType.ROM | CartType.RAM,
    0x02: CartType.ROM | CartType.RAM | CartType.BATTERY,
    0x13: CartType.ROM | CartType.SUPERFX,
    0x14: CartType.ROM | CartType.SUPERFX,
    0x15: CartType.ROM | CartType.RAM | CartType.SUPERFX,
    0x1A: CartType.ROM | CartType.RAM | CartType.BATTERY | CartType.SUPERFX,
    0x34: CartType.ROM | CartType.RAM | CartType.SA1,
    0x35: CartType.ROM | CartType.RAM | CartType.BATTERY | CartType.SA1,
}

NTSC_COUNTRY_CODES = frozenset({0x00, 0x01, 0x0D})
PAL_COUNTRY_RANGE = range(0x02, 0x0D)


def classify_size(length: int) -> HeaderPresence:
    """
    Decide from the image length whether a copier header is present.

    Args:
        length: Total image length in bytes, copier header included

    Returns:
        HeaderPresence.HEADERED when length % 1024 == 512,
        HeaderPresence.HEADERLESS when length % 1024 == 0

    Raises:
        UnrecognizedSizeError: For any other remainder
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError(f"Image length cannot be negative: {length}")

    remainder = length % SIZE_GRANULARITY
    if remainder == COPIER_HEADER_SIZE:
        return HeaderPresence.HEADERED
    if remainder == 0:
        return HeaderPresence.HEADERLESS
    raise UnrecognizedSizeError(
        f"{length} bytes leaves remainder {remainder} modulo {SIZE_GRANULARITY}"
    )


def candidate_offset(base: int, presence: HeaderPresence) -> int:
    """
    Convert a candidate base offset to an absolute buffer offset.

    Args:
        base: LOROM_BASE, HIROM_BASE or TIED_SCORE_BASE
        presence: Copier header classification

    Returns:
        Offset into the buffer
    """
    return base + presence.adjustment


def is_printable(value: int) -> bool:
    """True for bytes in the printable ASCII range 32-126."""
    return PRINTABLE_MIN <= value <= PRINTABLE_MAX


def all_ascii(data: bytes) -> bool:
    """True if every byte of data is printable ASCII (32-126)."""
    return all(is_printable(b) for b in data)
