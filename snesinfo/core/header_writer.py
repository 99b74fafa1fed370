"""
SNES Header Info - Header Writer

Inverse operations for decoding: encode a RomHeader back into header bytes
and build synthetic cartridge images around it. Used to produce test
images and to experiment with the location heuristics.
"""

from ..formats.header_data import RomHeader
from .header_utils import (
    CANDIDATE_WINDOW_SIZE,
    CART_TYPES,
    COPIER_HEADER_SIZE,
    HIROM_BASE,
    LOROM_BASE,
    MAP_MODE_FAST_BIT,
    MAP_MODE_HIROM_BIT,
    OFFSET_CART_TYPE,
    OFFSET_CHECKSUM,
    OFFSET_COMPLEMENT,
    OFFSET_COUNTRY,
    OFFSET_EXTENDED_TITLE,
    OFFSET_LICENSEE,
    OFFSET_MAP_MODE,
    OFFSET_RAM_SIZE,
    OFFSET_RESET_VECTOR,
    OFFSET_ROM_SIZE,
    OFFSET_TITLE,
    OFFSET_UNKNOWN1,
    OFFSET_VERSION,
    SIZE_GRANULARITY,
    TITLE_LENGTH,
    CartType,
    Layout,
    Region,
)

# Map mode bytes on real carts carry 0x20 in the high nibble
MAP_MODE_BASE = 0x20
UNMAPPED_CART_TYPE = 0xFF
# Bytes between the extended title and the title. The decoder reads on
# past this span, so the last byte must stay NUL to end the copy.
EXTENDED_TITLE_SPAN = OFFSET_TITLE - OFFSET_EXTENDED_TITLE
EXTENDED_TITLE_MAX = EXTENDED_TITLE_SPAN - 1
RESET_VECTOR = 0x8000

REGION_BYTES = {
    Region.NTSC: 0x01,
    Region.PAL: 0x02,
    Region.INVALID: 0x0E,
}


def encode_map_mode(layout: Layout) -> int:
    """
    Encode layout flags as a map mode byte.

    Raises:
        ValueError: If both or neither of LOROM and HIROM are set
    """
    if (Layout.LOROM in layout) == (Layout.HIROM in layout):
        raise ValueError(f"Layout must be exactly one of LOROM/HIROM, got {layout!r}")
    value = MAP_MODE_BASE
    if Layout.HIROM in layout:
        value |= MAP_MODE_HIROM_BIT
    if Layout.FAST in layout:
        value |= MAP_MODE_FAST_BIT
    return value


def encode_cart_type(cart_type: CartType) -> int:
    """
    Encode cartridge flags as a cart type byte.

    The first table entry with matching flags wins. An empty flag set
    encodes to UNMAPPED_CART_TYPE.

    Raises:
        ValueError: If no cart type byte decodes to these flags
    """
    if not cart_type:
        return UNMAPPED_CART_TYPE
    for value, flags in CART_TYPES.items():
        if flags == cart_type:
            return value
    raise ValueError(f"No cart type byte for {cart_type!r}")


def encode_size_exponent(size_kb: int) -> int:
    """
    Encode a size in kilobytes as an exponent byte.

    0 encodes as 32, the smallest exponent that decodes to 0.

    Raises:
        ValueError: If size_kb is not 0 or a power of two
    """
    if size_kb == 0:
        return 32
    if size_kb < 0 or size_kb & (size_kb - 1):
        raise ValueError(f"Size must be a power of two, got {size_kb}")
    return size_kb.bit_length() - 1


def encode_title(name: str, length: int = TITLE_LENGTH) -> bytes:
    """
    Encode a title as a space-padded field.

    Raises:
        ValueError: If the title does not fit
    """
    raw = name.encode("latin-1")
    if len(raw) > length:
        raise ValueError(f"Title '{name}' is longer than {length} bytes")
    return raw.ljust(length, b" ")


def encode_extended_title(extended: str | None) -> bytes:
    """
    Encode an extended title as a NUL-padded span ending before the title.

    None encodes as all zeros, which the decoder reads as no extended title.

    Raises:
        ValueError: If the title is longer than EXTENDED_TITLE_MAX bytes
    """
    if extended is None:
        return bytes(EXTENDED_TITLE_SPAN)
    raw = extended.encode("latin-1")
    if len(raw) > EXTENDED_TITLE_MAX:
        raise ValueError(
            f"Extended title '{extended}' is longer than {EXTENDED_TITLE_MAX} bytes"
        )
    return raw.ljust(EXTENDED_TITLE_SPAN, b"\x00")


def write_header(image: bytearray, header: RomHeader, offset: int):
    """
    Write header fields into an image at an absolute offset.

    The reset vector is set to $8000 so the candidate is not penalised.
    header.offset and header.filename are not written.

    Args:
        image: Image to modify in place
        header: Fields to write
        offset: Absolute offset of the header (copier header included)

    Raises:
        ValueError: If the header does not fit in the image, or a field
            cannot be encoded
    """
    if offset < 0 or offset + CANDIDATE_WINDOW_SIZE > len(image):
        raise ValueError(
            f"Header at 0x{offset:X} does not fit in a {len(image)}-byte image"
        )
    extended = encode_extended_title(header.extended)

    image[offset + OFFSET_TITLE : offset + OFFSET_TITLE + TITLE_LENGTH] = encode_title(header.name)
    image[offset + OFFSET_MAP_MODE] = encode_map_mode(header.layout)
    image[offset + OFFSET_CART_TYPE] = encode_cart_type(header.cart_type)
    image[offset + OFFSET_ROM_SIZE] = encode_size_exponent(header.rom_size)
    image[offset + OFFSET_RAM_SIZE] = encode_size_exponent(header.ram_size)
    image[offset + OFFSET_COUNTRY] = REGION_BYTES[header.country_code]
    image[offset + OFFSET_LICENSEE] = header.licensee_code & 0xFF
    image[offset + OFFSET_VERSION] = header.version_number & 0xFF
    image[offset + OFFSET_COMPLEMENT : offset + OFFSET_COMPLEMENT + 2] = (
        header.checksum_complement & 0xFFFF
    ).to_bytes(2, "little")
    image[offset + OFFSET_CHECKSUM : offset + OFFSET_CHECKSUM + 2] = (
        header.checksum & 0xFFFF
    ).to_bytes(2, "little")
    image[offset + OFFSET_UNKNOWN1 : offset + OFFSET_UNKNOWN1 + 4] = (
        header.unknown1 & 0xFFFFFFFF
    ).to_bytes(4, "big")
    image[offset + OFFSET_RESET_VECTOR : offset + OFFSET_RESET_VECTOR + 2] = (
        RESET_VECTOR.to_bytes(2, "little")
    )

    ext_start = offset + OFFSET_EXTENDED_TITLE
    image[ext_start : ext_start + EXTENDED_TITLE_SPAN] = extended


def header_base(header: RomHeader) -> int:
    """Candidate base offset the header's layout calls for."""
    return HIROM_BASE if Layout.HIROM in header.layout else LOROM_BASE


def build_image(
    header: RomHeader,
    headered: bool = False,
    image_size: int | None = None,
    fill: int = 0x00,
) -> bytes:
    """
    Build a synthetic image holding a header at its layout's location.

    Args:
        header: Fields to write; its layout picks LoROM or HiROM placement
        headered: If True, prepend a zeroed 512-byte copier header
        image_size: Cartridge size without copier header. Defaults to the
            smallest size that holds the header (32KB LoROM, 64KB HiROM)
        fill: Byte used for the rest of the image

    Returns:
        Image bytes

    Raises:
        ValueError: If image_size is not a multiple of 1024 or is too small
    """
    base = header_base(header)
    minimum = base + CANDIDATE_WINDOW_SIZE
    if image_size is None:
        image_size = minimum
    if image_size % SIZE_GRANULARITY:
        raise ValueError(f"Image size must be a multiple of {SIZE_GRANULARITY}, got {image_size}")
    if image_size < minimum:
        raise ValueError(f"Image size {image_size} too small, need at least {minimum}")

    prefix = bytearray(COPIER_HEADER_SIZE) if headered else bytearray()
    image = prefix + bytearray([fill]) * image_size
    write_header(image, header, base + len(prefix))
    return bytes(image)
