"""
SNES Header Info - Header Decoder

Decodes the cartridge header found at a resolved offset into a RomHeader,
and provides decode_header(), the single entry point that classifies,
locates and decodes an image in one call.
"""

from ..formats.header_data import RomHeader
from .header_utils import (
    CART_TYPES,
    DECODE_SPAN,
    EXTENDED_MARKER_LENGTH,
    MAP_MODE_FAST_BIT,
    MAP_MODE_HIROM_BIT,
    NTSC_COUNTRY_CODES,
    OFFSET_CART_TYPE,
    OFFSET_CHECKSUM,
    OFFSET_COMPLEMENT,
    OFFSET_COUNTRY,
    OFFSET_EXTENDED_TITLE,
    OFFSET_LICENSEE,
    OFFSET_MAP_MODE,
    OFFSET_RAM_SIZE,
    OFFSET_ROM_SIZE,
    OFFSET_TITLE,
    OFFSET_UNKNOWN1,
    OFFSET_VERSION,
    PAL_COUNTRY_RANGE,
    TIED_SCORE_BASE,
    TITLE_LENGTH,
    CartType,
    Layout,
    Region,
    all_ascii,
)
from .errors import TruncatedError
from .rom_buffer import as_rom_buffer
from .scoring import locate_header

SIZE_MASK = 0xFFFFFFFF


def extract_title(field: bytes) -> str:
    """
    Extract the game title from the raw title field.

    Copies bytes while they are printable (33-125), or a space that is not
    followed by another space. Stops at the first byte that is neither, so
    trailing padding and double-space runs are cut off.

    Args:
        field: At least TITLE_LENGTH + 1 bytes starting at the title field
            (the byte after the last title byte is looked at for spaces)

    Returns:
        Title string (Latin-1 decoded, may be empty)
    """
    title = bytearray()
    for i in range(min(TITLE_LENGTH, len(field))):
        b = field[i]
        next_b = field[i + 1] if i + 1 < len(field) else 0
        if 32 < b < 126 or (b == 0x20 and next_b != 0x20):
            title.append(b)
        else:
            break
    return title.decode("latin-1")


def extract_extended_title(field: bytes, title_field: bytes) -> str:
    """
    Extract the extended title.

    A byte of field is copied while it is above 32 and the byte at the
    same position of title_field is below 126, or while it is a space.
    The upper bound is checked on title_field, not on field.

    Args:
        field: Bytes starting at the extended title (offset + 0xB2)
        title_field: Bytes starting at the title (offset + 0xC0)

    Returns:
        Extended title string (Latin-1 decoded, may be empty)
    """
    title = bytearray()
    for i in range(min(TITLE_LENGTH, len(field), len(title_field))):
        b = field[i]
        if (b > 32 and title_field[i] < 126) or b == 0x20:
            title.append(b)
        else:
            break
    return title.decode("latin-1")


def decode_layout(map_mode: int) -> Layout:
    """Decode the map mode byte into layout flags."""
    if map_mode & MAP_MODE_HIROM_BIT:
        layout = Layout.HIROM
    else:
        layout = Layout.LOROM
    if map_mode & MAP_MODE_FAST_BIT:
        layout |= Layout.FAST
    return layout


def decode_cart_type(value: int) -> CartType:
    """Decode the cart type byte. Unknown values decode to no flags."""
    return CART_TYPES.get(value, CartType(0))


def decode_size_kb(exponent: int) -> int:
    """
    Convert a size exponent byte to kilobytes.

    The result is 2**exponent truncated to an unsigned 32-bit integer, so
    exponents of 32 and above give 0.
    """
    return (1 << exponent) & SIZE_MASK


def decode_region(value: int) -> Region:
    """Classify the country byte as NTSC, PAL or invalid."""
    if value in NTSC_COUNTRY_CODES:
        return Region.NTSC
    if value in PAL_COUNTRY_RANGE:
        return Region.PAL
    return Region.INVALID


def decode_fields(buffer, offset: int, filename: str) -> RomHeader:
    """
    Decode every header field at an absolute offset.

    Args:
        buffer: RomBuffer or raw bytes
        offset: Resolved header offset (copier header adjustment included)
        filename: Passed through to the record unchanged

    Returns:
        Decoded RomHeader

    Raises:
        TruncatedError: If the header runs past the end of the buffer
    """
    rom = as_rom_buffer(buffer)
    if offset < 0 or offset + DECODE_SPAN > len(rom):
        raise TruncatedError(
            f"header at 0x{offset:X} needs {DECODE_SPAN} bytes, "
            f"image is {len(rom)} bytes"
        )

    # One byte past the title is read for the double-space check
    title_field = rom.annotate("title").read(offset + OFFSET_TITLE, TITLE_LENGTH + 1)
    map_mode = rom.annotate("map mode").read_byte(offset + OFFSET_MAP_MODE)
    cart_type = rom.annotate("cart type").read_byte(offset + OFFSET_CART_TYPE)
    rom_exponent = rom.annotate("rom size").read_byte(offset + OFFSET_ROM_SIZE)
    ram_exponent = rom.annotate("ram size").read_byte(offset + OFFSET_RAM_SIZE)
    country = rom.annotate("country").read_byte(offset + OFFSET_COUNTRY)
    licensee = rom.annotate("licensee").read_byte(offset + OFFSET_LICENSEE)
    version = rom.annotate("version").read_byte(offset + OFFSET_VERSION)
    complement = rom.annotate("checksum complement").read_word(offset + OFFSET_COMPLEMENT)
    checksum = rom.annotate("checksum").read_word(offset + OFFSET_CHECKSUM)
    unknown1 = rom.annotate("unknown1").read_dword_be(offset + OFFSET_UNKNOWN1)

    extended = None
    marker = rom.annotate("extended title marker").read(
        offset + OFFSET_EXTENDED_TITLE, EXTENDED_MARKER_LENGTH
    )
    if all_ascii(marker):
        extended_field = rom.annotate("extended title").read(
            offset + OFFSET_EXTENDED_TITLE, TITLE_LENGTH
        )
        extended = extract_extended_title(extended_field, title_field)

    return RomHeader(
        filename=filename,
        offset=offset,
        name=extract_title(title_field),
        layout=decode_layout(map_mode),
        cart_type=decode_cart_type(cart_type),
        rom_size=decode_size_kb(rom_exponent),
        ram_size=decode_size_kb(ram_exponent),
        country_code=decode_region(country),
        licensee_code=licensee,
        version_number=version,
        checksum=checksum,
        checksum_complement=complement,
        unknown1=unknown1,
        extended=extended,
    )


def decode_header(
    filename: str,
    buffer,
    declared_size: int | None = None,
    *,
    tie_base: int = TIED_SCORE_BASE,
) -> RomHeader:
    """
    Classify, locate and decode the header of a SNES image.

    Args:
        filename: Identifier passed through to the record
        buffer: Image bytes or a RomBuffer (copier header included)
        declared_size: Image length as measured by the caller; defaults to
            len(buffer) and must match it when given
        tie_base: Base offset used when both candidates score the same

    Returns:
        Decoded RomHeader

    Raises:
        UnrecognizedSizeError: If the size is not 0 or 512 modulo 1024
        TruncatedError: If the chosen header runs past the end of the image
        ValueError: If declared_size does not match the buffer length
    """
    rom = as_rom_buffer(buffer)
    if declared_size is None:
        declared_size = len(rom)
    elif declared_size != len(rom):
        raise ValueError(
            f"Declared size {declared_size} does not match buffer length {len(rom)}"
        )

    location = locate_header(rom, declared_size, tie_base=tie_base)
    return decode_fields(rom, location.offset, filename)
