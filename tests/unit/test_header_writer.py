"""
Unit tests for the header writer.
"""

import pytest

from conftest import HIROM_HEADER, LOROM_HEADER, make_header
from snesinfo.core.header_writer import (
    EXTENDED_TITLE_MAX,
    EXTENDED_TITLE_SPAN,
    UNMAPPED_CART_TYPE,
    build_image,
    encode_cart_type,
    encode_extended_title,
    encode_map_mode,
    encode_size_exponent,
    encode_title,
    header_base,
    write_header,
)
from snesinfo.formats.header_data import CartType, Layout, Region


class TestEncodeMapMode:
    def test_values(self):
        assert encode_map_mode(Layout.LOROM) == 0x20
        assert encode_map_mode(Layout.HIROM) == 0x21
        assert encode_map_mode(Layout.LOROM | Layout.FAST) == 0x30
        assert encode_map_mode(Layout.HIROM | Layout.FAST) == 0x31

    def test_needs_exactly_one_mapping(self):
        with pytest.raises(ValueError, match="exactly one"):
            encode_map_mode(Layout.LOROM | Layout.HIROM)
        with pytest.raises(ValueError, match="exactly one"):
            encode_map_mode(Layout.FAST)


class TestEncodeCartType:
    def test_first_match_wins(self):
        """0x13 and 0x14 share flags; the lower value is used."""
        assert encode_cart_type(CartType.ROM | CartType.SUPERFX) == 0x13

    def test_battery_ram(self):
        assert encode_cart_type(CartType.ROM | CartType.RAM | CartType.BATTERY) == 0x02

    def test_empty_flags(self):
        assert encode_cart_type(CartType(0)) == UNMAPPED_CART_TYPE

    def test_unencodable(self):
        with pytest.raises(ValueError, match="No cart type byte"):
            encode_cart_type(CartType.SA1)


class TestEncodeSizeExponent:
    def test_powers_of_two(self):
        assert encode_size_exponent(1) == 0
        assert encode_size_exponent(1024) == 10

    def test_zero(self):
        assert encode_size_exponent(0) == 32

    def test_not_power_of_two(self):
        with pytest.raises(ValueError, match="power of two"):
            encode_size_exponent(3)
        with pytest.raises(ValueError, match="power of two"):
            encode_size_exponent(-8)


class TestEncodeTitle:
    def test_space_padded(self):
        assert encode_title("ABC") == b"ABC" + b" " * 18

    def test_full_length(self):
        assert encode_title("A" * 21) == b"A" * 21

    def test_too_long(self):
        with pytest.raises(ValueError, match="longer than"):
            encode_title("A" * 22)


class TestEncodeExtendedTitle:
    def test_nul_padded(self):
        assert encode_extended_title("ABCD") == b"ABCD" + bytes(10)

    def test_none(self):
        assert encode_extended_title(None) == bytes(EXTENDED_TITLE_SPAN)

    def test_last_byte_stays_nul(self):
        encoded = encode_extended_title("A" * EXTENDED_TITLE_MAX)
        assert len(encoded) == EXTENDED_TITLE_SPAN
        assert encoded[-1] == 0

    def test_too_long(self):
        with pytest.raises(ValueError, match="longer than 13 bytes"):
            encode_extended_title("A" * 14)


class TestWriteHeader:
    def test_field_bytes(self):
        image = bytearray(0x100)
        write_header(image, LOROM_HEADER, 0)
        assert image[0xC0:0xCF] == b"SUPER TEST GAME"
        assert image[0xD5] == 0x20
        assert image[0xD6] == 0x02
        assert image[0xD7] == 10
        assert image[0xD8] == 3
        assert image[0xD9] == 0x01
        assert image[0xDA] == 0x33
        assert image[0xDB] == 0x01
        assert image[0xDC:0xE0] == b"\xCB\xED\x34\x12"
        assert image[0xE0:0xE4] == b"\xDE\xAD\xBE\xEF"
        assert image[0xFC:0xFE] == b"\x00\x80"
        assert image[0xB2:0xC0] == bytes(14)

    def test_region_bytes(self):
        image = bytearray(0x100)
        write_header(image, make_header(country_code=Region.INVALID), 0)
        assert image[0xD9] == 0x0E

    def test_extended_title(self):
        image = bytearray(0x100)
        write_header(image, make_header(extended="EXTRA"), 0)
        assert image[0xB2:0xC0] == b"EXTRA" + bytes(9)

    def test_extended_title_rejected_before_writing(self):
        """An over-long extended title leaves the image untouched."""
        image = bytearray(0x100)
        with pytest.raises(ValueError, match="Extended title"):
            write_header(image, make_header(extended="X" * 14), 0)
        assert image == bytearray(0x100)

    def test_does_not_fit(self):
        with pytest.raises(ValueError, match="does not fit"):
            write_header(bytearray(0x1FF), LOROM_HEADER, 0x100)


class TestBuildImage:
    def test_default_sizes(self):
        assert len(build_image(LOROM_HEADER)) == 0x8000
        assert len(build_image(HIROM_HEADER)) == 0x10000

    def test_headered(self):
        image = build_image(LOROM_HEADER, headered=True)
        assert len(image) == 0x8000 + 512
        assert image[0x8100 + 0xD5] == 0x20

    def test_header_base(self):
        assert header_base(LOROM_HEADER) == 0x7F00
        assert header_base(HIROM_HEADER) == 0xFF00

    def test_fill(self):
        image = build_image(LOROM_HEADER, fill=0xFF)
        assert image[0] == 0xFF

    def test_size_must_be_multiple_of_1024(self):
        with pytest.raises(ValueError, match="multiple of 1024"):
            build_image(LOROM_HEADER, image_size=0x8000 + 512)

    def test_size_too_small(self):
        with pytest.raises(ValueError, match="too small"):
            build_image(HIROM_HEADER, image_size=0x8000)
