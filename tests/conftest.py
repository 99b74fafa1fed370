"""
Shared fixtures for SNES header tests.

Images are built with the header writer so each test states only the
fields it cares about.
"""

from dataclasses import replace

import pytest

from snesinfo.core.header_utils import CANDIDATE_WINDOW_SIZE
from snesinfo.core.header_writer import build_image
from snesinfo.formats.header_data import CartType, Layout, Region, RomHeader

LOROM_HEADER = RomHeader(
    filename="",
    offset=0,
    name="SUPER TEST GAME",
    layout=Layout.LOROM,
    cart_type=CartType.ROM | CartType.RAM | CartType.BATTERY,
    rom_size=1024,
    ram_size=8,
    country_code=Region.NTSC,
    licensee_code=0x33,
    version_number=1,
    checksum=0x1234,
    checksum_complement=0xEDCB,
    unknown1=0xDEADBEEF,
)

HIROM_HEADER = RomHeader(
    filename="",
    offset=0,
    name="HIROM TEST",
    layout=Layout.HIROM | Layout.FAST,
    cart_type=CartType.ROM,
    rom_size=4096,
    ram_size=0,
    country_code=Region.PAL,
    licensee_code=0x01,
    version_number=0,
    checksum=0xA55A,
    checksum_complement=0x5AA5,
    unknown1=0,
)


def make_header(base: RomHeader = LOROM_HEADER, **fields) -> RomHeader:
    """Copy a sample header with some fields replaced."""
    return replace(base, **fields)


def blank_window() -> bytearray:
    """A zeroed candidate window for rubric tests."""
    return bytearray(CANDIDATE_WINDOW_SIZE)


@pytest.fixture
def lorom_header():
    return LOROM_HEADER


@pytest.fixture
def hirom_header():
    return HIROM_HEADER


@pytest.fixture
def lorom_image():
    """Headerless 32KB LoROM image."""
    return build_image(LOROM_HEADER)


@pytest.fixture
def hirom_image():
    """Headerless 64KB HiROM image."""
    return build_image(HIROM_HEADER)


@pytest.fixture
def minimal_lorom_image():
    """
    32KB image of zeros except a map mode byte of 0x00 and a reset vector
    high byte of 0x80 in the LoROM window.
    """
    image = bytearray(32768)
    image[0x7FD5] = 0x00
    image[0x7FFD] = 0x80
    return bytes(image)


@pytest.fixture
def rom_file(tmp_path, lorom_image):
    """LoROM image written to disk."""
    path = tmp_path / "test.sfc"
    path.write_bytes(lorom_image)
    return path
