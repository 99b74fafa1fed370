"""
SNES Header Info - Header Data Model

The decoded header record, plus loading from and saving to JSON files.
"""

import json
from dataclasses import asdict, dataclass
from enum import IntEnum, IntFlag
from typing import Any, Dict, Optional


class Layout(IntFlag):
    """Mapping mode flags decoded from the map mode byte."""

    LOROM = 1 << 0
    HIROM = 1 << 1
    FAST = 1 << 2


class CartType(IntFlag):
    """Cartridge hardware flags decoded from the cart type byte."""

    ROM = 1 << 0
    RAM = 1 << 1
    BATTERY = 1 << 2
    SA1 = 1 << 3
    SUPERFX = 1 << 4


class Region(IntEnum):
    """Video standard implied by the country byte."""

    INVALID = 0
    NTSC = 1
    PAL = 2


@dataclass(frozen=True)
class RomHeader:
    """Decoded SNES cartridge header."""

    filename: str
    offset: int
    name: str
    layout: Layout
    cart_type: CartType
    rom_size: int  # in kilobytes
    ram_size: int  # in kilobytes
    country_code: Region
    licensee_code: int
    version_number: int
    checksum: int
    checksum_complement: int
    unknown1: int
    extended: Optional[str] = None

    @property
    def is_hirom(self) -> bool:
        return Layout.HIROM in self.layout

    @property
    def is_fast(self) -> bool:
        return Layout.FAST in self.layout

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["layout"] = int(self.layout)
        data["cart_type"] = int(self.cart_type)
        data["country_code"] = int(self.country_code)
        data["_debug"] = {
            "offset": f"0x{self.offset:X}",
            "layout": _flag_names(self.layout),
            "cart_type": _flag_names(self.cart_type),
            "country": self.country_code.name,
            "checksum": f"0x{self.checksum:04X}",
            "checksum_complement": f"0x{self.checksum_complement:04X}",
            "unknown1": f"0x{self.unknown1:08X}",
        }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RomHeader":
        """Build a header from a dictionary produced by to_dict()."""
        return cls(
            filename=data["filename"],
            offset=data["offset"],
            name=data["name"],
            layout=Layout(data["layout"]),
            cart_type=CartType(data["cart_type"]),
            rom_size=data["rom_size"],
            ram_size=data["ram_size"],
            country_code=Region(data["country_code"]),
            licensee_code=data["licensee_code"],
            version_number=data["version_number"],
            checksum=data["checksum"],
            checksum_complement=data["checksum_complement"],
            unknown1=data["unknown1"],
            extended=data.get("extended"),
        )


def _flag_names(flags) -> str:
    names = [member.name for member in type(flags) if member in flags]
    return "|".join(names) if names else "NONE"


def save_header(header: RomHeader, path: str):
    """Save a decoded header to a JSON file."""
    with open(path, "w") as f:
        json.dump(header.to_dict(), f, indent=2)


def load_header(path: str) -> RomHeader:
    """Load a header saved with save_header()."""
    with open(path, "r") as f:
        data = json.load(f)
    return RomHeader.from_dict(data)
