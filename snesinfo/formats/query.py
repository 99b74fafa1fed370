"""
SNES Header Info - Query Templates

Formats a decoded header through a template such as
"name: %{name}; offset: %{offset}". Each %{keyword} is replaced by the
matching header field; any other text, including unknown %{...}
sequences, is kept as is.
"""

from typing import Callable, Dict

from .header_data import RomHeader

DEFAULT_QUERY = "name: %{name}; offset: %{offset}; checksum: %{checksum}"


def _extended(header: RomHeader) -> str:
    return header.extended if header.extended is not None else ""


QUERY_FIELDS: Dict[str, Callable[[RomHeader], str]] = {
    "%{filename}": lambda h: h.filename,
    "%{name}": lambda h: h.name,
    "%{offset}": lambda h: f"0x{h.offset:x}",
    "%{layout}": lambda h: str(int(h.layout)),
    "%{cart_type}": lambda h: str(int(h.cart_type)),
    "%{rom_size}": lambda h: str(h.rom_size),
    "%{ram_size}": lambda h: str(h.ram_size),
    "%{country_code}": lambda h: str(int(h.country_code)),
    "%{licensee_code}": lambda h: str(h.licensee_code),
    "%{version_number}": lambda h: str(h.version_number),
    "%{checksum}": lambda h: str(h.checksum),
    "%{checksum_complement}": lambda h: str(h.checksum_complement),
    "%{unknown1}": lambda h: str(h.unknown1),
    "%{extended}": _extended,
}


def query_keywords(template: str) -> list[str]:
    """Keywords that occur in a template, in QUERY_FIELDS order."""
    return [keyword for keyword in QUERY_FIELDS if keyword in template]


def format_query(template: str, header: RomHeader) -> str:
    """
    Substitute every known keyword of template with the header's value.

    Args:
        template: Text containing %{keyword} placeholders
        header: Decoded header

    Returns:
        Formatted string
    """
    output = template
    for keyword in query_keywords(template):
        output = output.replace(keyword, QUERY_FIELDS[keyword](header))
    return output
