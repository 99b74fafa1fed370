#!/usr/bin/env python3
"""
SNES Header Info - Header Query Tool

Decodes the internal header of SNES ROM images and prints selected fields
through a query template.

Usage:
    snes-info game.sfc
    snes-info --query '%{checksum}  %{filename}' ~/Roms/SNES/*.smc
    cat game.smc | snes-info -
"""

import argparse
import json
import sys

from snesinfo.core.errors import DecodeError
from snesinfo.core.header_decoder import decode_header
from snesinfo.core.header_utils import (
    CANDIDATE_WINDOW_SIZE,
    HIROM_BASE,
    LOROM_BASE,
    TIED_SCORE_BASE,
    classify_size,
)
from snesinfo.core.instrumented_io import InstrumentedRomBuffer
from snesinfo.core.rom_buffer import RomBuffer
from snesinfo.core.scoring import explain_candidates
from snesinfo.formats.hex_utils import hex_dump
from snesinfo.formats.query import DEFAULT_QUERY, QUERY_FIELDS, format_query

TIE_BASES = {
    "zero": TIED_SCORE_BASE,
    "lorom": LOROM_BASE,
    "hirom": HIROM_BASE,
}

STDIN_PATH = "-"


def read_image(path: str) -> bytes:
    """Read a whole image from a file, or from standard input for '-'."""
    if path == STDIN_PATH:
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def print_scores(rom: RomBuffer):
    """Print the per-row breakdown of both candidate scores."""
    presence = classify_size(len(rom))
    for base, rows in explain_candidates(rom, len(rom), presence).items():
        total = sum(row.weight for row, fired in rows if fired)
        print(f"  candidate ${base:04X} ({presence.value}): score {total}")
        for row, fired in rows:
            mark = "x" if fired else " "
            print(f"    [{mark}] {row.name:<20} {row.weight:+d}")


def print_header(header, rom: RomBuffer, args):
    """Print a decoded header, then the score breakdown and dump if requested."""
    if args.json:
        print(json.dumps(header.to_dict(), indent=2))
    else:
        print(format_query(args.query, header))

    if args.scores:
        print_scores(rom)

    if args.dump:
        window = rom.annotate("header dump").read_window(header.offset, CANDIDATE_WINDOW_SIZE, pad=True)
        for line in hex_dump(window, start=header.offset):
            print(f"  {line}")


def process_file(path: str, args) -> bool:
    """
    Decode one image and print it.

    Returns:
        True on success, False if the image could not be read or decoded
    """
    try:
        data = read_image(path)
    except OSError as e:
        print(f"{path}: {e}", file=sys.stderr)
        return False

    if args.trace:
        rom = InstrumentedRomBuffer(data)
    else:
        rom = RomBuffer(data)

    try:
        header = decode_header(path, rom, len(data), tie_base=TIE_BASES[args.tie_base])
    except DecodeError as e:
        print(f"{path}: {e}", file=sys.stderr)
        header = None

    if header is not None:
        print_header(header, rom, args)

    # The trace includes the --scores and --dump reads; its status line goes to stderr
    if args.trace:
        rom.write_trace(args.trace, file=sys.stderr)

    return header is not None


def main():
    parser = argparse.ArgumentParser(
        description="Print the internal header of SNES ROM images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Query keywords:
  {' '.join(QUERY_FIELDS)}

Examples:
  snes-info game.sfc
  snes-info --query '%{{checksum}}  %{{filename}}' roms/*.smc
  snes-info --json --scores game.smc
  cat game.smc | snes-info -
""",
    )
    parser.add_argument("paths", nargs="*", help="ROM image files ('-' for stdin)")
    parser.add_argument(
        "-q",
        "--query",
        default=DEFAULT_QUERY,
        help="Output template (default: '%(default)s')",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the full header as JSON"
    )
    parser.add_argument(
        "--scores",
        action="store_true",
        help="Print the per-row breakdown of both candidate scores",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Hex dump the 0x100 bytes at the resolved header offset",
    )
    parser.add_argument(
        "--trace", metavar="FILE", help="Write a JSON trace of every byte read"
    )
    parser.add_argument(
        "--tie-base",
        choices=sorted(TIE_BASES),
        default="zero",
        help="Header base used when both candidates score the same (default: zero)",
    )

    args = parser.parse_args()

    if not args.paths:
        parser.print_usage()
        sys.exit(1)

    if args.trace and len(args.paths) != 1:
        print("Error: --trace takes exactly one image")
        sys.exit(1)

    failures = 0
    for path in args.paths:
        if not process_file(path, args):
            failures += 1

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
