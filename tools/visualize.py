#!/usr/bin/env python3
"""
SNES Header Info - Candidate Window Visualizer

Renders the LoROM and HiROM candidate windows of a ROM image as PNG
byte maps. Cells are coloured by byte class; bytes read by a rubric row
are outlined (red when the row fired, yellow otherwise).
"""

import argparse
import sys
from pathlib import Path

from snesinfo.core.errors import DecodeError
from snesinfo.core.header_utils import HIROM_BASE, LOROM_BASE, classify_size
from snesinfo.core.rom_buffer import RomBuffer
from snesinfo.core.scoring import RUBRICS, candidate_window, score_window
from snesinfo.rendering.pil_renderer import CELL_SIZE, render_window_to_image

CANDIDATES = {
    "lorom": LOROM_BASE,
    "hirom": HIROM_BASE,
}


def render_candidates(rom_path: str, output_dir: str, names: list[str], cell_size: int) -> list[Path]:
    """
    Render the requested candidate windows of one image.

    Returns:
        Paths of the written PNG files
    """
    rom = RomBuffer.from_file(rom_path)
    presence = classify_size(len(rom))

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name in names:
        base = CANDIDATES[name]
        rubric = RUBRICS[base]
        window = candidate_window(rom, base, presence)
        score = score_window(rubric, window, len(rom))

        img = render_window_to_image(window, rubric, len(rom), cell_size=cell_size)
        output_path = out_dir / f"{Path(rom_path).stem}_{name}.png"
        img.save(output_path)
        print(f"Rendered {name} window (${base:04X}, score {score}) to: {output_path}")
        written.append(output_path)
    return written


def main():
    parser = argparse.ArgumentParser(
        description="Render SNES header candidate windows as PNG byte maps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Render both candidates:
    snes-visualize game.sfc

  Render only the HiROM candidate into renders/:
    snes-visualize game.sfc renders/ --candidate hirom
        """,
    )
    parser.add_argument("rom", help="Path to ROM image")
    parser.add_argument(
        "output", nargs="?", default=".", help="Output directory (default: .)"
    )
    parser.add_argument(
        "-c",
        "--candidate",
        choices=sorted(CANDIDATES),
        action="append",
        help="Candidate to render (repeatable, default: both)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=CELL_SIZE,
        help=f"Cell edge in pixels (default: {CELL_SIZE})",
    )

    args = parser.parse_args()

    if not Path(args.rom).exists():
        print(f"Error: {args.rom} not found")
        sys.exit(1)

    if args.cell_size < 1:
        print("Error: --cell-size must be positive")
        sys.exit(1)

    names = args.candidate or sorted(CANDIDATES)
    try:
        render_candidates(args.rom, args.output, names, args.cell_size)
    except DecodeError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
