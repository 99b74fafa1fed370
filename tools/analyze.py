#!/usr/bin/env python3
"""
SNES Header Info - ROM Set Analyzer

Decodes every SNES image in one or more directories and reports how
confidently the location heuristics picked each header.
Usage: python analyze.py <rom_directory> [additional_directories...]
Examples:
    python analyze.py roms/snes/
    python analyze.py roms/usa/ roms/europe/
"""

import sys
from collections import Counter
from pathlib import Path

import numpy as np

from snesinfo.core.errors import DecodeError
from snesinfo.core.header_decoder import decode_fields
from snesinfo.core.header_utils import HIROM_BASE, LOROM_BASE, TIED_SCORE_BASE
from snesinfo.core.rom_buffer import RomBuffer
from snesinfo.core.scoring import locate_header

ROM_EXTENSIONS = (".smc", ".sfc", ".swc", ".fig")

BASE_NAMES = {
    LOROM_BASE: "LoROM",
    HIROM_BASE: "HiROM",
    TIED_SCORE_BASE: "tie",
}


def percentile_stats(values):
    """Return min/25th/50th/75th/max statistics."""
    if not values:
        raise ValueError("values cannot be empty in percentile_stats call")
    arr = np.array(values)
    return {
        "min": float(np.min(arr)),
        "25th": float(np.percentile(arr, 25)),
        "50th": float(np.percentile(arr, 50)),
        "75th": float(np.percentile(arr, 75)),
        "max": float(np.max(arr)),
        "count": len(values),
    }


def find_images(directories):
    """Collect ROM image paths from the given directories, sorted."""
    images = []
    for directory in directories:
        dir_path = Path(directory)
        if not dir_path.is_dir():
            print(f"Skipping {directory}: not a directory")
            continue
        images.extend(
            sorted(
                p
                for p in dir_path.iterdir()
                if p.is_file() and p.suffix.lower() in ROM_EXTENSIONS
            )
        )
    return images


def collect_results(images):
    """
    Locate and decode every image.

    Returns:
        (results, failures) where results is a list of
        (path, HeaderLocation, RomHeader) and failures a list of
        (path, error message)
    """
    results = []
    failures = []
    for path in images:
        try:
            rom = RomBuffer.from_file(str(path))
            location = locate_header(rom, len(rom))
            header = decode_fields(rom, location.offset, str(path))
        except (OSError, DecodeError) as e:
            failures.append((path, str(e)))
            continue
        results.append((path, location, header))
    return results, failures


def analyze_images(directories):
    """Analyze all images in the given directory or directories."""
    if isinstance(directories, str):
        directories = [directories]

    images = find_images(directories)
    if not images:
        print(f"No ROM images found in {', '.join(directories)}")
        sys.exit(1)

    print(
        f"Analyzing {len(directories)} director{'y' if len(directories) == 1 else 'ies'}: {', '.join(directories)}"
    )
    print(f"Found {len(images)} images\n")

    results, failures = collect_results(images)

    presence_counts = Counter(location.presence.value for _, location, _ in results)
    base_counts = Counter(BASE_NAMES.get(location.base, "?") for _, location, _ in results)
    margins = [abs(location.margin) for _, location, _ in results]
    ties = [(path, location) for path, location, _ in results if location.tied]

    # === Report ===
    print("=" * 60)
    print("HEADER LOCATION")
    print("=" * 60)
    print(f"\nDecoded: {len(results)}, failed: {len(failures)}")
    for presence, count in sorted(presence_counts.items()):
        print(f"  {presence}: {count}")
    for name, count in sorted(base_counts.items()):
        print(f"  {name}: {count}")

    if margins:
        print("\n" + "=" * 60)
        print("SCORE MARGIN (|LoROM - HiROM|)")
        print("=" * 60)
        stats = percentile_stats(margins)
        print(f"\nAcross all decoded images (n={stats['count']}):")
        print(f"  Min:  {stats['min']:.0f}")
        print(f"  25th: {stats['25th']:.1f}")
        print(f"  50th: {stats['50th']:.1f}")
        print(f"  75th: {stats['75th']:.1f}")
        print(f"  Max:  {stats['max']:.0f}")
        print(f"  Mean: {np.mean(margins):.2f}")

    print("\n" + "=" * 60)
    print("TIED SCORES")
    print("=" * 60)
    if ties:
        print(f"\nImages where both candidates scored the same ({len(ties)} found):")
        for path, location in ties:
            print(f"  {path.name}: score {location.scores.lorom}, offset 0x{location.offset:X}")
    else:
        print("\nNo ties.")

    if failures:
        print("\n" + "=" * 60)
        print("FAILURES")
        print("=" * 60)
        for path, message in failures:
            print(f"  {path.name}: {message}")

    return results, failures


def main():
    if len(sys.argv) < 2:
        print("Usage: python analyze.py <rom_directory> [additional_directories...]")
        sys.exit(1)

    analyze_images(sys.argv[1:])


if __name__ == "__main__":
    main()
