"""
SNES Header Info - Instrumented ROM Buffer

RomBuffer that records every read together with its annotation, giving a
map of which image bytes the scorer and the decoder looked at.
"""

import json

from ..formats.hex_utils import format_hex_row
from .rom_buffer import RomBuffer

TRACE_VALUE_LIMIT = 32
UNANNOTATED = "[no annotation]"


class InstrumentedRomBuffer(RomBuffer):
    """
    RomBuffer that keeps a trace of its reads.

    Usage:
        rom = InstrumentedRomBuffer(data)
        header = decode_header("game.sfc", rom)
        rom.write_trace("game_trace.json")
    """

    def __init__(self, data: bytes, require_annotations: bool = False):
        """
        Args:
            data: Raw image bytes
            require_annotations: Raise RuntimeError on reads made without
                a preceding annotate() call
        """
        super().__init__(data)
        self._annotation: str | None = None
        self._strict = require_annotations
        self._reads: list[dict] = []

    @classmethod
    def from_file(cls, rom_path: str, require_annotations: bool = False) -> "InstrumentedRomBuffer":
        with open(rom_path, "rb") as f:
            return cls(f.read(), require_annotations=require_annotations)

    def annotate(self, description: str) -> "InstrumentedRomBuffer":
        """Label the next read; returns self so calls can be chained."""
        self._annotation = description
        return self

    def _record(self, offset: int, length: int, data: bytes, padded: bool):
        if self._annotation is None and self._strict:
            raise RuntimeError(f"Read at 0x{offset:05X} without annotation")

        shown = format_hex_row(data[:TRACE_VALUE_LIMIT])
        if len(data) > TRACE_VALUE_LIMIT:
            shown += f"... ({length} bytes)"

        self._reads.append({
            "annotation": self._annotation or UNANNOTATED,
            "offset": offset,
            "offset_hex": f"0x{offset:05X}",
            "length": length,
            "padded": padded,
            "value_hex": shown,
        })
        self._annotation = None

    # read_byte, read_word and read_dword_be all go through read()

    def read(self, offset: int, length: int = 1) -> bytes:
        data = super().read(offset, length)
        self._record(offset, length, data, padded=False)
        return data

    def read_window(self, offset: int, length: int, pad: bool = False) -> bytes:
        if not pad:
            return self.read(offset, length)
        data = super().read_window(offset, length, pad=True)
        self._record(offset, length, data, padded=offset + length > len(self.data))
        return data

    @property
    def trace(self) -> list[dict]:
        """Recorded reads, oldest first."""
        return self._reads

    def touched_offsets(self) -> set[int]:
        """Offsets inside the image covered by at least one read."""
        touched = set()
        for entry in self._reads:
            start = entry["offset"]
            touched.update(range(max(start, 0), min(start + entry["length"], len(self.data))))
        return touched

    def write_trace(self, path: str, file=None):
        """
        Write the trace as JSON.

        Args:
            path: Output file path
            file: Stream for the status line (default: stdout)
        """
        touched = len(self.touched_offsets())
        with open(path, "w") as f:
            json.dump(
                {
                    "image_size": len(self.data),
                    "bytes_touched": touched,
                    "entries": self._reads,
                },
                f,
                indent=2,
            )
        print(
            f"Wrote read trace ({len(self._reads)} reads, {touched} bytes) to: {path}",
            file=file,
        )
