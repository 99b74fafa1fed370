"""
Core SNES header functionality.

This package contains size classification, header location scoring,
header field decoding, and the header writer used to build test images.
"""

from .errors import DecodeError, ErrorCode, TruncatedError, UnrecognizedSizeError
from .header_decoder import decode_fields, decode_header
from .header_utils import CartType, HeaderPresence, Layout, Region, classify_size
from .header_writer import build_image, write_header
from .instrumented_io import InstrumentedRomBuffer
from .rom_buffer import RomBuffer
from .scoring import (
    HIROM_RUBRIC,
    LOROM_RUBRIC,
    CandidateScores,
    HeaderLocation,
    locate_header,
    score_candidates,
    select_base,
)

__all__ = [
    "DecodeError",
    "ErrorCode",
    "TruncatedError",
    "UnrecognizedSizeError",
    "decode_fields",
    "decode_header",
    "CartType",
    "HeaderPresence",
    "Layout",
    "Region",
    "classify_size",
    "build_image",
    "write_header",
    "InstrumentedRomBuffer",
    "RomBuffer",
    "HIROM_RUBRIC",
    "LOROM_RUBRIC",
    "CandidateScores",
    "HeaderLocation",
    "locate_header",
    "score_candidates",
    "select_base",
]
