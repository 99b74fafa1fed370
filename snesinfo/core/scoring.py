"""
SNES Header Info - Header Location Scoring

Scores the two candidate header locations (LoROM at $7F00, HiROM at $FF00)
with a fixed rubric and picks the more plausible one.

Each rubric is a tuple of Heuristic rows. A row reads bytes of the
0x100-byte candidate window; when its condition holds, its weight is added
to the candidate's score. Rows that can never fire are still listed.
"""

from dataclasses import dataclass
from typing import Callable, NamedTuple

from .header_utils import (
    CANDIDATE_WINDOW_SIZE,
    HIROM_BASE,
    LICENSEE_EXTENDED,
    LOROM_BASE,
    MAP_MODE_HIROM_BIT,
    MAP_MODE_SA1,
    OFFSET_CHECKSUM,
    OFFSET_COMPLEMENT,
    OFFSET_LICENSEE,
    OFFSET_MAKER_REGION,
    OFFSET_MAP_MODE,
    OFFSET_MAP_MODE_HIGH,
    OFFSET_RESET_VECTOR,
    OFFSET_ROM_SIZE,
    OFFSET_TITLE,
    ROM_NAME_LEN,
    TIED_SCORE_BASE,
    HeaderPresence,
    all_ascii,
    candidate_offset,
    classify_size,
)
from .rom_buffer import RomBuffer, as_rom_buffer

MIB = 1024 * 1024
LOROM_MAX_SIZE = 16 * MIB
HIROM_MIN_SIZE = 3 * MIB

_RESET_LO = OFFSET_RESET_VECTOR
_RESET_HI = OFFSET_RESET_VECTOR + 1
_COMPLEMENT_LO = OFFSET_COMPLEMENT
_COMPLEMENT_HI = OFFSET_COMPLEMENT + 1
_CHECKSUM_LO = OFFSET_CHECKSUM
_CHECKSUM_HI = OFFSET_CHECKSUM + 1

Condition = Callable[[bytes, int], bool]


@dataclass(frozen=True)
class Heuristic:
    """
    One row of a scoring rubric.

    Attributes:
        name: Short identifier, unique within a rubric
        weight: Score delta applied when the condition holds
        condition: Callable taking (window, calculated_size)
        reads: Window offsets the condition inspects
    """

    name: str
    weight: int
    condition: Condition
    reads: tuple[int, ...] = ()

    def applies(self, window: bytes, calculated_size: int) -> bool:
        return bool(self.condition(window, calculated_size))


class CandidateScores(NamedTuple):
    lorom: int
    hirom: int


@dataclass(frozen=True)
class HeaderLocation:
    """Outcome of locating the header in an image."""

    presence: HeaderPresence
    scores: CandidateScores
    base: int
    offset: int

    @property
    def tied(self) -> bool:
        return self.scores.lorom == self.scores.hirom

    @property
    def margin(self) -> int:
        """LoROM score minus HiROM score."""
        return self.scores.lorom - self.scores.hirom


# ============================================================================
# Row conditions
# ============================================================================

def _lorom_pairs(w: bytes) -> bool:
    return (
        w[_COMPLEMENT_LO] + w[_CHECKSUM_LO] == 0xFF
        and w[_COMPLEMENT_HI] + w[_CHECKSUM_HI] == 0xFF
    )


def _hirom_pairs(w: bytes) -> bool:
    return (
        w[_COMPLEMENT_HI] + w[_CHECKSUM_HI] == 0xFF
        and w[_COMPLEMENT_LO] + w[_CHECKSUM_LO] == 0xFF
    )


def _checksum_nonzero(w: bytes) -> bool:
    return w[_CHECKSUM_LO] != 0 and w[_CHECKSUM_HI] != 0


def declared_size_implausible(size_byte: int) -> bool:
    """
    Evaluate `1 << (size_byte - 7) > 48` with fixed-width integer semantics.

    The subtraction wraps as an unsigned byte and the shift happens on a
    signed 64-bit integer: shifts of 64 or more give 0, a shift of 63 gives
    a negative number.
    """
    shift = (size_byte - 7) & 0xFF
    if shift >= 63:
        return False
    return (1 << shift) > 48


def _maker_region_not_ascii(w: bytes) -> bool:
    return not all_ascii(w[OFFSET_MAKER_REGION : OFFSET_MAKER_REGION + 6])


def _title_not_ascii(w: bytes) -> bool:
    return not all_ascii(w[OFFSET_TITLE : OFFSET_TITLE + ROM_NAME_LEN - 1])


_PAIR_READS = (_COMPLEMENT_LO, _COMPLEMENT_HI, _CHECKSUM_LO, _CHECKSUM_HI)
_MAKER_READS = tuple(range(OFFSET_MAKER_REGION, OFFSET_MAKER_REGION + 6))
_TITLE_READS = tuple(range(OFFSET_TITLE, OFFSET_TITLE + ROM_NAME_LEN - 1))


# ============================================================================
# Rubrics
# ============================================================================

LOROM_RUBRIC: tuple[Heuristic, ...] = (
    Heuristic(
        "map_mode_bit", 3,
        lambda w, size: w[OFFSET_MAP_MODE] & MAP_MODE_HIROM_BIT == 0,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "map_mode_sa1", 2,
        lambda w, size: w[OFFSET_MAP_MODE] == MAP_MODE_SA1,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "complement_pairs", 2,
        lambda w, size: _lorom_pairs(w),
        _PAIR_READS,
    ),
    Heuristic(
        "checksum_nonzero", 1,
        lambda w, size: _lorom_pairs(w) and _checksum_nonzero(w),
        _PAIR_READS,
    ),
    Heuristic(
        "licensee_extended", 2,
        lambda w, size: w[OFFSET_LICENSEE] == LICENSEE_EXTENDED,
        (OFFSET_LICENSEE,),
    ),
    Heuristic(
        "rom_type_nibble", 2,
        lambda w, size: (w[OFFSET_MAP_MODE] & 0xF) < 4,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "reset_vector_low", -6,
        lambda w, size: w[_RESET_HI] & 0x80 == 0,
        (_RESET_HI,),
    ),
    Heuristic(
        "image_size", 2,
        lambda w, size: size <= LOROM_MAX_SIZE,
    ),
    Heuristic(
        "reset_vector_high", -2,
        lambda w, size: w[_RESET_LO] > 0xB0 and w[_RESET_HI] > 0xB0,
        (_RESET_LO, _RESET_HI),
    ),
    Heuristic(
        "declared_size", -1,
        lambda w, size: declared_size_implausible(w[OFFSET_ROM_SIZE]),
        (OFFSET_ROM_SIZE,),
    ),
    Heuristic(
        "maker_not_ascii", -1,
        lambda w, size: _maker_region_not_ascii(w),
        _MAKER_READS,
    ),
    Heuristic(
        "title_not_ascii", -1,
        lambda w, size: _title_not_ascii(w),
        _TITLE_READS,
    ),
)

HIROM_RUBRIC: tuple[Heuristic, ...] = (
    Heuristic(
        "map_mode_bit", 2,
        lambda w, size: w[OFFSET_MAP_MODE] & MAP_MODE_HIROM_BIT != 0,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "map_mode_sa1", -2,
        lambda w, size: w[OFFSET_MAP_MODE] == MAP_MODE_SA1,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "map_mode_high", 2,
        lambda w, size: w[OFFSET_MAP_MODE_HIGH] == 0x20,
        (OFFSET_MAP_MODE_HIGH,),
    ),
    Heuristic(
        "complement_pairs", 2,
        lambda w, size: _hirom_pairs(w),
        _PAIR_READS,
    ),
    Heuristic(
        "checksum_nonzero", 1,
        lambda w, size: _hirom_pairs(w) and _checksum_nonzero(w),
        _PAIR_READS,
    ),
    Heuristic(
        "licensee_extended", 2,
        lambda w, size: w[OFFSET_LICENSEE] == LICENSEE_EXTENDED,
        (OFFSET_LICENSEE,),
    ),
    Heuristic(
        "rom_type_nibble", 2,
        lambda w, size: (w[OFFSET_MAP_MODE] & 0xF) < 4,
        (OFFSET_MAP_MODE,),
    ),
    Heuristic(
        "reset_vector_low", -6,
        lambda w, size: w[_RESET_HI] & 0x80 == 0,
        (_RESET_HI,),
    ),
    Heuristic(
        # A byte is never above 0xFF, so this row never fires.
        "reset_vector_high", -2,
        lambda w, size: w[_RESET_HI] > 0xFF and w[_RESET_LO] > 0xB0,
        (_RESET_LO, _RESET_HI),
    ),
    Heuristic(
        "image_size", 4,
        lambda w, size: size > HIROM_MIN_SIZE,
    ),
    Heuristic(
        "declared_size", -1,
        lambda w, size: declared_size_implausible(w[OFFSET_ROM_SIZE]),
        (OFFSET_ROM_SIZE,),
    ),
    Heuristic(
        "maker_not_ascii", -1,
        lambda w, size: _maker_region_not_ascii(w),
        _MAKER_READS,
    ),
    Heuristic(
        "title_not_ascii", -1,
        lambda w, size: _title_not_ascii(w),
        _TITLE_READS,
    ),
)

RUBRICS: dict[int, tuple[Heuristic, ...]] = {
    LOROM_BASE: LOROM_RUBRIC,
    HIROM_BASE: HIROM_RUBRIC,
}


# ============================================================================
# Scoring
# ============================================================================

def candidate_window(buffer: RomBuffer, base: int, presence: HeaderPresence) -> bytes:
    """
    Read the 0x100-byte window a rubric inspects.

    Bytes beyond the end of the image read as zero, so an image too small
    to hold a HiROM header still gets a (low) HiROM score.
    """
    offset = candidate_offset(base, presence)
    return buffer.annotate(f"candidate window ${base:04X}").read_window(
        offset, CANDIDATE_WINDOW_SIZE, pad=True
    )


def score_window(rubric: tuple[Heuristic, ...], window: bytes, calculated_size: int) -> int:
    """Sum the weights of every rubric row whose condition holds."""
    return sum(row.weight for row in rubric if row.applies(window, calculated_size))


def explain_window(
    rubric: tuple[Heuristic, ...], window: bytes, calculated_size: int
) -> list[tuple[Heuristic, bool]]:
    """Evaluate every rubric row, returning (row, fired) pairs in rubric order."""
    return [(row, row.applies(window, calculated_size)) for row in rubric]


def score_candidates(buffer, length: int, presence: HeaderPresence) -> CandidateScores:
    """
    Compute the LoROM and HiROM plausibility scores of an image.

    Args:
        buffer: RomBuffer or raw bytes
        length: Declared image length, copier header included
        presence: Copier header classification

    Returns:
        CandidateScores(lorom, hirom)
    """
    rom = as_rom_buffer(buffer)
    lorom = score_window(LOROM_RUBRIC, candidate_window(rom, LOROM_BASE, presence), length)
    hirom = score_window(HIROM_RUBRIC, candidate_window(rom, HIROM_BASE, presence), length)
    return CandidateScores(lorom, hirom)


def explain_candidates(buffer, length: int, presence: HeaderPresence) -> dict[int, list[tuple[Heuristic, bool]]]:
    """Per-row breakdown of both scores, keyed by candidate base."""
    rom = as_rom_buffer(buffer)
    return {
        base: explain_window(rubric, candidate_window(rom, base, presence), length)
        for base, rubric in RUBRICS.items()
    }


def select_base(scores: CandidateScores, tie_base: int = TIED_SCORE_BASE) -> int:
    """
    Pick the winning candidate base offset.

    Args:
        scores: Both candidate scores
        tie_base: Base returned when the scores are equal

    Returns:
        LOROM_BASE, HIROM_BASE, or tie_base on a tie
    """
    if scores.lorom > scores.hirom:
        return LOROM_BASE
    if scores.hirom > scores.lorom:
        return HIROM_BASE
    return tie_base


def locate_header(buffer, length: int, tie_base: int = TIED_SCORE_BASE) -> HeaderLocation:
    """
    Classify an image, score both candidates and resolve the header offset.

    Args:
        buffer: RomBuffer or raw bytes
        length: Declared image length
        tie_base: Base used when both candidates score the same

    Returns:
        HeaderLocation with the resolved absolute offset

    Raises:
        UnrecognizedSizeError: If length is not 0 or 512 modulo 1024
    """
    presence = classify_size(length)
    scores = score_candidates(buffer, length, presence)
    base = select_base(scores, tie_base)
    return HeaderLocation(
        presence=presence,
        scores=scores,
        base=base,
        offset=candidate_offset(base, presence),
    )
