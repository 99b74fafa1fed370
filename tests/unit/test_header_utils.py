"""
Unit tests for header layout constants, size classification and errors.
"""

import pytest

from snesinfo.core.errors import (
    ERROR_MESSAGES,
    DecodeError,
    ErrorCode,
    TruncatedError,
    UnrecognizedSizeError,
)
from snesinfo.core.header_utils import (
    COPIER_HEADER_SIZE,
    HIROM_BASE,
    LOROM_BASE,
    TIED_SCORE_BASE,
    HeaderPresence,
    all_ascii,
    candidate_offset,
    classify_size,
    is_printable,
)


class TestClassifySize:
    """Test copier header detection from the image length."""

    def test_headerless_multiples(self):
        """Multiples of 1024 are headerless, zero included."""
        for k in range(0, 64):
            assert classify_size(k * 1024) is HeaderPresence.HEADERLESS

    def test_headered_multiples(self):
        """Multiples of 1024 plus 512 are headered."""
        for k in range(0, 64):
            assert classify_size(k * 1024 + 512) is HeaderPresence.HEADERED

    def test_common_cartridge_sizes(self):
        """Real cartridge sizes classify as expected."""
        assert classify_size(4 * 1024 * 1024) is HeaderPresence.HEADERLESS
        assert classify_size(4 * 1024 * 1024 + 512) is HeaderPresence.HEADERED
        assert classify_size(32768) is HeaderPresence.HEADERLESS
        assert classify_size(33280) is HeaderPresence.HEADERED

    def test_every_other_remainder_rejected(self):
        """Any remainder other than 0 and 512 is unrecognized."""
        for remainder in range(1, 1024):
            if remainder == 512:
                continue
            with pytest.raises(UnrecognizedSizeError):
                classify_size(8192 + remainder)

    def test_error_message(self):
        """The unrecognized size message comes from the fixed table."""
        with pytest.raises(UnrecognizedSizeError, match="offset could not be found"):
            classify_size(1000)

    def test_negative_length(self):
        """A negative length is a programming error."""
        with pytest.raises(ValueError, match="negative"):
            classify_size(-1024)


class TestCandidateOffset:
    """Test conversion from candidate base to buffer offset."""

    def test_headerless(self):
        assert candidate_offset(LOROM_BASE, HeaderPresence.HEADERLESS) == 0x7F00
        assert candidate_offset(HIROM_BASE, HeaderPresence.HEADERLESS) == 0xFF00

    def test_headered(self):
        """Headered images shift every candidate by 512 bytes."""
        assert candidate_offset(LOROM_BASE, HeaderPresence.HEADERED) == 0x8100
        assert candidate_offset(HIROM_BASE, HeaderPresence.HEADERED) == 0x10100

    def test_tied_base(self):
        """The tie base gets the same adjustment."""
        assert candidate_offset(TIED_SCORE_BASE, HeaderPresence.HEADERLESS) == 0
        assert candidate_offset(TIED_SCORE_BASE, HeaderPresence.HEADERED) == 0x200

    def test_adjustment(self):
        assert HeaderPresence.HEADERED.adjustment == COPIER_HEADER_SIZE
        assert HeaderPresence.HEADERLESS.adjustment == 0


class TestPrintable:
    """Test the printable ASCII helpers."""

    def test_bounds(self):
        """32 and 126 are inclusive bounds."""
        assert not is_printable(31)
        assert is_printable(32)
        assert is_printable(126)
        assert not is_printable(127)
        assert not is_printable(0)
        assert not is_printable(0xFF)

    def test_all_ascii(self):
        assert all_ascii(b"01JP  ")
        assert not all_ascii(b"01JP\x00 ")
        assert all_ascii(b"")


class TestDecodeErrors:
    """Test the decode error hierarchy."""

    def test_subclasses(self):
        assert issubclass(UnrecognizedSizeError, DecodeError)
        assert issubclass(TruncatedError, DecodeError)

    def test_codes_and_stages(self):
        assert UnrecognizedSizeError().code is ErrorCode.UNRECOGNIZED_SIZE
        assert UnrecognizedSizeError().stage == "unrecognized_size"
        assert TruncatedError().stage == "truncated"

    def test_message_without_detail(self):
        """Without detail the message is exactly the table entry."""
        assert str(TruncatedError()) == ERROR_MESSAGES[ErrorCode.TRUNCATED]

    def test_message_with_detail(self):
        error = TruncatedError("needs 228 bytes")
        assert str(error) == "header extends past the end of the image: needs 228 bytes"
        assert error.detail == "needs 228 bytes"

    def test_message_table_is_read_only(self):
        with pytest.raises(TypeError):
            ERROR_MESSAGES[ErrorCode.TRUNCATED] = "changed"
