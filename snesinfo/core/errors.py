"""
Decode error types.

Every failure of a single decode is reported as a DecodeError subclass
naming the stage that failed. Messages come from a fixed table.
"""

from enum import IntEnum
from types import MappingProxyType


class ErrorCode(IntEnum):
    """Stage at which a decode failed."""

    UNRECOGNIZED_SIZE = 0
    TRUNCATED = 1


ERROR_MESSAGES = MappingProxyType({
    ErrorCode.UNRECOGNIZED_SIZE: "offset could not be found",
    ErrorCode.TRUNCATED: "header extends past the end of the image",
})


class DecodeError(Exception):
    """Raised when an image cannot be decoded."""

    code: ErrorCode

    def __init__(self, detail: str = ""):
        self.detail = detail
        message = ERROR_MESSAGES[self.code]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def stage(self) -> str:
        return self.code.name.lower()


class UnrecognizedSizeError(DecodeError):
    """Raised when the image length is not 0 or 512 modulo 1024."""

    code = ErrorCode.UNRECOGNIZED_SIZE


class TruncatedError(DecodeError):
    """Raised when a required byte lies past the end of the buffer."""

    code = ErrorCode.TRUNCATED
