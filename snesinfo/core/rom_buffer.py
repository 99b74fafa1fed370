"""
SNES Header Info - ROM Buffer

Read-only, bounds-checked view over the bytes of a cartridge image.
All offsets are absolute offsets into the buffer (copier header included).
"""

from .errors import TruncatedError


class RomBuffer:
    """
    Immutable view over a ROM image held in memory.

    Reads outside the buffer raise TruncatedError, except window reads
    made with pad=True, which fill the missing tail with zero bytes.
    """

    def __init__(self, data: bytes):
        """
        Wrap image bytes.

        Args:
            data: Raw image bytes (bytes, bytearray or memoryview)

        Raises:
            TypeError: If data is not a bytes-like object
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes-like image data, got {type(data).__name__}")
        self.data = bytes(data)

    @classmethod
    def from_file(cls, rom_path: str) -> "RomBuffer":
        """
        Load an image file into memory.

        Args:
            rom_path: Path to .smc/.sfc image

        Returns:
            RomBuffer over the whole file
        """
        with open(rom_path, "rb") as f:
            return cls(f.read())

    def __len__(self) -> int:
        return len(self.data)

    def read(self, offset: int, length: int = 1) -> bytes:
        """
        Read bytes at an absolute offset.

        Args:
            offset: Offset into the buffer
            length: Number of bytes to read

        Returns:
            Requested bytes

        Raises:
            TruncatedError: If any requested byte is outside the buffer
        """
        if offset < 0 or offset + length > len(self.data):
            raise TruncatedError(
                f"read of {length} byte(s) at 0x{offset:X} in a "
                f"{len(self.data)}-byte image"
            )
        return self.data[offset : offset + length]

    def read_byte(self, offset: int) -> int:
        """Read a single byte."""
        return self.read(offset, 1)[0]

    def read_word(self, offset: int) -> int:
        """
        Read 16-bit little-endian word.

        Args:
            offset: Offset into the buffer

        Returns:
            16-bit value
        """
        data = self.read(offset, 2)
        return data[0] | (data[1] << 8)

    def read_dword_be(self, offset: int) -> int:
        """Read 32-bit big-endian value."""
        data = self.read(offset, 4)
        return (data[0] << 24) | (data[1] << 16) | (data[2] << 8) | data[3]

    def read_window(self, offset: int, length: int, pad: bool = False) -> bytes:
        """
        Read a fixed-size window.

        Args:
            offset: Offset into the buffer
            length: Window size
            pad: If True, bytes past the end of the buffer read as zero
                instead of raising

        Returns:
            Exactly length bytes

        Raises:
            TruncatedError: If pad is False and the window overruns the buffer
        """
        if not pad:
            return self.read(offset, length)
        chunk = self.data[offset : offset + length] if offset >= 0 else b""
        return chunk + bytes(length - len(chunk))

    def annotate(self, description: str) -> "RomBuffer":
        """
        Annotate the next read operation.

        This is a no-op in the base class. The instrumented subclass
        overrides this to record annotations for tracing.

        Args:
            description: Human-readable description of the operation

        Returns:
            self (for method chaining)
        """
        return self


def as_rom_buffer(data) -> RomBuffer:
    """Return data unchanged if it is already a RomBuffer, else wrap it."""
    if isinstance(data, RomBuffer):
        return data
    return RomBuffer(data)
