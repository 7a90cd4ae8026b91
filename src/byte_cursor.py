"""
Bounded Byte Cursor
===================

Sequential reader over a payload buffer.

Every read checks the remaining length first and raises TruncatedPayloadError
on overrun, so a decoder can chain reads and handle a short buffer in one
place instead of checking each field.

Supported reads (all Big-Endian, network byte order):
- u32: 4-byte unsigned integer
- u48: 6-byte unsigned integer
- raw bytes / lossy ASCII text
"""

import struct


class TruncatedPayloadError(ValueError):
    """Raised when a read runs past the end of the buffer."""

    def __init__(self, offset: int, wanted: int, size: int):
        self.offset = offset
        self.wanted = wanted
        self.size = size
        super().__init__(f"read of {wanted} bytes at offset {offset} "
                         f"exceeds buffer of {size} bytes")


class ByteCursor:
    """Read-only cursor over a bytes buffer."""

    def __init__(self, data: bytes, position: int = 0):
        self.data = data
        self.position = 0
        self.seek(position)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def seek(self, position: int) -> None:
        """Move to an absolute offset. Seeking to the end is allowed."""
        if position < 0 or position > len(self.data):
            raise TruncatedPayloadError(position, 0, len(self.data))
        self.position = position

    def skip(self, count: int) -> None:
        self.seek(self.position + count)

    def read_bytes(self, count: int) -> bytes:
        if count > self.remaining:
            raise TruncatedPayloadError(self.position, count, len(self.data))
        chunk = bytes(self.data[self.position:self.position + count])
        self.position += count
        return chunk

    def read_text(self, count: int, encoding: str = 'utf-8') -> str:
        """Read count bytes as text, replacing invalid sequences."""
        return self.read_bytes(count).decode(encoding, errors='replace')

    def read_u32(self) -> int:
        return struct.unpack('>I', self.read_bytes(4))[0]

    def read_u48(self) -> int:
        # Pad to 8 bytes so struct can unpack it as an unsigned 64-bit value
        return struct.unpack('>Q', b'\x00\x00' + self.read_bytes(6))[0]
