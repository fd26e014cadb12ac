"""Big-endian reader for the fixed-width fields of a class file."""

from __future__ import annotations

import struct

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")


class ClassReader:
    """Consumes class file data front to back."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        return self._pos

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if n < 0 or n > self.remaining:
            raise EOFError(
                f"class data truncated: need {n} bytes at offset {self._pos}, "
                f"{self.remaining} left"
            )
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self._take(fmt.size))[0]

    def read_u8(self) -> int:
        """Read an unsigned byte (u1)."""
        return self._unpack(_U8)

    def read_u16(self) -> int:
        """Read an unsigned big-endian 16-bit value (u2)."""
        return self._unpack(_U16)

    def read_u32(self) -> int:
        """Read an unsigned big-endian 32-bit value (u4)."""
        return self._unpack(_U32)

    def read_u64(self) -> int:
        """Read an unsigned big-endian 64-bit value."""
        return self._unpack(_U64)

    def read_u16_list(self) -> list[int]:
        """Read a u2 count followed by that many u2 values."""
        count = self.read_u16()
        return list(struct.unpack(f">{count}H", self._take(2 * count)))

    def read_bytes(self, n: int) -> bytes:
        """Read exactly ``n`` raw bytes."""
        return self._take(n)