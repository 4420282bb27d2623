"""A growable bit array stored in little-endian bit order within each byte."""

from __future__ import annotations

from typing import Iterator


class BitMap:
    """Bits addressed by offset; bit ``n`` lives in byte ``n // 8``, bit ``n % 8``."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data = bytearray()

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> "BitMap":
        """Wrap existing bytes; a ``bytearray`` is shared, not copied."""
        bm = cls()
        bm._data = data if isinstance(data, bytearray) else bytearray(data)
        return bm

    def bit_size(self) -> int:
        """Number of bits currently stored."""
        return len(self._data) * 8

    def to_bytes(self) -> bytes:
        """Return the stored bytes."""
        return bytes(self._data)

    def _grow(self, bit_size: int) -> None:
        byte_size = (bit_size + 7) // 8
        gap = byte_size - len(self._data)
        if gap > 0:
            self._data.extend(bytes(gap))

    def set_bit(self, offset: int, val: int) -> None:
        """Set the bit at ``offset`` to 1 when ``val`` is positive, else clear it."""
        if offset < 0:
            raise IndexError("negative bit offset")
        byte_index, bit_offset = divmod(offset, 8)
        mask = 1 << bit_offset
        self._grow(offset + 1)
        if val > 0:
            self._data[byte_index] |= mask
        else:
            self._data[byte_index] &= ~mask & 0xFF

    def get_bit(self, offset: int) -> int:
        """Return the bit at ``offset``; bits past the end read as 0."""
        if offset < 0:
            raise IndexError("negative bit offset")
        byte_index, bit_offset = divmod(offset, 8)
        if byte_index >= len(self._data):
            return 0
        return (self._data[byte_index] >> bit_offset) & 0x01

    def iter_bits(self, begin: int, end: int) -> Iterator[tuple[int, int]]:
        """Yield ``(offset, bit)`` from ``begin`` up to ``end``; ``end == 0`` means to the last byte."""
        offset = begin
        byte_index, bit_offset = divmod(begin, 8)
        while byte_index < len(self._data):
            current = self._data[byte_index]
            while bit_offset < 8:
                yield offset, (current >> bit_offset) & 0x01
                bit_offset += 1
                offset += 1
                if end != 0 and offset >= end:
                    break
            byte_index += 1
            bit_offset = 0
            if end > 0 and offset >= end:
                break

    def iter_bytes(self, begin: int, end: int) -> Iterator[tuple[int, int]]:
        """Yield ``(index, byte)`` in ``[begin, end)``; ``end == 0`` or past the end means all."""
        if end == 0 or end > len(self._data):
            end = len(self._data)
        for i in range(begin, end):
            yield i, self._data[i]