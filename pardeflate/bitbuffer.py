"""Bit-level reader and writer using deflate's least-significant-bit-first order."""

from __future__ import annotations


class BitBuffer:
    """A byte buffer that can be read from or appended to one bit at a time."""

    def __init__(self, data=None):
        if data is None:
            self._buffer = bytearray()
            self._current = 0
        else:
            if not data:
                raise ValueError("buffer is empty")
            self._buffer = bytearray(data)
            self._current = self._buffer[0]
        self._bit_position = 0
        self._byte_index = 0

    def align_to_byte(self):
        """Skip the rest of the current byte, unless still in the first byte."""
        if self._byte_index != 0:
            self._bit_position = 0
            self._byte_index += 1

    def read_bit(self):
        """Read one bit; an empty buffer and reads past the end yield 0."""
        if not self._buffer:
            return 0
        bit = (self._current >> self._bit_position) & 1
        self._bit_position += 1
        if self._bit_position == 8:
            self._byte_index += 1
            if self._byte_index < len(self._buffer):
                self._bit_position = 0
                self._current = self._buffer[self._byte_index]
        return bit

    def read_bits(self, count):
        """Read ``count`` bits, the first one read being the least significant."""
        result = 0
        for shift in range(count):
            result |= self.read_bit() << shift
        return result

    def write_bits(self, value, count):
        """Append the low ``count`` bits of ``value``, least significant first."""
        while count > 0:
            chunk = min(count, 8 - self._bit_position)
            bits = value & ((1 << chunk) - 1)
            self._current = (self._current | (bits << self._bit_position)) & 0xFF
            self._bit_position += chunk
            count -= chunk
            value >>= chunk
            if self._bit_position == 8:
                self._buffer.append(self._current)
                self._current = 0
                self._bit_position = 0

    def getvalue(self):
        """Return the written bytes, including a final partially filled byte."""
        if self._bit_position > 0:
            return bytes(self._buffer) + bytes([self._current])
        return bytes(self._buffer)

    def has_more(self):
        """Whether the read position is still inside the buffer."""
        return self._byte_index < len(self._buffer)

    @property
    def byte_index(self):
        """Index of the byte currently being read."""
        return self._byte_index