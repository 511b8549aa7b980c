"""Decompression of a single deflate block."""

from __future__ import annotations

from . import lz77
from .bitbuffer import BitBuffer
from .dynamic_decoder import DynamicHuffmanDecoder
from .fixed_decoder import FixedHuffmanDecoder

_STORED_HEADER_SIZE = 5


class InflateError(ValueError):
    """Raised when a block cannot be decompressed."""


class Inflator:
    """Decompresses one block and remembers what its header said."""

    def __init__(self):
        self.block_size = 0
        self.is_last_block = False

    def decompress(self, data):
        """Return the bytes held by the block in ``data``."""
        data = bytes(data)
        if not data:
            raise InflateError("the input data is empty")

        bits = BitBuffer(data)
        self.is_last_block = bool(bits.read_bit())
        block_type = bits.read_bits(2)

        if block_type == 0:
            return data[_STORED_HEADER_SIZE:]
        if block_type == 1:
            decoder = FixedHuffmanDecoder(bits)
        elif block_type == 2:
            decoder = DynamicHuffmanDecoder(bits)
        else:
            raise InflateError(f"unsupported block type: {block_type}")

        try:
            matches = decoder.decode()
            self.block_size = decoder.block_size()
            return lz77.decompress(matches)
        except ValueError as exc:
            raise InflateError(str(exc)) from exc

    def __call__(self, data):
        return self.decompress(data)


def inflate_block(data):
    """Decompress one block with a fresh inflator."""
    return Inflator().decompress(data)