"""Single-block deflate compression that picks the smallest block encoding."""

from __future__ import annotations

from enum import Enum

from . import lz77
from .dynamic_encoder import encode_dynamic
from .fixed_encoder import encode_fixed

_STORED_HEADER_SIZE = 5


class CompressionLevel(Enum):
    """Block size in KiB; positive levels use hashed matching, negative exhaustive."""

    LEVEL_1 = 8
    LEVEL_2 = 16
    LEVEL_3 = 32
    LEVEL_4 = -8
    LEVEL_5 = -16
    LEVEL_6 = -32

    @property
    def block_size(self):
        """Largest number of input bytes put into one block."""
        return abs(self.value) * 1024

    @property
    def uses_hash_table(self):
        """Whether LZ77 matching uses the fast hash-table search."""
        return self.value > 0


def stored_block(data, is_last_block):
    """Wrap ``data`` in an uncompressed block: header byte, LEN and NLEN, then the data."""
    data = bytes(data)
    length = len(data) & 0xFFFF
    header = 0x10 if is_last_block else 0x00
    return (
        bytes([header])
        + length.to_bytes(2, "little")
        + (~length & 0xFFFF).to_bytes(2, "little")
        + data
    )


def deflate_block(data, is_last_block, level):
    """Compress ``data`` into one block using fixed, dynamic or no Huffman coding.

    The smaller of the fixed and dynamic encodings wins, fixed on a tie; when
    both are larger than a stored block, the data is stored as is.
    """
    level = CompressionLevel(level)
    data = bytes(data)
    matches = lz77.compress(data, level.uses_hash_table)
    fixed = encode_fixed(matches, is_last_block)
    dynamic = encode_dynamic(matches, is_last_block)

    stored_size = len(data) + _STORED_HEADER_SIZE
    if len(fixed) > stored_size and len(dynamic) > stored_size:
        return stored_block(data, is_last_block)
    if len(fixed) <= len(dynamic):
        return fixed
    return dynamic