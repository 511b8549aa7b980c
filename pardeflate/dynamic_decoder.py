"""Decoder for deflate blocks that carry their own Huffman code tables."""

from __future__ import annotations

from .fixed_decoder import _read_distance, _read_length
from .fixed_encoder import DISTANCES_ALPHABET_SIZE, LITERALS_AND_LENGTHS_ALPHABET_SIZE
from .huffman import MAX_BITS, CanonicalCode, create_reverse_code_table
from .lz77 import Match

END_OF_BLOCK = 256

_CODE_LENGTH_ALPHABET_SIZE = 19
_CODE_LENGTH_ORDER = (16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15)


class DynamicHuffmanDecoder:
    """Reads a dynamic-code block from a bit buffer positioned past its header bits."""

    def __init__(self, bit_buffer):
        self._bits = bit_buffer

    def _read_symbol(self, table, kind):
        code = 0
        for length in range(1, MAX_BITS + 1):
            code = (code << 1) | self._bits.read_bit()
            symbol = table.get(CanonicalCode(code, length))
            if symbol is not None:
                return symbol
        raise ValueError(f"no {kind} code matches the input")

    def _read_code_lengths(self):
        literal_count = self._bits.read_bits(5) + 257
        distance_count = self._bits.read_bits(5) + 1
        ccl_count = self._bits.read_bits(4) + 4

        ccl = [0] * _CODE_LENGTH_ALPHABET_SIZE
        for symbol in _CODE_LENGTH_ORDER[:ccl_count]:
            ccl[symbol] = self._bits.read_bits(3)
        table = create_reverse_code_table(ccl, _CODE_LENGTH_ALPHABET_SIZE)

        lengths = []
        previous_code = 0
        previous_length = 0
        total = literal_count + distance_count
        while len(lengths) < total:
            symbol = self._read_symbol(table, "code length")
            if symbol == 18:
                lengths.extend([0] * (self._bits.read_bits(7) + 11))
            elif symbol == 17:
                lengths.extend([0] * (self._bits.read_bits(3) + 3))
            elif symbol == 16 and 0 < previous_code < 16:
                previous_length = previous_code
                lengths.extend([previous_length] * (self._bits.read_bits(2) + 3))
            elif symbol == 16 and previous_code == 16:
                lengths.extend([previous_length] * (self._bits.read_bits(2) + 3))
            else:
                lengths.append(symbol)
            previous_code = symbol
        return lengths[:literal_count], lengths[literal_count:]

    def decode(self):
        """Read the code tables, then the symbols up to end-of-block, as LZ77 matches."""
        literal_lengths, distance_lengths = self._read_code_lengths()
        literals = create_reverse_code_table(
            literal_lengths, LITERALS_AND_LENGTHS_ALPHABET_SIZE
        )
        distances = create_reverse_code_table(distance_lengths, DISTANCES_ALPHABET_SIZE)

        matches = []
        while True:
            symbol = self._read_symbol(literals, "literal/length")
            if symbol < END_OF_BLOCK:
                matches.append(Match(symbol, 0, 1))
                continue
            if symbol == END_OF_BLOCK:
                return matches
            length = _read_length(self._bits, symbol)
            distance_symbol = self._read_symbol(distances, "distance")
            distance = _read_distance(self._bits, distance_symbol)
            matches.append(Match(0, distance, length))

    def block_size(self):
        """Index of the byte the reader stopped in."""
        return self._bits.byte_index