"""Decoder for deflate blocks that use the fixed Huffman codes."""

from __future__ import annotations

from functools import lru_cache

from .fixed_encoder import (
    MAX_LITERAL,
    fixed_distance_codes,
    fixed_length_codes,
    fixed_literal_codes,
)
from .huffman import MAX_BITS, CanonicalCode
from .lz77 import Match

_DISTANCE_CODE_BITS = 5
_FIRST_LENGTH_SYMBOL = 257


@lru_cache(maxsize=None)
def _literal_table():
    """Fixed literal, end-of-block and length codes mapped to their symbols."""
    table = {
        CanonicalCode(code.code, code.code_length): code.literal
        for code in fixed_literal_codes()
    }
    end_of_block = fixed_literal_codes()[MAX_LITERAL]
    table[CanonicalCode(end_of_block.code, end_of_block.code_length)] = MAX_LITERAL
    for length_code in fixed_length_codes():
        key = CanonicalCode(length_code.code, length_code.code_length)
        if key.code > 0 and key not in table:
            table[key] = length_code.index + _FIRST_LENGTH_SYMBOL
    return table


@lru_cache(maxsize=None)
def _distance_table():
    """Fixed five-bit distance codes mapped to their distance symbols."""
    table = {}
    for distance_code in fixed_distance_codes():
        table.setdefault(
            CanonicalCode(distance_code.code, _DISTANCE_CODE_BITS), distance_code.index
        )
    return table


@lru_cache(maxsize=None)
def _length_bases():
    """Shortest length belonging to each length symbol."""
    bases = {}
    for length_code in fixed_length_codes():
        if length_code.code != 0 and length_code.code_length != 0:
            bases.setdefault(length_code.index + _FIRST_LENGTH_SYMBOL, length_code)
    return bases


@lru_cache(maxsize=None)
def _distance_bases():
    """Shortest distance belonging to each distance symbol."""
    bases = {}
    for distance_code in fixed_distance_codes():
        if distance_code.distance != 0:
            bases.setdefault(distance_code.index, distance_code)
    return bases


def _read_length(bit_buffer, symbol):
    """Match length for a length symbol, reading its extra bits."""
    base = _length_bases().get(symbol)
    if base is None:
        raise ValueError(f"invalid length symbol {symbol}")
    return base.length + bit_buffer.read_bits(base.extra_bits_count)


def _read_distance(bit_buffer, symbol):
    """Match distance for a distance symbol, reading its extra bits."""
    base = _distance_bases().get(symbol)
    if base is None:
        raise ValueError(f"invalid distance symbol {symbol}")
    return base.distance + bit_buffer.read_bits(base.extra_bits_count)


class FixedHuffmanDecoder:
    """Reads the body of a fixed-code block from a bit buffer past its header."""

    def __init__(self, bit_buffer):
        self._bits = bit_buffer
        self._literals = _literal_table()
        self._distances = _distance_table()

    def _read_symbol(self, table, kind):
        code = 0
        for length in range(1, MAX_BITS + 1):
            code |= self._bits.read_bit() << (length - 1)
            symbol = table.get(CanonicalCode(code, length))
            if symbol is not None:
                return symbol
        raise ValueError(f"no {kind} code matches the input")

    def decode(self):
        """Decode symbols up to the end-of-block code into LZ77 matches."""
        matches = []
        while True:
            symbol = self._read_symbol(self._literals, "literal/length")
            if symbol < MAX_LITERAL:
                matches.append(Match(symbol, 0, 1))
                continue
            if symbol == MAX_LITERAL:
                return matches
            length = _read_length(self._bits, symbol)
            distance_symbol = self._read_symbol(self._distances, "distance")
            distance = _read_distance(self._bits, distance_symbol)
            matches.append(Match(0, distance, length))

    def block_size(self):
        """Index of the byte the reader stopped in."""
        return self._bits.byte_index