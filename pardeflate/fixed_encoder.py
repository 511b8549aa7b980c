"""Deflate's fixed Huffman code tables and the fixed-code block encoder."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from functools import lru_cache

from .bitbuffer import BitBuffer

MAX_LENGTH = 258
MAX_DISTANCE = 32_768
MAX_LITERAL = 256
DISTANCES_ALPHABET_SIZE = 30
LITERALS_AND_LENGTHS_ALPHABET_SIZE = 285

_MAX_CODE_BITS = 15

_LENGTH_BASES = (
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31,
    35, 43, 51, 59, 67, 83, 99, 115, 131, 163, 195, 227, 258,
)
_LENGTH_EXTRA_BITS = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2,
    3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5, 0,
)
_DISTANCE_BASES = (
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193,
    257, 385, 513, 769, 1025, 1537, 2049, 3073, 4097, 6145,
    8193, 12_289, 16_385, 24_577,
)
_DISTANCE_EXTRA_BITS = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6,
    7, 7, 8, 8, 9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
)
_FIXED_LITERAL_LENGTHS = (8,) * 144 + (9,) * 112 + (7,) * 24 + (8,) * 8
_DISTANCE_CODE_BITS = 5


@dataclass(frozen=True)
class LiteralCode:
    """Fixed code of a literal byte or of the end-of-block symbol (256)."""

    code: int
    code_length: int
    literal: int


@dataclass(frozen=True)
class LengthCode:
    """Fixed code and extra bits for one match length."""

    length: int
    code: int
    code_length: int
    extra_bits_count: int
    extra_bits: int
    index: int


@dataclass(frozen=True)
class DistanceCode:
    """Fixed five-bit code and extra bits for one match distance."""

    code: int
    distance: int
    extra_bits_count: int
    extra_bits: int
    index: int


def _reverse_bits(value, count):
    result = 0
    for _ in range(count):
        result = (result << 1) | (value & 1)
        value >>= 1
    return result


def create_codes(code_lengths):
    """Canonical codes for ``code_lengths``, bit-reversed for LSB-first output.

    Symbols of length zero get code 0.
    """
    lengths = list(code_lengths)
    counts = [0] * (_MAX_CODE_BITS + 1)
    for length in lengths:
        if not 0 <= length <= _MAX_CODE_BITS:
            raise ValueError(f"code length {length} exceeds {_MAX_CODE_BITS} bits")
        counts[length] += 1

    next_code = [0] * (_MAX_CODE_BITS + 1)
    code = 0
    for bits in range(2, max(lengths, default=0) + 1):
        code = ((code + counts[bits - 1]) << 1) & 0xFFFF
        next_code[bits] = code

    codes = []
    for length in lengths:
        if length:
            codes.append(_reverse_bits(next_code[length], length))
            next_code[length] += 1
        else:
            codes.append(0)
    return tuple(codes)


@lru_cache(maxsize=None)
def _literal_and_length_codes():
    codes = create_codes(_FIXED_LITERAL_LENGTHS)
    literals = tuple(
        LiteralCode(codes[symbol], _FIXED_LITERAL_LENGTHS[symbol], symbol)
        for symbol in range(MAX_LITERAL + 1)
    )
    lengths = [LengthCode(0, 0, 0, 0, 0, 0)] * 3
    for length in range(3, MAX_LENGTH + 1):
        index = bisect_right(_LENGTH_BASES, length) - 1
        symbol = index + 257
        lengths.append(
            LengthCode(
                length=length,
                code=codes[symbol],
                code_length=_FIXED_LITERAL_LENGTHS[symbol],
                extra_bits_count=_LENGTH_EXTRA_BITS[index],
                extra_bits=length - _LENGTH_BASES[index],
                index=index,
            )
        )
    return literals, tuple(lengths)


def fixed_literal_codes():
    """Fixed codes indexed by literal, 0 to 256 inclusive."""
    return _literal_and_length_codes()[0]


def fixed_length_codes():
    """Fixed codes indexed by match length; entries 0 to 2 are empty."""
    return _literal_and_length_codes()[1]


@lru_cache(maxsize=None)
def fixed_distance_codes():
    """Fixed codes indexed by match distance; entry 0 is empty."""
    codes = create_codes((_DISTANCE_CODE_BITS,) * 32)
    table = [DistanceCode(0, 0, 0, 0, 0)]
    for distance in range(1, MAX_DISTANCE + 1):
        index = bisect_right(_DISTANCE_BASES, distance) - 1
        table.append(
            DistanceCode(
                code=codes[index],
                distance=distance,
                extra_bits_count=_DISTANCE_EXTRA_BITS[index],
                extra_bits=distance - _DISTANCE_BASES[index],
                index=index,
            )
        )
    return tuple(table)


def encode_fixed(matches, is_last_block):
    """Encode LZ77 matches as one deflate block with the fixed Huffman codes."""
    matches = list(matches)
    if not matches:
        raise ValueError("no LZ77 matches to encode")

    literals = fixed_literal_codes()
    lengths = fixed_length_codes()
    distances = fixed_distance_codes()
    out = BitBuffer()

    out.write_bits(1 if is_last_block else 0, 1)
    out.write_bits(0b01, 2)

    for match in matches:
        if match.length > 1:
            length_code = lengths[match.length]
            distance_code = distances[match.distance]
            out.write_bits(length_code.code, length_code.code_length)
            out.write_bits(length_code.extra_bits, length_code.extra_bits_count)
            out.write_bits(distance_code.code, _DISTANCE_CODE_BITS)
            out.write_bits(distance_code.extra_bits, distance_code.extra_bits_count)
        else:
            literal_code = literals[match.literal & 0xFF]
            out.write_bits(literal_code.code, literal_code.code_length)

    end_of_block = literals[MAX_LITERAL]
    out.write_bits(end_of_block.code, end_of_block.code_length)
    return out.getvalue()