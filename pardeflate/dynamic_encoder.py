"""Deflate block encoder that builds its own Huffman codes from the data."""

from __future__ import annotations

from .bitbuffer import BitBuffer
from .fixed_encoder import (
    DISTANCES_ALPHABET_SIZE,
    LITERALS_AND_LENGTHS_ALPHABET_SIZE as _FIXED_ALPHABET_SIZE,
    fixed_distance_codes,
    fixed_length_codes,
)
from .huffman import HuffmanTree, create_code_table

LITERALS_AND_LENGTHS_ALPHABET_SIZE = 287
END_OF_BLOCK = 256

_CODE_LENGTH_ALPHABET_SIZE = 19
_CODE_LENGTH_ORDER = (16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15)


def _reverse_bits(value, count):
    result = 0
    for _ in range(count):
        result = (result << 1) | (value & 1)
        value >>= 1
    return result


def _run_end(lengths, start, value):
    return next(
        (index for index in range(start, len(lengths)) if lengths[index] != value),
        len(lengths),
    )


def encode_code_length_runs(lengths):
    """Turn code lengths into (symbol, extra bits, extra bit count) tokens.

    Symbols 0-15 are lengths, 16 repeats the previous length 3-6 times,
    17 writes 3-10 zeros and 18 writes 11-138 zeros.
    """
    lengths = list(lengths)
    end = len(lengths)
    tokens = []
    position = 0
    while position < end:
        current = lengths[position]
        if end - position >= 3:
            if current == 0 and lengths[position + 1] == 0 and lengths[position + 2] == 0:
                stop = _run_end(lengths, position + 3, 0)
                repeat = stop - position
                if repeat <= 10:
                    tokens.append((17, repeat - 3, 3))
                    position = stop
                elif repeat > 138:
                    tokens.append((18, 127, 7))
                    position += 138
                else:
                    tokens.append((18, repeat - 11, 7))
                    position = stop
                continue
            if (
                position > 0
                and current == lengths[position - 1]
                and current == lengths[position + 1]
                and current == lengths[position + 2]
            ):
                stop = _run_end(lengths, position + 3, current)
                repeat = stop - position
                if repeat > 6:
                    tokens.append((16, 3, 2))
                    position += 6
                else:
                    tokens.append((16, repeat - 3, 2))
                    position = stop
                continue
        tokens.append((current, 0, 0))
        position += 1
    return tokens


def _write_code(out, code):
    out.write_bits(_reverse_bits(code.code, code.length), code.length)


def _write_code_lengths(out, lengths):
    tokens = encode_code_length_runs(lengths)
    tree = HuffmanTree([symbol for symbol, _, _ in tokens], _CODE_LENGTH_ALPHABET_SIZE)
    ccl = tree.code_lengths(_CODE_LENGTH_ALPHABET_SIZE)

    permuted = [ccl[symbol] if symbol < len(ccl) else 0 for symbol in _CODE_LENGTH_ORDER]
    while len(permuted) > 4 and permuted[-1] == 0:
        permuted.pop()

    out.write_bits(len(permuted) - 4, 4)
    for length in permuted:
        out.write_bits(length, 3)

    table = create_code_table(ccl, _CODE_LENGTH_ALPHABET_SIZE)
    for symbol, extra_bits, extra_bits_count in tokens:
        _write_code(out, table[symbol])
        out.write_bits(extra_bits, extra_bits_count)


def encode_dynamic(matches, is_last_block):
    """Encode LZ77 matches as one deflate block with data-specific Huffman codes."""
    matches = list(matches)
    if not matches:
        raise ValueError("no LZ77 matches to encode")

    length_codes = fixed_length_codes()
    distance_codes = fixed_distance_codes()

    literal_symbols = []
    distance_symbols = []
    for match in matches:
        if match.length > 1:
            literal_symbols.append(length_codes[match.length].index + 257)
            distance_symbols.append(distance_codes[match.distance].index)
        else:
            literal_symbols.append(match.literal)
    literal_symbols.append(END_OF_BLOCK)

    literal_lengths = HuffmanTree(
        literal_symbols, LITERALS_AND_LENGTHS_ALPHABET_SIZE + 1
    ).code_lengths(LITERALS_AND_LENGTHS_ALPHABET_SIZE + 1)
    distance_lengths = HuffmanTree(
        distance_symbols, DISTANCES_ALPHABET_SIZE + 1
    ).code_lengths(DISTANCES_ALPHABET_SIZE + 1)
    if not distance_lengths:
        # A block without back-references still declares one unused distance code.
        distance_lengths = [0]

    out = BitBuffer()
    out.write_bits(1 if is_last_block else 0, 1)
    out.write_bits(0b10, 2)
    out.write_bits(len(literal_lengths) - 257, 5)
    out.write_bits(len(distance_lengths) - 1, 5)

    _write_code_lengths(out, literal_lengths + distance_lengths)

    literal_table = create_code_table(literal_lengths, _FIXED_ALPHABET_SIZE)
    distance_table = create_code_table(distance_lengths, DISTANCES_ALPHABET_SIZE)
    for match in matches:
        if match.length > 1:
            length_code = length_codes[match.length]
            distance_code = distance_codes[match.distance]
            _write_code(out, literal_table[length_code.index + 257])
            out.write_bits(length_code.extra_bits, length_code.extra_bits_count)
            _write_code(out, distance_table[distance_code.index])
            out.write_bits(distance_code.extra_bits, distance_code.extra_bits_count)
        else:
            _write_code(out, literal_table[match.literal])

    _write_code(out, literal_table[END_OF_BLOCK])
    return out.getvalue()