"""LZ77 matching with a 32 KiB window and deflate's length limit."""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from dataclasses import dataclass

MAX_MATCH_LENGTH = 258
WINDOW_SIZE = 32 * 1024


@dataclass(frozen=True)
class Match:
    """A literal byte (length 1) or a back-reference of ``length`` bytes."""

    literal: int
    distance: int
    length: int


def _common_prefix(data, earlier, position):
    limit = min(MAX_MATCH_LENGTH, len(data) - position)
    length = 0
    while length < limit and data[earlier + length] == data[position + length]:
        length += 1
    return length


def _compress_hashed(data):
    """Match each position against the most recent one with the same three bytes."""
    table = {}
    position = 0
    while position < len(data):
        if position + 2 >= len(data):
            yield Match(data[position], 0, 1)
            position += 1
            continue
        key = data[position:position + 3]
        length = 0
        distance = 0
        previous = table.get(key)
        if previous is not None:
            found = _common_prefix(data, previous, position)
            if found > 2:
                length, distance = found, position - previous
        table[key] = position
        if length:
            yield Match(0, distance, length)
            position += length
        else:
            yield Match(data[position], 0, 1)
            position += 1


def _compress_exhaustive(data):
    """Find the longest match in the window, preferring the nearest on ties."""
    index = defaultdict(list)
    for start in range(len(data) - 2):
        index[data[start:start + 3]].append(start)

    position = 0
    while position < len(data):
        best_length = 0
        best_distance = 0
        if position + 2 < len(data):
            candidates = index[data[position:position + 3]]
            lowest = position - min(WINDOW_SIZE, position)
            for earlier in reversed(candidates[:bisect_left(candidates, position)]):
                if earlier < lowest:
                    break
                found = _common_prefix(data, earlier, position)
                if found > best_length and found > 2:
                    best_length, best_distance = found, position - earlier
                    if found == MAX_MATCH_LENGTH:
                        break
        if best_length:
            yield Match(0, best_distance, best_length)
            position += best_length
        else:
            yield Match(data[position], 0, 1)
            position += 1


def compress(data, use_hash_table):
    """Split ``data`` into literals and back-references."""
    data = bytes(data)
    if use_hash_table:
        return list(_compress_hashed(data))
    return list(_compress_exhaustive(data))


def decompress(matches):
    """Rebuild the bytes described by a sequence of matches."""
    out = bytearray()
    for match in matches:
        if match.length == 1:
            out.append(match.literal)
            continue
        if match.length == 0:
            continue
        if not 0 < match.distance <= len(out):
            raise ValueError(
                f"distance {match.distance} outside of {len(out)} decoded bytes"
            )
        offset = len(out) - match.distance
        if match.distance >= match.length:
            out += out[offset:offset + match.length]
        else:
            for step in range(match.length):
                out.append(out[offset + step])
    return bytes(out)