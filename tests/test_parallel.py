import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pardeflate.crc32 import crc32
from pardeflate.deflator import CompressionLevel
from pardeflate.inflator import inflate_block
from pardeflate.parallel import ChecksumError, compress, decompress, split_blocks


def _text(size, seed=5):
    rng = random.Random(seed)
    words = [b"north", b"south", b"east", b"west", b"river", b"stone", b"tree", b"\n"]
    out = bytearray()
    while len(out) < size:
        out += rng.choice(words) + b" "
    return bytes(out[:size])


def test_split_blocks_covers_data():
    data = _text(20000)
    blocks = split_blocks(data, CompressionLevel.LEVEL_1)
    size = CompressionLevel.LEVEL_1.block_size
    assert b"".join(blocks) == data
    assert all(len(block) == size for block in blocks[:-1])
    assert 0 < len(blocks[-1]) <= size


def test_split_blocks_empty():
    assert split_blocks(b"", CompressionLevel.LEVEL_2) == []


@pytest.mark.parametrize("level", list(CompressionLevel))
def test_round_trip_every_level(level):
    data = _text(20000)
    assert decompress(compress(data, level)) == data


def test_frame_layout():
    data = _text(20000)
    out = compress(data, CompressionLevel.LEVEL_1)
    first = data[:CompressionLevel.LEVEL_1.block_size]
    size = int.from_bytes(out[0:2], "little")
    assert int.from_bytes(out[2:6], "big") == crc32(first)
    assert inflate_block(out[6:6 + size]) == first


def test_default_level_round_trip():
    data = _text(5000, seed=9)
    assert decompress(compress(data)) == data


def test_corrupted_checksum_detected():
    out = bytearray(compress(_text(20000), CompressionLevel.LEVEL_1))
    out[2] ^= 0xFF
    with pytest.raises(ChecksumError, match="block 0"):
        decompress(bytes(out))


def test_truncated_frame_rejected():
    out = compress(_text(3000), CompressionLevel.LEVEL_1)
    with pytest.raises(ValueError, match="truncated"):
        decompress(out[:-3])


def test_empty_input():
    assert decompress(b"") == b""
    with pytest.raises(ValueError):
        compress(b"", CompressionLevel.LEVEL_1)


@settings(max_examples=25, deadline=None)
@given(
    st.binary(min_size=1, max_size=3000),
    st.sampled_from([CompressionLevel.LEVEL_1, CompressionLevel.LEVEL_4]),
)
def test_round_trip_property(data, level):
    assert decompress(compress(data, level)) == data