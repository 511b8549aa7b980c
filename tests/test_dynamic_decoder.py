import zlib

import pytest
from hypothesis import given, settings, strategies as st

from pardeflate.bitbuffer import BitBuffer
from pardeflate.dynamic_decoder import DynamicHuffmanDecoder
from pardeflate.dynamic_encoder import encode_dynamic
from pardeflate.lz77 import Match, compress, decompress


def _open_block(data):
    bits = BitBuffer(data)
    header = (bits.read_bit(), bits.read_bits(2))
    return header, DynamicHuffmanDecoder(bits)


def _raw_deflate(data):
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def test_round_trip_of_explicit_matches():
    matches = [
        Match(ord("a"), 0, 1),
        Match(ord("b"), 0, 1),
        Match(0, 2, 10),
        Match(0, 1, 258),
        Match(0, 1000, 100),
        Match(0, 32768, 227),
        Match(ord("z"), 0, 1),
    ]
    header, decoder = _open_block(encode_dynamic(matches, True))
    assert header == (1, 2)
    assert decoder.decode() == matches


def test_single_literal_round_trip():
    matches = [Match(65, 0, 1)]
    header, decoder = _open_block(encode_dynamic(matches, False))
    assert header == (0, 2)
    assert decoder.decode() == matches


def test_decodes_zlib_dynamic_block():
    text = b"".join(
        b"line %d: the quick brown fox jumps over the lazy dog\n" % number
        for number in range(200)
    )
    header, decoder = _open_block(_raw_deflate(text))
    assert header == (1, 2)
    assert decompress(decoder.decode()) == text


def test_block_size_points_into_last_byte():
    data = encode_dynamic(compress(b"abracadabra abracadabra abracadabra", True), True)
    _, decoder = _open_block(data)
    decoder.decode()
    assert len(data) - 1 <= decoder.block_size() <= len(data)


def test_empty_code_length_code_raises():
    out = BitBuffer()
    out.write_bits(0, 5)
    out.write_bits(0, 5)
    out.write_bits(0, 4)
    for _ in range(4):
        out.write_bits(0, 3)
    out.write_bits(0, 16)
    decoder = DynamicHuffmanDecoder(BitBuffer(out.getvalue()))
    with pytest.raises(ValueError):
        decoder.decode()


@settings(max_examples=50, deadline=None)
@given(st.binary(min_size=1, max_size=300), st.booleans())
def test_round_trip_through_encoder(data, use_hash_table):
    matches = compress(data, use_hash_table)
    _, decoder = _open_block(encode_dynamic(matches, True))
    decoded = decoder.decode()
    assert decoded == matches
    assert decompress(decoded) == data