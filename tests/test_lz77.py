import pytest
from hypothesis import given, settings, strategies as st

from pardeflate.lz77 import Match, compress, decompress


@pytest.mark.parametrize("use_hash", [True, False])
def test_empty_input(use_hash):
    assert compress(b"", use_hash) == []
    assert decompress([]) == b""


@pytest.mark.parametrize("use_hash", [True, False])
def test_short_input_is_literals(use_hash):
    assert compress(b"ab", use_hash) == [Match(ord("a"), 0, 1), Match(ord("b"), 0, 1)]


@pytest.mark.parametrize("use_hash", [True, False])
def test_repeated_pattern(use_hash):
    matches = compress(b"abcabcabc", use_hash)
    assert matches[:3] == [Match(ord(c), 0, 1) for c in "abc"]
    assert matches[3] == Match(0, 3, 6)
    assert len(matches) == 4


def test_exhaustive_prefers_longest_match():
    data = b"abcde" + b"xabc" + b"y" + b"abcde"
    assert Match(0, 10, 5) in compress(data, False)
    assert Match(0, 4, 3) in compress(data, True)
    assert decompress(compress(data, False)) == data
    assert decompress(compress(data, True)) == data


@pytest.mark.parametrize("use_hash", [True, False])
def test_match_length_limit(use_hash):
    data = b"a" * 1000
    matches = compress(data, use_hash)
    assert max(m.length for m in matches) == 258
    assert decompress(matches) == data


def test_decompress_rejects_distance_beyond_output():
    with pytest.raises(ValueError):
        decompress([Match(ord("a"), 0, 1), Match(0, 5, 3)])


def test_decompress_overlapping_copy():
    assert decompress([Match(ord("x"), 0, 1), Match(0, 1, 4)]) == b"xxxxx"


data_strategy = st.one_of(
    st.binary(max_size=300),
    st.lists(st.sampled_from(b"ab"), max_size=300).map(bytes),
)


@settings(max_examples=60)
@given(data_strategy, st.booleans())
def test_round_trip(data, use_hash):
    matches = compress(data, use_hash)
    assert decompress(matches) == data
    for m in matches:
        assert m.length == 1 or 3 <= m.length <= 258
        assert m.length == 1 or 1 <= m.distance <= 32768