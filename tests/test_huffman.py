from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from pardeflate.huffman import (
    CanonicalCode,
    HuffmanTree,
    create_code_table,
    create_reverse_code_table,
)


def test_four_equal_symbols():
    assert HuffmanTree([0, 1, 2, 3], 4).code_lengths(4) == [2, 2, 2, 2]


def test_single_symbol_gets_length_one():
    assert HuffmanTree([5, 5, 5], 10).code_lengths(10) == [0, 0, 0, 0, 0, 1]


def test_empty_symbols_give_no_lengths():
    assert HuffmanTree([], 30).code_lengths(31) == []


@pytest.mark.parametrize("symbol", [4, -1])
def test_symbol_out_of_range(symbol):
    with pytest.raises(ValueError):
        HuffmanTree([0, symbol], 4)


def test_rfc_example_codes():
    table = create_code_table([3, 3, 3, 3, 3, 2, 4, 4], 8)
    assert [table[s].code for s in range(8)] == [0b010, 0b011, 0b100, 0b101, 0b110, 0b00, 0b1110, 0b1111]
    assert [table[s].length for s in range(8)] == [3, 3, 3, 3, 3, 2, 4, 4]


def test_single_length_table():
    assert create_code_table([1], 19) == {0: CanonicalCode(1, 1)}
    assert create_reverse_code_table([1], 19) == {CanonicalCode(1, 1): 0}


def test_zero_lengths_are_skipped():
    table = create_code_table([0, 2, 0, 2, 2, 2], 6)
    assert set(table) == {1, 3, 4, 5}


def test_length_above_limit_rejected():
    with pytest.raises(ValueError):
        create_code_table([16, 1], 2)


symbols_strategy = st.lists(st.integers(0, 29), min_size=2, max_size=200).filter(
    lambda s: len(set(s)) >= 2
)


@given(symbols_strategy)
def test_lengths_are_complete_prefix_code(symbols):
    lengths = HuffmanTree(symbols, 30).code_lengths(31)
    assert lengths[-1] != 0
    assert {s for s, length in enumerate(lengths) if length} == set(symbols)
    assert sum(Fraction(1, 2 ** length) for length in lengths if length) == 1


@given(symbols_strategy)
def test_reverse_table_is_prefix_free_and_inverts(symbols):
    lengths = HuffmanTree(symbols, 30).code_lengths(31)
    table = create_code_table(lengths, 30)
    reverse = create_reverse_code_table(lengths, 30)
    assert len(reverse) == len(table) == sum(1 for length in lengths if length)
    for symbol, code in table.items():
        masked = CanonicalCode(code.code & ((1 << code.length) - 1), code.length)
        assert reverse[masked] == symbol
    codes = list(reverse)
    for first in codes:
        for second in codes:
            if first is second or first.length > second.length:
                continue
            assert second.code >> (second.length - first.length) != first.code