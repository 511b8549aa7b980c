"""Huffman code lengths and canonical code tables."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

MAX_BITS = 15


@dataclass
class _Node:
    symbol: int = -1
    frequency: int = 0
    left: int = -1
    right: int = -1
    code_length: int = 0


class HuffmanTree:
    """Tree over the symbols present in a sequence, merged in creation order."""

    def __init__(self, symbols, alphabet_size):
        frequencies = [0] * alphabet_size
        for symbol in symbols:
            if not 0 <= symbol < alphabet_size:
                raise ValueError(f"symbol {symbol} out of range {alphabet_size}")
            frequencies[symbol] += 1

        self._nodes = [
            _Node(symbol=symbol, frequency=count)
            for symbol, count in enumerate(frequencies)
            if count > 0
        ]
        self._build()
        self._assign_lengths(len(self._nodes) - 1)
        self._nodes.sort(key=lambda node: (node.code_length, node.symbol))

    def _build(self):
        # Nodes are taken lowest index first; new parents always get the
        # highest index, so the pending nodes form a plain queue.
        pending = deque(range(len(self._nodes)))
        while len(pending) > 1:
            left = pending.popleft()
            right = pending.popleft()
            self._nodes.append(
                _Node(
                    frequency=self._nodes[left].frequency + self._nodes[right].frequency,
                    left=left,
                    right=right,
                )
            )
            pending.append(len(self._nodes) - 1)

    def _assign_lengths(self, root):
        if root < 0:
            return
        stack = [(root, 0)]
        while stack:
            index, depth = stack.pop()
            node = self._nodes[index]
            if node.frequency and node.left == -1 and node.right == -1:
                node.code_length = depth
                continue
            if node.right != -1:
                stack.append((node.right, depth + 1))
            if node.left != -1:
                stack.append((node.left, depth + 1))

    def code_lengths(self, size):
        """Code length per symbol, without trailing zero entries."""
        lengths = [0] * size
        if len(self._nodes) == 1:
            lengths[self._nodes[0].symbol] = 1
        else:
            for node in self._nodes:
                if node.symbol > -1:
                    lengths[node.symbol] = node.code_length
        while lengths and lengths[-1] == 0:
            lengths.pop()
        return lengths


@dataclass(frozen=True)
class CanonicalCode:
    """A Huffman code value, most significant bit first, and its bit length."""

    code: int
    length: int


def create_code_table(code_lengths, table_size):
    """Map each symbol with a non-zero length to its canonical code.

    ``table_size`` is the alphabet size the lengths belong to.
    """
    lengths = list(code_lengths)
    if len(lengths) == 1:
        return {0: CanonicalCode(1, 1)}

    counts = [0] * (MAX_BITS + 1)
    for length in lengths:
        if not 0 <= length <= MAX_BITS:
            raise ValueError(f"code length {length} exceeds {MAX_BITS} bits")
        counts[length] += 1

    next_code = [0] * (MAX_BITS + 1)
    code = 0
    for bits in range(1, MAX_BITS + 1):
        code = ((code + counts[bits - 1]) << 1) & 0xFFFF
        next_code[bits] = code

    table = {}
    for symbol, length in enumerate(lengths):
        if length:
            table[symbol] = CanonicalCode(next_code[length], length)
            next_code[length] = (next_code[length] + 1) & 0xFFFF
    return table


def create_reverse_code_table(code_lengths, table_size):
    """Map each canonical code, cut to its length, back to its symbol."""
    return {
        CanonicalCode(code.code & ((1 << code.length) - 1), code.length): symbol
        for symbol, code in create_code_table(code_lengths, table_size).items()
    }