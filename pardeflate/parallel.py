"""Framed multi-block compression with blocks processed on worker threads.

Each frame is a two-byte little-endian compressed size, the big-endian
CRC-32C of the uncompressed block, and the compressed block itself.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor

from .crc32 import crc32
from .deflator import CompressionLevel, deflate_block
from .inflator import inflate_block

_FRAME_HEADER_SIZE = 6


class ChecksumError(ValueError):
    """Raised when a decompressed block does not match its stored checksum."""


def _worker_count():
    return os.cpu_count() or 1


def split_blocks(data, level=CompressionLevel.LEVEL_3):
    """Cut ``data`` into consecutive blocks of the level's block size."""
    size = CompressionLevel(level).block_size
    data = bytes(data)
    return [data[start:start + size] for start in range(0, len(data), size)]


def compress(data, level=CompressionLevel.LEVEL_3):
    """Compress ``data`` block by block and join the framed results."""
    level = CompressionLevel(level)
    blocks = split_blocks(data, level)
    if not blocks:
        raise ValueError("no data to compress")
    last = len(blocks) - 1

    def job(item):
        index, block = item
        return deflate_block(block, index == last, level)

    with ThreadPoolExecutor(max_workers=_worker_count()) as pool:
        compressed = list(pool.map(job, enumerate(blocks)))

    out = bytearray()
    for block, payload in zip(blocks, compressed):
        out += (len(payload) & 0xFFFF).to_bytes(2, "little")
        out += crc32(block).to_bytes(4, "big")
        out += payload
    return bytes(out)


def _frames(data):
    position = 0
    while position + _FRAME_HEADER_SIZE < len(data):
        length = int.from_bytes(data[position:position + 2], "little")
        checksum = int.from_bytes(data[position + 2:position + 6], "big")
        start = position + _FRAME_HEADER_SIZE
        payload = data[start:start + length]
        if len(payload) != length:
            raise ValueError(
                f"truncated frame at offset {position}: "
                f"expected {length} bytes, found {len(payload)}"
            )
        yield checksum, payload
        position = start + length


def decompress(data):
    """Decompress framed blocks and verify each block's checksum."""
    frames = list(_frames(bytes(data)))
    with ThreadPoolExecutor(max_workers=_worker_count()) as pool:
        blocks = list(pool.map(inflate_block, (payload for _, payload in frames)))

    for index, ((expected, _), block) in enumerate(zip(frames, blocks)):
        if crc32(block) != expected:
            raise ChecksumError(f"hash of block {index} is different")
    return b"".join(blocks)