# pardeflate

`pardeflate` cuts data into fixed-size blocks and compresses each block on its
own: LZ77 matching followed by fixed or dynamic Huffman coding, or a stored
block when neither helps. Blocks are compressed and decompressed on worker
threads. Each block is written with its compressed size and a CRC-32C checksum
of its uncompressed contents, so decompression checks every block.

It is pure Python with no runtime dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Usage

```python
from pardeflate.deflator import CompressionLevel
from pardeflate.parallel import compress, decompress

data = b"an example payload " * 1000

packed = compress(data, CompressionLevel.LEVEL_3)
assert decompress(packed) == data
```

`compress` raises `ValueError` when given empty data. The level defaults to
`CompressionLevel.LEVEL_3`.

### Compression levels

`CompressionLevel` fixes two things: the block size (`level.block_size`) and
how LZ77 looks for repeated data (`level.uses_hash_table`).

| Level     | Block size | Match search                                  |
|-----------|------------|-----------------------------------------------|
| `LEVEL_1` | 8 KiB      | most recent position with the same 3 bytes    |
| `LEVEL_2` | 16 KiB     | most recent position with the same 3 bytes    |
| `LEVEL_3` | 32 KiB     | most recent position with the same 3 bytes    |
| `LEVEL_4` | 8 KiB      | longest match in the 32 KiB window            |
| `LEVEL_5` | 16 KiB     | longest match in the 32 KiB window            |
| `LEVEL_6` | 32 KiB     | longest match in the 32 KiB window            |

The hash-table levels are faster; the window-search levels usually find
longer matches.

`split_blocks(data, level)` in `pardeflate.parallel` returns the blocks the
input is cut into for a given level.

### Container format

The output of `compress` is a plain sequence of records, one per block:

| Bytes | Contents                                          |
|-------|---------------------------------------------------|
| 2     | size of the compressed block, little-endian       |
| 4     | CRC-32C of the uncompressed block, big-endian     |
| n     | the compressed block                              |

`decompress` reads these records, inflates the blocks concurrently, and
checks every block against its checksum. A block whose checksum does not
match raises `pardeflate.parallel.ChecksumError`; a truncated record raises
`ValueError`.

### Single blocks

The building blocks can be used directly:

```python
from pardeflate.deflator import CompressionLevel, deflate_block, stored_block
from pardeflate.inflator import Inflator, inflate_block

block = deflate_block(b"hello hello hello", True, CompressionLevel.LEVEL_1)
assert inflate_block(block) == b"hello hello hello"

inflator = Inflator()
assert inflator(stored_block(b"raw", True)) == b"raw"
```

`deflate_block` returns the smaller of the fixed-code and dynamic-code
encodings (fixed on a tie), or a stored block when both are larger than
the data plus its 5-byte header. After a Huffman-coded block, an `Inflator`
keeps `is_last_block` from the block header and `block_size`, the index of
the byte where reading stopped.

A block that cannot be decoded raises `pardeflate.inflator.InflateError`
(a subclass of `ValueError`).

### Checksums

```python
from pardeflate.crc32 import crc32

crc32(b"123456789")  # 0xE3069283, the CRC-32C check value
```

## Modules

- `pardeflate.bitbuffer`: `BitBuffer`, a least-significant-bit-first bit reader and writer.
- `pardeflate.lz77`: LZ77 matching (`compress`, `decompress`, `Match`).
- `pardeflate.huffman`: `HuffmanTree` code lengths and canonical code tables
  (`create_code_table`, `create_reverse_code_table`, `CanonicalCode`).
- `pardeflate.fixed_encoder`: the fixed code tables and `encode_fixed`.
- `pardeflate.dynamic_encoder`: `encode_dynamic` and `encode_code_length_runs`.
- `pardeflate.fixed_decoder`, `pardeflate.dynamic_decoder`: `FixedHuffmanDecoder`
  and `DynamicHuffmanDecoder`, which turn a block body back into LZ77 matches.
- `pardeflate.deflator`: `CompressionLevel`, `deflate_block`, `stored_block`.
- `pardeflate.inflator`: `Inflator`, `inflate_block`, `InflateError`.
- `pardeflate.crc32`: CRC-32C.
- `pardeflate.parallel`: the block-parallel container (`compress`, `decompress`,
  `split_blocks`, `ChecksumError`).

## What it does not do

- There is no command-line tool; the package is used from Python code.
- It works on whole byte strings in memory; it does not stream files.
- The container is this package's own format. It is not a zlib, gzip or zip
  stream, and stored blocks use their own header byte, so output is meant to be
  read back with `pardeflate.parallel.decompress`.