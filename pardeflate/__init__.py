"""Block-parallel DEFLATE-style compression with per-block CRC-32C checksums."""

__version__ = "0.1.0"