"""Hyperliquid S3 archive (hourly LZ4-compressed market data).

Maps hours to object keys, downloads through boto3 and writes the
decompressed text under a per-asset date tree.
"""

__all__ = [
    "keys",
    "decompress",
    "fetch",
    "inventory",
    "cli",
]
