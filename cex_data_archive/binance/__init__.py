"""Binance Vision historical archives.

Derives bucket prefixes, pages through the public S3 listing and extracts
the zip archives into a flat local directory.
"""

__all__ = [
    "keys",
    "listing",
    "extract",
    "fetch",
    "cli",
]
