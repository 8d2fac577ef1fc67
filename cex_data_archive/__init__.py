"""CEX Data Archive - Historical market-data archive downloaders.

Provides:
- Binance Vision bucket listing and zip archive extraction
- Hyperliquid S3 archive download with LZ4 frame decompression
- Thread-pool runtime with per-item results, CSV and DuckDB run reports
"""

__version__ = "0.1.0"

# Expose main submodules
from . import binance
from . import hyperliquid

__all__ = ["binance", "hyperliquid", "__version__"]
