from __future__ import annotations

from ..errors import validate_key


DATA_URL = "https://data.binance.vision"

ASSET_KIND = {
    "futures": "futures",
    "option": "option",
    "spot": "spot",
}

COIN_KIND = {
    "um": "um",
    "cm": "cm",
}

TIME_FRAME = {
    "daily": "daily",
    "monthly": "monthly",
}

GRANULARITY = {
    "none": "",
    "2m": "2m",
    "4m": "4m",
    "6m": "6m",
    "16m": "16m",
    "31m": "31m",
    "2h": "2h",
    "3h": "3h",
    "5h": "5h",
    "7h": "7h",
    "9h": "9h",
    "13h": "13h",
    "2d": "2d",
    "4d": "4d",
    "2w": "2w",
}

MARKET_DATA_KIND = {
    "agg-trades": "aggTrades",
    "book-depth": "bookDepth",
    "book-ticker": "bookTicker",
    "index-price-klines": "indexPriceKlines",
    "klines": "klines",
    "liquidation-snapshot": "liquidationSnapshot",
    "mark-price-klines": "markPriceKlines",
    "metrics": "metrics",
    "premium-index-klines": "premiumIndexKlines",
    "trades": "trades",
}


def binance_data_path(asset: str, coin: str, time_frame: str, granularity: str, market: str, ticker: str) -> str:
    """Build the bucket prefix for one data series, e.g. data/futures/cm/daily/trades/BTCUSD_PERP/.

    Layout reference:
    https://www.binance.com/en/support/faq/how-to-download-historical-market-data-on-binance-5810ae42176b4770b880ce1f14932262
    """
    parts = [
        "data",
        validate_key("asset_kind", ASSET_KIND, asset),
        validate_key("coin_kind", COIN_KIND, coin),
        validate_key("time_frame", TIME_FRAME, time_frame),
        validate_key("granularity", GRANULARITY, granularity),
        validate_key("market_data_kind", MARKET_DATA_KIND, market),
        ticker,
        "",  # trailing slash
    ]
    return "/".join(parts).replace("//", "/")


def download_url(suffix: str) -> str:
    return f"{DATA_URL}/{suffix}"
