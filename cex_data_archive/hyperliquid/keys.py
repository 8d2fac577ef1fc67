from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Dict, List, Union

from ..errors import validate_key


# Reference: https://hyperliquid.gitbook.io/hyperliquid-docs/for-developers/api/websocket/subscriptions
DATA_TYPE = {
    "all-mids": "allMids",
    "notification": "notification",
    "web-data2": "webData2",
    "candle": "candle",
    "l2-book": "l2Book",
    "trades": "trades",
    "order-updates": "orderUpdates",
    "user-events": "userEvents",
    "user-fills": "userFills",
    "user-fundings": "userFundings",
    "user-non-funding-ledger-updates": "userNonFundingLedgerUpdates",
}

LAYOUTS = ("monthly", "flat")

DateLike = Union[str, date, datetime]


def _start_of_day(d: DateLike) -> datetime:
    if isinstance(d, str):
        d = date.fromisoformat(d)
    if isinstance(d, datetime):
        return d.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime(d.year, d.month, d.day)


def date_range_to_hours(start: DateLike, end: DateLike) -> List[datetime]:
    """Hourly timestamps after the start of `start` up to the last hour before `end`.

    Both bounds are truncated to the start of their day. Note the first hour
    (00:00 of `start`) is not included.
    """
    d1 = _start_of_day(start)
    d2 = _start_of_day(end)
    delta = int((d2 - d1) // timedelta(hours=1))
    return [d1 + timedelta(hours=h) for h in range(1, delta)]


def date_time_components(dt: datetime) -> Dict[str, object]:
    return {"date": dt.strftime("%Y%m%d"), "hour": dt.hour, "minute": dt.minute}


def hyperliquid_object_key(dt: datetime, data_type: str, asset: str) -> str:
    """e.g. market_data/20240102/5/l2Book/BTC.lz4 (hour is not zero padded)."""
    c = date_time_components(dt)
    type_name = validate_key("data_type", DATA_TYPE, data_type)
    return "/".join(["market_data", str(c["date"]), str(c["hour"]), type_name, f"{asset}.lz4"])


def month_dir_name(dt: datetime, asset: str) -> str:
    return f"{dt.strftime('%Y%m')}-{asset}"


def local_output_path(base_dir: Path, dt: datetime, asset: str, layout: str = "monthly") -> Path:
    """Destination for one decompressed hour.

    monthly: {base}/{yyyyMM}-{asset}/{yyyyMMdd}/{asset}-{hour}
    flat:    {base}/{yyyyMMdd}/{asset}-{hour}
    """
    c = date_time_components(dt)
    file_name = f"{asset}-{c['hour']}"
    if layout == "monthly":
        return Path(base_dir) / month_dir_name(dt, asset) / str(c["date"]) / file_name
    if layout == "flat":
        return Path(base_dir) / str(c["date"]) / file_name
    raise ValueError(f"unknown layout {layout!r}, expected one of {LAYOUTS}")
