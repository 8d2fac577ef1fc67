from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..errors import InvalidKeyError
from ..persistence import report_results
from ..results import summarize
from ..runtime import DEFAULT_WORKERS, FetchRuntime
from .fetch import download_keys
from .keys import (
    ASSET_KIND,
    COIN_KIND,
    GRANULARITY,
    MARKET_DATA_KIND,
    TIME_FRAME,
    binance_data_path,
    download_url,
)
from .listing import list_download_keys


@dataclass
class RunConfig:
    command: str
    asset: str
    coin: str
    time_frame: str
    granularity: str
    market: str
    ticker: str
    out_dir: Path
    ignore_checksums: bool = True
    last: Optional[int] = None
    workers: int = DEFAULT_WORKERS
    timeout: float = 120.0
    report_dir: Optional[Path] = None
    report_db: Optional[Path] = None
    dry_run: bool = False
    debug: bool = False


def run_once(cfg: RunConfig) -> int:
    prefix = binance_data_path(cfg.asset, cfg.coin, cfg.time_frame, cfg.granularity, cfg.market, cfg.ticker)
    keys = list_download_keys(prefix, cfg.ignore_checksums, timeout=cfg.timeout)
    if cfg.last is not None:
        keys = keys[-cfg.last:] if cfg.last > 0 else []
    if cfg.debug:
        print(f"[INFO] prefix={prefix} keys={len(keys)}")

    if cfg.command == "list" or cfg.dry_run:
        for k in keys:
            print(download_url(k))
        if cfg.dry_run and cfg.command == "download":
            print(f"[DRY-RUN] Would download {len(keys)} archives into {cfg.out_dir}")
        return 0

    if not keys:
        print(f"[ERROR] No archives found under {prefix}", file=sys.stderr)
        return 2

    with FetchRuntime(max_workers=cfg.workers) as runtime:
        results = download_keys(runtime, keys, cfg.out_dir, timeout=cfg.timeout)

    ok, failed = summarize(results)
    print(f"[INFO] Done. downloaded={ok}, failed={failed}, out={cfg.out_dir}")
    report_results(results, cfg.report_dir, cfg.report_db, f"binance_{cfg.ticker.lower()}")
    return 0 if failed == 0 else 1


def parse_args(argv: Optional[List[str]] = None) -> RunConfig:
    p = argparse.ArgumentParser(description="List and download Binance Vision archives")
    p.add_argument("command", choices=["list", "download"], help="List archive URLs or download them")
    p.add_argument("--asset", default="futures", choices=sorted(ASSET_KIND), help="Asset kind")
    p.add_argument("--coin", default="um", choices=sorted(COIN_KIND), help="Coin kind (um/cm)")
    p.add_argument("--time-frame", default="daily", choices=sorted(TIME_FRAME), help="daily or monthly files")
    p.add_argument("--granularity", default="none", choices=sorted(GRANULARITY), help="Aggregation interval; none to omit")
    p.add_argument("--market", default="trades", choices=sorted(MARKET_DATA_KIND), help="Market data kind")
    p.add_argument("--ticker", required=True, help="Ticker, e.g. BTCUSD_PERP")
    p.add_argument("--out", type=Path, default=Path.cwd(), help="Directory to extract archives into")
    p.add_argument("--keep-checksums", action="store_true", help="Include .CHECKSUM files in the listing")
    p.add_argument("--last", type=int, default=None, help="Only take the last N archives of the listing")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Download worker threads")
    p.add_argument("--timeout", type=float, default=120.0, help="Network timeout per request in seconds")
    p.add_argument("--report-dir", type=Path, default=None, help="Write a CSV run report under this directory")
    p.add_argument("--report-db", type=Path, default=None, help="Append per-item results to this DuckDB file")
    p.add_argument("--dry-run", action="store_true", help="Only list URLs; do not download")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    args = p.parse_args(argv)

    return RunConfig(
        command=args.command,
        asset=args.asset,
        coin=args.coin,
        time_frame=args.time_frame,
        granularity=args.granularity,
        market=args.market,
        ticker=args.ticker,
        out_dir=args.out,
        ignore_checksums=not args.keep_checksums,
        last=args.last,
        workers=args.workers,
        timeout=args.timeout,
        report_dir=args.report_dir,
        report_db=args.report_db,
        dry_run=args.dry_run,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    try:
        return run_once(cfg)
    except InvalidKeyError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    except Exception as e:  # surface clear error message
        print(f"[ERROR] {e}", file=sys.stderr)
        if cfg.debug:
            raise
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
