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
from .fetch import BUCKET_NAME, download_hours, make_s3_client
from .inventory import find_downloaded_files
from .keys import DATA_TYPE, LAYOUTS, date_range_to_hours, hyperliquid_object_key


@dataclass
class RunConfig:
    command: str
    out_dir: Optional[Path] = None
    inventory_dir: Optional[Path] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    data_type: str = "l2-book"
    asset: str = "BTC"
    layout: str = "monthly"
    bucket: str = BUCKET_NAME
    request_payer: Optional[str] = None
    region: Optional[str] = None
    workers: int = DEFAULT_WORKERS
    report_dir: Optional[Path] = None
    report_db: Optional[Path] = None
    dry_run: bool = False
    debug: bool = False


def run_inventory(cfg: RunConfig) -> int:
    directory = cfg.inventory_dir or cfg.out_dir
    if directory is None:
        print("[ERROR] --dir is required for inventory", file=sys.stderr)
        return 2
    df = find_downloaded_files(directory)
    if df.empty:
        print(f"[INFO] No downloaded hours under {directory}")
        return 0
    for _, row in df.iterrows():
        print(f"{row['date_time']}  {row['path']}")
    print(f"[INFO] {len(df)} files, {df['date_time'].min()}..{df['date_time'].max()}")
    return 0


def run_once(cfg: RunConfig) -> int:
    if cfg.command == "inventory":
        return run_inventory(cfg)

    if cfg.out_dir is None:
        print("[ERROR] --out is required for download", file=sys.stderr)
        return 2
    if cfg.start_date is None or cfg.end_date is None:
        print("[ERROR] --start-date and --end-date are required for download", file=sys.stderr)
        return 2
    hours = date_range_to_hours(cfg.start_date, cfg.end_date)
    if not hours:
        print("[ERROR] Empty date range. Check --start-date/--end-date.", file=sys.stderr)
        return 2

    if cfg.dry_run:
        for dt in hours:
            print(hyperliquid_object_key(dt, cfg.data_type, cfg.asset))
        print(f"[DRY-RUN] {len(hours)} objects in {hours[0]}..{hours[-1]}")
        return 0

    with FetchRuntime(max_workers=cfg.workers) as runtime:
        client = make_s3_client(runtime.credentials, cfg.region)
        results = download_hours(
            runtime,
            client,
            hours,
            cfg.data_type,
            cfg.asset,
            cfg.out_dir,
            layout=cfg.layout,
            bucket_name=cfg.bucket,
            request_payer=cfg.request_payer,
        )

    ok, failed = summarize(results)
    print(f"[INFO] Done. downloaded={ok}, failed={failed}, out={cfg.out_dir}")
    report_results(results, cfg.report_dir, cfg.report_db, f"hyperliquid_{cfg.asset.lower()}_{cfg.data_type}")
    return 0 if failed == 0 else 1


def parse_args(argv: Optional[List[str]] = None) -> RunConfig:
    p = argparse.ArgumentParser(description="Download Hyperliquid hourly market data archives from S3")
    p.add_argument("command", choices=["download", "inventory"], help="Download hours or list local files")
    p.add_argument("--out", type=Path, default=None, help="Base directory for decompressed files (download)")
    p.add_argument("--dir", type=Path, default=None, help="Directory to scan for downloaded hours (inventory)")
    p.add_argument("--start-date", default=None, help="Start date YYYY-MM-DD")
    p.add_argument("--end-date", default=None, help="End date YYYY-MM-DD (exclusive)")
    p.add_argument("--data-type", default="l2-book", choices=sorted(DATA_TYPE), help="Archive data type")
    p.add_argument("--asset", default="BTC", help="Asset, e.g. BTC")
    p.add_argument("--layout", default="monthly", choices=LAYOUTS, help="Local directory layout")
    p.add_argument("--bucket", default=BUCKET_NAME, help="S3 bucket name")
    p.add_argument("--request-payer", default=None, help="RequestPayer value, e.g. requester")
    p.add_argument("--region", default=None, help="AWS region for the S3 client")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Download worker threads")
    p.add_argument("--report-dir", type=Path, default=None, help="Write a CSV run report under this directory")
    p.add_argument("--report-db", type=Path, default=None, help="Append per-item results to this DuckDB file")
    p.add_argument("--dry-run", action="store_true", help="Only list object keys; do not download")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    args = p.parse_args(argv)

    return RunConfig(
        command=args.command,
        out_dir=args.out,
        inventory_dir=args.dir,
        start_date=args.start_date,
        end_date=args.end_date,
        data_type=args.data_type,
        asset=args.asset,
        layout=args.layout,
        bucket=args.bucket,
        request_payer=args.request_payer,
        region=args.region,
        workers=args.workers,
        report_dir=args.report_dir,
        report_db=args.report_db,
        dry_run=args.dry_run,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    try:
        return run_once(cfg)
    except (InvalidKeyError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    except Exception as e:  # surface clear error message
        print(f"[ERROR] {e}", file=sys.stderr)
        if cfg.debug:
            raise
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
