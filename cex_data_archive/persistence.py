from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .db import append_results, ensure_table, failed_items, run_stats
from .results import REPORT_COLUMNS, ItemResult, results_to_dataframe


@dataclass(frozen=True)
class PersistConfig:
    root_dir: Path
    dataset_slug: str

    def dataset_dir(self) -> Path:
        d = self.root_dir / self.dataset_slug
        d.mkdir(parents=True, exist_ok=True)
        return d


def now_utc_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")


def write_run_report(cfg: PersistConfig, run_id: str, df: pd.DataFrame) -> Path:
    out = cfg.dataset_dir() / f"{run_id}_download_report.csv"
    # Ensure column order
    df.loc[:, REPORT_COLUMNS].to_csv(out, index=False)
    return out


def report_results(
    results: List[ItemResult],
    report_dir: Optional[Path],
    report_db: Optional[Path],
    slug: str,
) -> str:
    """Persist a run's item results as a CSV report and/or DuckDB rows. Returns the run id."""
    run_id = now_utc_run_id()
    df = results_to_dataframe(results, run_id)
    if report_dir is not None:
        path = write_run_report(PersistConfig(report_dir, slug), run_id, df)
        print(f"[INFO] report={path}")
    if report_db is not None:
        ensure_table(report_db)
        n = append_results(report_db, df)
        print(f"[INFO] logged {n} rows to {report_db} run_id={run_id}")
        stats = run_stats(report_db, run_id)
        if stats is not None:
            print(f"[INFO] run {run_id}: ok={stats[0]} failed={stats[1]}")
        for item in failed_items(report_db, run_id):
            print(f"[WARN] failed: {item}")
    return run_id
