from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import duckdb  # type: ignore
import pandas as pd


TABLE_NAME = "download_log"


def _connect(db_path: Path):
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(db_path))


def ensure_table(db_path: Path) -> None:
    con = _connect(db_path)
    try:
        con.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
              run_id VARCHAR,
              item VARCHAR,
              destination VARCHAR,
              ok BOOLEAN,
              error VARCHAR,
              created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
    finally:
        con.close()


def append_results(db_path: Path, df: pd.DataFrame) -> int:
    """Append report rows (see results.results_to_dataframe). Returns rows written."""
    if df.empty:
        return 0
    rows = [
        [
            str(r["run_id"]),
            str(r["item"]),
            str(r["destination"]),
            bool(r["ok"]),
            None if pd.isna(r["error"]) else str(r["error"]),
        ]
        for _, r in df.iterrows()
    ]
    con = _connect(db_path)
    try:
        con.executemany(
            f"INSERT INTO {TABLE_NAME} (run_id, item, destination, ok, error) VALUES (?, ?, ?, ?, ?)",
            rows,
        )
    finally:
        con.close()
    return len(rows)


def run_stats(db_path: Path, run_id: str) -> Optional[Tuple[int, int]]:
    """Return (ok, failed) counts for a run, or None if the run has no rows."""
    con = _connect(db_path)
    try:
        res = con.execute(
            f"SELECT COUNT(*) FILTER (WHERE ok), COUNT(*) FILTER (WHERE NOT ok), COUNT(*) "
            f"FROM {TABLE_NAME} WHERE run_id = ?",
            [run_id],
        ).fetchone()
        if res is None or int(res[2]) == 0:
            return None
        return int(res[0]), int(res[1])
    finally:
        con.close()


def failed_items(db_path: Path, run_id: str) -> List[str]:
    con = _connect(db_path)
    try:
        rows = con.execute(
            f"SELECT item FROM {TABLE_NAME} WHERE run_id = ? AND NOT ok ORDER BY item",
            [run_id],
        ).fetchall()
        return [r[0] for r in rows]
    finally:
        con.close()
