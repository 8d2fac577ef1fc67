from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pandas as pd


REPORT_COLUMNS = ["run_id", "item", "destination", "ok", "error"]


@dataclass(frozen=True)
class ItemResult:
    item: str
    destination: str
    ok: bool
    error: Optional[str] = None


def summarize(results: Iterable[ItemResult]) -> Tuple[int, int]:
    ok = 0
    failed = 0
    for r in results:
        if r.ok:
            ok += 1
        else:
            failed += 1
    return ok, failed


def results_to_dataframe(results: List[ItemResult], run_id: str) -> pd.DataFrame:
    """Map item results into the report frame: run_id, item, destination, ok, error."""
    if not results:
        return pd.DataFrame(columns=REPORT_COLUMNS).astype(
            {"run_id": str, "item": str, "destination": str, "ok": bool, "error": object}
        )
    df = pd.DataFrame(
        [
            {
                "run_id": run_id,
                "item": r.item,
                "destination": r.destination,
                "ok": bool(r.ok),
                "error": r.error,
            }
            for r in results
        ]
    )
    return df.loc[:, REPORT_COLUMNS]
