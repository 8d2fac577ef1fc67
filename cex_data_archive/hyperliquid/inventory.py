from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import pandas as pd


def path_to_date_time(path: Union[str, Path]) -> Optional[datetime]:
    """Parse a .../yyyyMMdd/{asset}-{hour} path back to its hour, or None."""
    parts = Path(path).parts
    if len(parts) < 2:
        return None
    date_part, file_part = parts[-2], parts[-1]
    _, sep, hour = file_part.rpartition("-")
    if not sep or not hour.isdigit():
        return None
    try:
        return datetime.strptime(f"{date_part}{int(hour):02d}", "%Y%m%d%H")
    except ValueError:
        return None


def find_downloaded_files(directory: Union[str, Path]) -> pd.DataFrame:
    """Walk `directory` (following links) and list files that match the hourly layout.

    Columns: path, date_time; sorted by date_time.
    """
    rows = []
    for root, _dirs, files in os.walk(directory, followlinks=True):
        for name in files:
            path = os.path.join(root, name)
            dt = path_to_date_time(path)
            if dt is not None:
                rows.append({"path": path, "date_time": pd.Timestamp(dt)})
    if not rows:
        return pd.DataFrame(columns=["path", "date_time"]).astype({"path": str, "date_time": "datetime64[ns]"})
    df = pd.DataFrame(rows)
    df = df.sort_values(["date_time", "path"], kind="mergesort").reset_index(drop=True)
    return df
