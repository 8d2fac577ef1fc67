from __future__ import annotations

from datetime import datetime

import pandas as pd

from cex_data_archive.hyperliquid.inventory import find_downloaded_files, path_to_date_time


def test_path_to_date_time() -> None:
    assert path_to_date_time("data/202401-BTC/20240102/BTC-5") == datetime(2024, 1, 2, 5)
    assert path_to_date_time("data/20240102/BTC-23") == datetime(2024, 1, 2, 23)
    assert path_to_date_time("data/20240102/notes.txt") is None
    assert path_to_date_time("data/misc/BTC-5") is None
    assert path_to_date_time("BTC-5") is None


def test_find_downloaded_files(tmp_path) -> None:
    for rel in ["202401-BTC/20240102/BTC-5", "202401-BTC/20240101/BTC-23", "202401-BTC/20240102/BTC-1"]:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("x", encoding="utf-8")
    (tmp_path / "README.md").write_text("not data", encoding="utf-8")

    df = find_downloaded_files(tmp_path)
    assert list(df.columns) == ["path", "date_time"]
    assert list(df["date_time"]) == [
        pd.Timestamp("2024-01-01 23:00:00"),
        pd.Timestamp("2024-01-02 01:00:00"),
        pd.Timestamp("2024-01-02 05:00:00"),
    ]
    assert df["path"].iloc[-1].endswith("BTC-5")


def test_empty_directory(tmp_path) -> None:
    df = find_downloaded_files(tmp_path)
    assert df.empty
    assert list(df.columns) == ["path", "date_time"]
