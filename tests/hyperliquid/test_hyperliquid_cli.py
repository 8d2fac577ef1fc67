from __future__ import annotations

import io

import lz4.frame

import cex_data_archive.hyperliquid.cli as cli_mod
from cex_data_archive.hyperliquid.cli import RunConfig, main, run_once


class FakeS3:
    def get_object(self, Bucket, Key, **kwargs):
        return {"Body": io.BytesIO(lz4.frame.compress(Key.encode("utf-8")))}


def test_dry_run_lists_keys(capsys, tmp_path) -> None:
    code = main([
        "download", "--out", str(tmp_path), "--start-date", "2024-01-01", "--end-date", "2024-01-02",
        "--data-type", "l2-book", "--asset", "BTC", "--dry-run",
    ])
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "market_data/20240101/1/l2Book/BTC.lz4"
    assert lines[22] == "market_data/20240101/23/l2Book/BTC.lz4"
    assert lines[-1].startswith("[DRY-RUN] 23 objects")


def test_empty_range_returns_2(tmp_path) -> None:
    assert main(["download", "--out", str(tmp_path), "--start-date", "2024-01-02", "--end-date", "2024-01-02"]) == 2
    assert main(["download", "--out", str(tmp_path)]) == 2


def test_download_and_inventory(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setattr(cli_mod, "make_s3_client", lambda credentials, region=None: FakeS3())
    cfg = RunConfig(
        command="download", out_dir=tmp_path / "hl", start_date="2024-01-01", end_date="2024-01-02",
        data_type="trades", asset="BTC", workers=4, report_dir=tmp_path / "reports",
    )
    assert run_once(cfg) == 0

    out_file = tmp_path / "hl" / "202401-BTC" / "20240101" / "BTC-7"
    assert out_file.read_text(encoding="utf-8") == "market_data/20240101/7/trades/BTC.lz4"
    assert len(list((tmp_path / "reports" / "hyperliquid_btc_trades").glob("*.csv"))) == 1

    capsys.readouterr()
    assert run_once(RunConfig(command="inventory", out_dir=tmp_path / "hl")) == 0
    out = capsys.readouterr().out
    assert "[INFO] 23 files" in out


def test_inventory_uses_dir_flag(tmp_path, capsys) -> None:
    hour_file = tmp_path / "hl" / "20240102" / "ETH-4"
    hour_file.parent.mkdir(parents=True)
    hour_file.write_text("x", encoding="utf-8")

    assert main(["inventory", "--dir", str(tmp_path / "hl")]) == 0
    out = capsys.readouterr().out
    assert "2024-01-02 04:00:00" in out
    assert "[INFO] 1 files" in out


def test_missing_directory_flags_return_2(tmp_path) -> None:
    assert main(["inventory"]) == 2
    assert main(["download", "--start-date", "2024-01-01", "--end-date", "2024-01-02"]) == 2
