from __future__ import annotations

import io
import zipfile
from pathlib import Path

import cex_data_archive.binance.cli as cli_mod
import cex_data_archive.binance.fetch as fetch_mod
from cex_data_archive.binance.cli import RunConfig, main, parse_args, run_once
from cex_data_archive.db import run_stats


PREFIX = "data/futures/cm/daily/trades/BTCUSD_PERP/"


class _FakeResponse(io.BytesIO):
    status = 200


def _zip_bytes(name: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr(name, name.encode())
    return buf.getvalue()


def _stub_listing(monkeypatch, keys):
    calls = []

    def fake_list(prefix, ignore_checksums=False, **kwargs):
        calls.append((prefix, ignore_checksums))
        return list(keys)

    monkeypatch.setattr(cli_mod, "list_download_keys", fake_list)
    return calls


def test_parse_args_defaults() -> None:
    cfg = parse_args(["download", "--ticker", "BTCUSD_PERP", "--coin", "cm", "--out", "/tmp/x"])
    assert cfg.command == "download"
    assert cfg.asset == "futures" and cfg.coin == "cm" and cfg.granularity == "none"
    assert cfg.ignore_checksums is True
    assert cfg.out_dir == Path("/tmp/x")
    assert cfg.workers == 10


def test_list_prints_urls(monkeypatch, capsys, tmp_path) -> None:
    calls = _stub_listing(monkeypatch, [PREFIX + "a.zip", PREFIX + "b.zip"])
    cfg = RunConfig(
        command="list", asset="futures", coin="cm", time_frame="daily", granularity="none",
        market="trades", ticker="BTCUSD_PERP", out_dir=tmp_path,
    )
    assert run_once(cfg) == 0
    assert calls == [(PREFIX, True)]
    out = capsys.readouterr().out.splitlines()
    assert out == [f"https://data.binance.vision/{PREFIX}a.zip", f"https://data.binance.vision/{PREFIX}b.zip"]


def test_download_last_n_with_reports(monkeypatch, tmp_path) -> None:
    keys = [PREFIX + f"BTCUSD_PERP-trades-2024-01-0{i}.zip" for i in range(1, 6)]
    _stub_listing(monkeypatch, keys)
    archives = {f"https://data.binance.vision/{k}": _zip_bytes(Path(k).stem + ".csv") for k in keys}

    def fake_http(url, *, method="GET", timeout=120.0):
        return _FakeResponse(archives[url])

    monkeypatch.setattr(fetch_mod, "_http_request", fake_http)

    out_dir = tmp_path / "data" / "btcusd-perp"
    report_dir = tmp_path / "reports"
    report_db = tmp_path / "reports" / "log.duckdb"
    cfg = RunConfig(
        command="download", asset="futures", coin="cm", time_frame="daily", granularity="none",
        market="trades", ticker="BTCUSD_PERP", out_dir=out_dir, last=2,
        report_dir=report_dir, report_db=report_db, workers=2,
    )
    assert run_once(cfg) == 0

    assert sorted(p.name for p in out_dir.iterdir()) == [
        "BTCUSD_PERP-trades-2024-01-04.csv",
        "BTCUSD_PERP-trades-2024-01-05.csv",
    ]
    reports = list((report_dir / "binance_btcusd_perp").glob("*_download_report.csv"))
    assert len(reports) == 1
    run_id = reports[0].name.split("_download_report")[0]
    assert run_stats(report_db, run_id) == (2, 0)


def test_empty_listing_returns_2(monkeypatch, tmp_path) -> None:
    _stub_listing(monkeypatch, [])
    assert main(["download", "--ticker", "NOPE", "--out", str(tmp_path)]) == 2


def test_dry_run_does_not_download(monkeypatch, tmp_path, capsys) -> None:
    _stub_listing(monkeypatch, [PREFIX + "a.zip"])

    def no_http(*args, **kwargs):
        raise AssertionError("network must not be used in dry-run")

    monkeypatch.setattr(fetch_mod, "_http_request", no_http)
    assert main(["download", "--ticker", "BTCUSD_PERP", "--out", str(tmp_path / "o"), "--dry-run"]) == 0
    assert "[DRY-RUN]" in capsys.readouterr().out
    assert not (tmp_path / "o").exists()


def test_download_keep_checksums_succeeds(monkeypatch, tmp_path) -> None:
    keys = [PREFIX + "BTCUSD_PERP-trades-2024-01-01.zip", PREFIX + "BTCUSD_PERP-trades-2024-01-01.zip.CHECKSUM"]
    calls = _stub_listing(monkeypatch, keys)
    bodies = {
        f"https://data.binance.vision/{keys[0]}": _zip_bytes("BTCUSD_PERP-trades-2024-01-01.csv"),
        f"https://data.binance.vision/{keys[1]}": b"abc123  BTCUSD_PERP-trades-2024-01-01.zip\n",
    }

    def fake_http(url, *, method="GET", timeout=120.0):
        return _FakeResponse(bodies[url])

    monkeypatch.setattr(fetch_mod, "_http_request", fake_http)

    out_dir = tmp_path / "out"
    code = main(["download", "--coin", "cm", "--ticker", "BTCUSD_PERP", "--out", str(out_dir), "--keep-checksums"])
    assert code == 0
    assert calls == [(PREFIX, False)]
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "BTCUSD_PERP-trades-2024-01-01.csv",
        "BTCUSD_PERP-trades-2024-01-01.zip.CHECKSUM",
    ]
