from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import DownloadError
from ..results import ItemResult
from ..runtime import FetchRuntime
from .extract import entry_base_name, save_raw_stream, save_zip_stream
from .keys import download_url
from .listing import CHECKSUM_SUFFIX, USER_AGENT


# Archives larger than this spill from memory to a temp file
SPOOL_MAX_BYTES = 64 * 1024 * 1024


def _http_request(url: str, *, method: str = "GET", timeout: float = 120.0):
    req = Request(url, method=method, headers={"User-Agent": USER_AGENT})
    return urlopen(req, timeout=timeout)


def download_and_extract(url: str, dest_dir: Path, timeout: float = 120.0) -> List[Path]:
    """Fetch the zip at `url` and extract its entries flat into `dest_dir`.

    .CHECKSUM files are not archives and are saved as-is.
    """
    with tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_BYTES) as buf:
        try:
            with _http_request(url, timeout=timeout) as resp:
                status = getattr(resp, "status", 200)
                if status != 200:
                    raise DownloadError(f"HTTP request failed, status: {status}")
                shutil.copyfileobj(resp, buf)
        except HTTPError as e:
            raise DownloadError(f"HTTP request failed, status: {e.code}") from e
        except URLError as e:
            raise DownloadError(f"Failed, exception: {e.reason}") from e
        buf.seek(0)
        if url.endswith(CHECKSUM_SUFFIX):
            return [save_raw_stream(buf, dest_dir, entry_base_name(url))]
        return save_zip_stream(buf, dest_dir)


def submit_downloads(
    runtime: FetchRuntime,
    keys: Iterable[str],
    dest_dir: Path,
    timeout: float = 120.0,
) -> List[bool]:
    """Schedule one download per bucket key. Returns the setup outcome per key."""
    submitted: List[bool] = []
    for key in keys:
        url = download_url(key)
        submitted.append(
            runtime.submit(url, dest_dir, lambda u=url: download_and_extract(u, dest_dir, timeout))
        )
    return submitted


def download_keys(
    runtime: FetchRuntime,
    keys: Iterable[str],
    dest_dir: Path,
    timeout: float = 120.0,
) -> List[ItemResult]:
    submit_downloads(runtime, keys, dest_dir, timeout=timeout)
    return runtime.wait()
