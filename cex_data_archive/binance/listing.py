from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..errors import PaginationError


BUCKET_URL = "https://s3-ap-northeast-1.amazonaws.com/data.binance.vision"
CHECKSUM_SUFFIX = ".CHECKSUM"
MAX_LISTING_PAGES = 10_000

USER_AGENT = "cex-data-archive/0.1"


@dataclass(frozen=True)
class ListingPage:
    keys: List[str]
    next_marker: Optional[str]


def listing_params(prefix: str, marker: Optional[str] = None) -> Dict[str, str]:
    params = {"delimiter": "/", "prefix": prefix}
    if marker:
        params["marker"] = marker
    return params


def fetch_listing_page(params: Dict[str, str], timeout: float = 30.0) -> bytes:
    url = f"{BUCKET_URL}?{urlencode(params)}"
    req = Request(url, headers={"User-Agent": USER_AGENT})
    with urlopen(req, timeout=timeout) as resp:
        return resp.read()


def _local_name(tag: str) -> str:
    # Strip the "{namespace}" prefix S3 puts on every element
    return tag.rsplit("}", 1)[-1]


def parse_listing(body: bytes, ignore_checksums: bool = False) -> ListingPage:
    """Extract ListBucketResult -> Contents -> Key values and the NextMarker, if any."""
    root = ET.fromstring(body)
    keys: List[str] = []
    next_marker: Optional[str] = None
    for node in root:
        name = _local_name(node.tag)
        if name == "Contents":
            for child in node:
                if _local_name(child.tag) == "Key" and child.text:
                    keys.append(child.text)
        elif name == "NextMarker" and node.text:
            next_marker = node.text
    if ignore_checksums:
        keys = [k for k in keys if not k.endswith(CHECKSUM_SUFFIX)]
    return ListingPage(keys=keys, next_marker=next_marker)


def list_download_keys(
    prefix: str,
    ignore_checksums: bool = False,
    *,
    max_pages: int = MAX_LISTING_PAGES,
    timeout: float = 30.0,
) -> List[str]:
    """Walk the bucket listing for `prefix`, following NextMarker until exhausted.

    Keys are returned in response order. Raises PaginationError when the endpoint
    repeats a marker or more than `max_pages` pages are returned.
    """
    keys: List[str] = []
    marker: Optional[str] = None
    for _ in range(max_pages):
        body = fetch_listing_page(listing_params(prefix, marker), timeout=timeout)
        page = parse_listing(body, ignore_checksums)
        keys.extend(page.keys)
        if page.next_marker is None:
            return keys
        if page.next_marker == marker:
            raise PaginationError(f"listing for {prefix!r} returned the same marker twice: {marker!r}")
        marker = page.next_marker
    raise PaginationError(f"listing for {prefix!r} did not finish within {max_pages} pages")
