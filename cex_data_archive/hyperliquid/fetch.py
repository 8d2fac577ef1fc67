from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import boto3

from ..results import ItemResult
from ..runtime import Credentials, FetchRuntime
from .decompress import lz4_stream_to_file
from .keys import hyperliquid_object_key, local_output_path


BUCKET_NAME = "hyperliquid-archive"


def make_s3_client(credentials: Credentials, region_name: Optional[str] = None):
    session = boto3.Session(
        aws_access_key_id=credentials.access_key,
        aws_secret_access_key=credentials.secret_key,
        region_name=region_name,
    )
    return session.client("s3")


def get_s3_object(client, bucket_name: str, key: str, request_payer: Optional[str] = None):
    kwargs = {"Bucket": bucket_name, "Key": key}
    if request_payer:
        kwargs["RequestPayer"] = request_payer
    return client.get_object(**kwargs)


def download_object(
    client,
    key: str,
    output_path: Path,
    bucket_name: str = BUCKET_NAME,
    request_payer: Optional[str] = None,
) -> Path:
    obj = get_s3_object(client, bucket_name, key, request_payer)
    body = obj["Body"]
    try:
        lz4_stream_to_file(body, output_path)
    finally:
        body.close()
    return output_path


def submit_hours(
    runtime: FetchRuntime,
    client,
    hours: Iterable[datetime],
    data_type: str,
    asset: str,
    base_dir: Path,
    layout: str = "monthly",
    bucket_name: str = BUCKET_NAME,
    request_payer: Optional[str] = None,
) -> List[bool]:
    """Schedule one object download per hour. Returns the setup outcome per hour."""
    submitted: List[bool] = []
    for dt in hours:
        key = hyperliquid_object_key(dt, data_type, asset)
        out = local_output_path(base_dir, dt, asset, layout)
        submitted.append(
            runtime.submit(
                key,
                out.parent,
                lambda k=key, o=out: download_object(client, k, o, bucket_name, request_payer),
            )
        )
    return submitted


def download_hours(
    runtime: FetchRuntime,
    client,
    hours: Iterable[datetime],
    data_type: str,
    asset: str,
    base_dir: Path,
    layout: str = "monthly",
    bucket_name: str = BUCKET_NAME,
    request_payer: Optional[str] = None,
) -> List[ItemResult]:
    submit_hours(runtime, client, hours, data_type, asset, base_dir, layout, bucket_name, request_payer)
    return runtime.wait()
