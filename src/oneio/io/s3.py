"""
Object storage helpers built on boto3.

Credentials, region and endpoint come from the environment:
- AWS_ACCESS_KEY_ID
- AWS_SECRET_ACCESS_KEY
- AWS_REGION (e.g. "us-east-1"; "auto" for Cloudflare R2)
- AWS_ENDPOINT / AWS_ENDPOINT_URL (for S3-compatible providers)

Locations use ``s3://bucket/key``; ``r2://bucket/key`` is accepted as an alias.
"""

from __future__ import annotations
import io
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..core.errors import NetworkError, NotSupportedError, S3StatusError
from ..core.log import get_logger
from ..core.settings import create_settings_from_env
from .local import open_local_reader, open_local_writer

logger = get_logger(__name__)

S3_SCHEMES = ("s3", "r2")


def s3_url_parse(path: str) -> tuple[str, str]:
    """Split ``s3://bucket/key`` into (bucket, key)."""
    scheme, sep, rest = path.partition("://")
    if not sep or scheme not in S3_SCHEMES:
        raise NotSupportedError(f"not an object storage location: {path}")
    bucket, _, key = rest.partition("/")
    if not bucket:
        raise NotSupportedError(f"object storage location without bucket: {path}")
    return bucket, key


def s3_env_check() -> None:
    """Fail with NetworkError if credentials or region/endpoint are missing."""
    settings = create_settings_from_env()
    if not settings.has_s3_credentials:
        raise NetworkError("missing object storage credentials: set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY")
    if not settings.aws_region and not settings.aws_endpoint:
        raise NetworkError("missing object storage region: set AWS_REGION or AWS_ENDPOINT")


def s3_client(scheme: str = "s3") -> Any:
    """Create a boto3 S3 client from the environment settings."""
    settings = create_settings_from_env()
    region = settings.aws_region or ("auto" if scheme == "r2" else None)
    try:
        return boto3.client(
            "s3",
            region_name=region,
            endpoint_url=settings.aws_endpoint,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            config=Config(read_timeout=settings.s3_timeout_s),
        )
    except BotoCoreError as e:
        raise NetworkError(f"cannot create object storage client: {e}") from e


def _status_code(error: ClientError) -> int:
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if status is None:
        code = error.response.get("Error", {}).get("Code", "")
        status = int(code) if str(code).isdigit() else 0
    return int(status)


@contextmanager
def _s3_errors(action: str) -> Iterator[None]:
    try:
        yield
    except ClientError as e:
        raise S3StatusError(_status_code(e), f"{action} failed: {e}") from e
    except BotoCoreError as e:
        raise NetworkError(f"{action} failed: {e}") from e


def s3_reader(bucket: str, key: str, scheme: str = "s3") -> BinaryIO:
    """Fetch an object fully into memory and return it as a stream."""
    client = s3_client(scheme)
    with _s3_errors(f"get s3://{bucket}/{key}"):
        body = client.get_object(Bucket=bucket, Key=key)["Body"]
        try:
            data = body.read()
        finally:
            body.close()
    return io.BytesIO(data)


def s3_upload(bucket: str, key: str, file_path: Union[str, Path], scheme: str = "s3") -> None:
    """Stream a local file into an object."""
    client = s3_client(scheme)
    with open_local_reader(file_path) as reader, _s3_errors(f"upload s3://{bucket}/{key}"):
        client.upload_fileobj(reader, bucket, key)
    logger.debug("uploaded %s to s3://%s/%s", file_path, bucket, key)


def s3_download(bucket: str, key: str, file_path: Union[str, Path], scheme: str = "s3") -> None:
    """Copy an object verbatim into a local file."""
    client = s3_client(scheme)
    with _s3_errors(f"download s3://{bucket}/{key}"):
        body = client.get_object(Bucket=bucket, Key=key)["Body"]
        try:
            with open_local_writer(file_path) as writer:
                shutil.copyfileobj(body, writer)
        finally:
            body.close()


def s3_stats(bucket: str, key: str, scheme: str = "s3") -> Dict[str, Any]:
    """Return the head-object metadata (ContentLength, ETag, LastModified, ...)."""
    client = s3_client(scheme)
    with _s3_errors(f"head s3://{bucket}/{key}"):
        return client.head_object(Bucket=bucket, Key=key)


def s3_exists(bucket: str, key: str, scheme: str = "s3") -> bool:
    """True if the object exists; a 404 is False, any other failure propagates."""
    try:
        s3_stats(bucket, key, scheme=scheme)
    except S3StatusError as e:
        if e.status_code == 404:
            return False
        raise
    return True


def s3_list(bucket: str, prefix: str = "", delimiter: Optional[str] = None,
            dirs: bool = False, scheme: str = "s3") -> List[str]:
    """List keys under `prefix`; with `dirs`, only the common prefixes ("directories")."""
    if dirs and delimiter is None:
        delimiter = "/"

    params: Dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
    if delimiter is not None:
        params["Delimiter"] = delimiter

    client = s3_client(scheme)
    result: List[str] = []
    with _s3_errors(f"list s3://{bucket}/{prefix}"):
        for page in client.get_paginator("list_objects_v2").paginate(**params):
            if dirs:
                result.extend(p["Prefix"] for p in page.get("CommonPrefixes", []))
            else:
                result.extend(obj["Key"] for obj in page.get("Contents", []))
    return result


def s3_copy(bucket: str, src_key: str, dst_key: str, scheme: str = "s3") -> None:
    """Server-side copy within one bucket."""
    client = s3_client(scheme)
    with _s3_errors(f"copy s3://{bucket}/{src_key}"):
        client.copy_object(Bucket=bucket, Key=dst_key, CopySource={"Bucket": bucket, "Key": src_key})


def s3_delete(bucket: str, key: str, scheme: str = "s3") -> None:
    client = s3_client(scheme)
    with _s3_errors(f"delete s3://{bucket}/{key}"):
        client.delete_object(Bucket=bucket, Key=key)
