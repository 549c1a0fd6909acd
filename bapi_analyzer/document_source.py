from __future__ import annotations

import os

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from bapi_analyzer.errors import ParseError, SourceIsDirectoryError, SourceNotFoundError, SourceOutsideRootError


def get_bucket() -> str:
    b = os.getenv("S3_BUCKET")
    if not b:
        raise RuntimeError("S3_BUCKET env var not set")
    return b


def get_region() -> str:
    r = os.getenv("AWS_REGION")
    if not r:
        raise RuntimeError("AWS_REGION env var not set")
    return r


def get_s3():
    return boto3.client("s3", region_name=get_region(), config=Config(signature_version="s3v4"))


def get_data_dir() -> str:
    d = os.getenv("BAPI_DATA_DIR")
    if not d:
        raise RuntimeError("BAPI_DATA_DIR env var not set")
    return d


def resolve_data_path(file_path: str, data_dir: str) -> str:
    """Resolve file_path (relative paths against data_dir) and refuse anything outside data_dir."""
    root = os.path.realpath(data_dir)
    resolved = os.path.realpath(os.path.join(root, file_path))
    if os.path.commonpath([root, resolved]) != root:
        raise SourceOutsideRootError(f"Path is outside the data directory: {file_path}")
    return resolved


def file_label(path_or_key: str) -> str:
    return os.path.basename(path_or_key.rstrip("/\\")) or path_or_key


def read_local_text(file_path: str) -> str:
    if not os.path.exists(file_path):
        raise SourceNotFoundError(f"File not found: {file_path}")
    if os.path.isdir(file_path):
        raise SourceIsDirectoryError(f"Specified path is a directory, not a file: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8-sig") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"{file_path} is not UTF-8 text: {e}") from e


def s3_get_text(s3, bucket: str, key: str) -> str:
    try:
        obj = s3.get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
            raise SourceNotFoundError(f"S3 object not found: s3://{bucket}/{key}") from None
        raise
    try:
        return obj["Body"].read().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"s3://{bucket}/{key} is not UTF-8 text: {e}") from e
