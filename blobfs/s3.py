"""Bucket backed by Amazon S3 (or any S3-compatible service)."""

from __future__ import annotations

import errno
import logging
from typing import Any, BinaryIO, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import SEPARATOR, Attributes, BucketError, ListObject, ZERO_TIME

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class _Body:
    """Response body whose read failures surface as bucket errors."""

    def __init__(self, body: Any, bucket: S3Bucket, key: str):
        self._body = body
        self._bucket = bucket
        self._key = key

    def read(self, size: int | None = None) -> bytes:
        try:
            if size is None or size < 0:
                return self._body.read()
            return self._body.read(size)
        except (ClientError, BotoCoreError) as exc:
            raise self._bucket._translate(exc, self._key) from exc

    def close(self) -> None:
        try:
            self._body.close()
        except (ClientError, BotoCoreError) as exc:
            raise self._bucket._translate(exc, self._key) from exc


class S3Bucket:
    """Bucket interface over an S3 bucket, optionally rooted at a key prefix.

    Keys seen by callers are relative to ``prefix``; the prefix is added on
    every request and stripped from every listing result.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any = None,
        **client_kwargs: Any,
    ):
        """Initialize the bucket.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix all paths live under ("" for the whole bucket).
            client: Pre-built S3 client. Created with ``boto3.client("s3")``
                when omitted.
            **client_kwargs: Extra arguments for ``boto3.client`` (region_name,
                endpoint_url, config, ...). Ignored when ``client`` is given.
        """
        self.bucket = bucket
        self.prefix = prefix.strip(SEPARATOR)
        self.s3 = client if client is not None else boto3.client("s3", **client_kwargs)

    def _full_key(self, key: str) -> str:
        if not self.prefix:
            return key
        return f"{self.prefix}/{key}"

    def _strip(self, full_key: str) -> str:
        if not self.prefix:
            return full_key
        return full_key[len(self.prefix) + 1 :]

    @staticmethod
    def _error_code(exc: ClientError) -> str:
        return str(exc.response.get("Error", {}).get("Code", ""))

    def _translate(self, exc: Exception, key: str) -> OSError:
        """Map a botocore error to FileNotFoundError or BucketError."""
        if isinstance(exc, ClientError) and self._error_code(exc) in _NOT_FOUND_CODES:
            return FileNotFoundError(errno.ENOENT, "No such key", key)
        logger.error("S3 request for %r in bucket %s failed: %s", key, self.bucket, exc)
        return BucketError(str(exc))

    @staticmethod
    def _etag(value: str | None) -> str | None:
        return value.strip('"') if value else None

    def list(self, prefix: str = "", delimiter: str = SEPARATOR) -> Iterator[ListObject]:
        """List keys page by page, merging objects and common prefixes by key."""
        kwargs = {"Bucket": self.bucket, "Prefix": self._full_key(prefix)}
        if delimiter:
            kwargs["Delimiter"] = delimiter
        paginator = self.s3.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(**kwargs):
                items = [
                    ListObject(
                        key=self._strip(obj["Key"]),
                        size=obj.get("Size", 0),
                        mod_time=obj.get("LastModified", ZERO_TIME),
                        content_hash=self._etag(obj.get("ETag")),
                    )
                    for obj in page.get("Contents", [])
                ]
                items.extend(
                    ListObject(key=self._strip(cp["Prefix"]), is_dir=True)
                    for cp in page.get("CommonPrefixes", [])
                )
                items.sort(key=lambda item: item.key)
                yield from items
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, prefix) from exc

    def attributes(self, key: str) -> Attributes:
        try:
            head = self.s3.head_object(Bucket=self.bucket, Key=self._full_key(key))
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc
        return Attributes(
            size=head.get("ContentLength", 0),
            mod_time=head.get("LastModified", ZERO_TIME),
            content_hash=self._etag(head.get("ETag")),
        )

    def range_read(self, key: str, offset: int, length: int) -> BinaryIO:
        if length == 0:
            raise ValueError("length must be non-zero")
        byte_range = f"bytes={offset}-" if length < 0 else f"bytes={offset}-{offset + length - 1}"
        try:
            obj = self.s3.get_object(
                Bucket=self.bucket, Key=self._full_key(key), Range=byte_range
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc
        return _Body(obj["Body"], self, key)
