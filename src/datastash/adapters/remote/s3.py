"""Amazon S3 (and S3-compatible) remote store adapter.

Objects live in one bucket, optionally below a key prefix
(``s3://bucket/prefix`` → key ``g/a-v1`` is stored as ``prefix/g/a-v1``).
S3 makes an object visible only once its upload completes, which gives the
atomic-visibility guarantee the `RemoteStore` contract asks for.

Credentials, region and endpoint are resolved by boto3's usual chain unless
given explicitly; a preconfigured client can be injected for tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, BinaryIO

import boto3
from botocore.exceptions import ClientError

from datastash.interfaces.remote_store import NotFound, RemoteStore

if TYPE_CHECKING:
    from botocore.client import BaseClient

logger = logging.getLogger(__name__)

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
_DELETE_BATCH = 1000  # S3 DeleteObjects limit


def _is_missing(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _MISSING_CODES


class S3RemoteStore(RemoteStore):
    """RemoteStore implementation backed by an S3 bucket."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        bucket: str,
        *,
        prefix: str = "",
        endpoint_url: str | None = None,
        region: str | None = None,
        profile: str | None = None,
        client: BaseClient | None = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        if client is None:
            session = boto3.session.Session(profile_name=profile, region_name=region)
            client = session.client("s3", endpoint_url=endpoint_url)
        self.client = client

    def __repr__(self) -> str:
        location = f"{self.bucket}/{self.prefix}" if self.prefix else self.bucket
        return f"S3RemoteStore('s3://{location}')"

    # --- Core Operations ---

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._full_key(key))
        except ClientError as e:
            if _is_missing(e):
                return False
            raise
        return True

    def open_read(self, key: str) -> BinaryIO:
        try:
            response = self.client.get_object(
                Bucket=self.bucket, Key=self._full_key(key)
            )
        except ClientError as e:
            if _is_missing(e):
                raise NotFound(key) from e
            raise
        return response["Body"]

    def put(self, key: str, fileobj: BinaryIO) -> None:
        full_key = self._full_key(key)
        logger.debug("Uploading s3://%s/%s", self.bucket, full_key)
        self.client.upload_fileobj(fileobj, self.bucket, full_key)

    def list_keys(self, prefix: str = "") -> Iterator[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=self.bucket, Prefix=self._full_key(prefix))
        for page in pages:
            for item in page.get("Contents", []):
                yield self._strip_prefix(item["Key"])

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self._full_key(key))

    # --- Convenience Methods ---

    def delete_prefix(self, prefix: str) -> int:
        keys = [self._full_key(k) for k in self.list_keys(prefix)]
        for start in range(0, len(keys), _DELETE_BATCH):
            batch: list[dict[str, Any]] = [
                {"Key": k} for k in keys[start : start + _DELETE_BATCH]
            ]
            response = self.client.delete_objects(
                Bucket=self.bucket, Delete={"Objects": batch, "Quiet": True}
            )
            if errors := response.get("Errors"):
                first = errors[0]
                raise ClientError(
                    {"Error": {"Code": first.get("Code"), "Message": first.get("Message")}},
                    "DeleteObjects",
                )
        return len(keys)

    # --- Internal Helpers ---

    def _full_key(self, key: str) -> str:
        if not self.prefix:
            return key
        return f"{self.prefix}/{key}"

    def _strip_prefix(self, full_key: str) -> str:
        if not self.prefix:
            return full_key
        return full_key[len(self.prefix) + 1 :]
