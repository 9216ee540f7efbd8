from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import ClientError

from journal_scraper.collection import DEFAULT_LIMIT

from .base import ArticleStore

_NOT_FOUND_CODES = {"NoSuchKey", "404"}


class S3ArticleStore(ArticleStore):
    """Article store backed by a single S3 object.

    A missing object is treated as an empty list. Any other S3 or network
    error propagates to the caller.
    """

    def __init__(
        self,
        bucket: str,
        key: str,
        limit: int = DEFAULT_LIMIT,
        client: Any | None = None,
    ) -> None:
        super().__init__(limit=limit)
        self.bucket = bucket
        self.key = key
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("s3")
        return self._client

    @property
    def address(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def _read_blob(self) -> bytes | None:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return None
            raise

        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def _write_blob(self, data: bytes) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=self.key,
            Body=data,
            ContentType="application/json",
        )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))
