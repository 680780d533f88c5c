"""Blob storage for originals and thumbnails, backed by Amazon S3."""

from __future__ import annotations

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import StorageConfig
from .models import Outcome, Success, TransientError
from .utils import safe_filename_part

logger = logging.getLogger("wikiart_catalog")


def artwork_filename(year: str, dimensions: str, title: str, extension: str = "jpg") -> str:
    """File name embedding provenance: ``{year} - {W}x{H} - {title}.{ext}``."""
    return f"{year} - {dimensions} - {safe_filename_part(title)}.{extension}"


def with_extension(filename: str, extension: str) -> str:
    stem = filename.rsplit(".", 1)[0]
    return f"{stem}.{extension}"


def original_key(prefix: str, artist_id: str, filename: str) -> str:
    return f"{prefix}/{artist_id}/{filename}"


def thumbnail_key(prefix: str, artist_id: str, filename: str) -> str:
    return f"{prefix}/{artist_id}/thumbnails/{filename}"


class S3BlobStore:
    """Uploads objects to one bucket; the blocking client runs off the event loop."""

    def __init__(self, client, bucket: str, prefix: str) -> None:
        self._client = client
        self.bucket = bucket
        self.prefix = prefix

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3BlobStore":
        logger.info("Using S3 bucket %s (region: %s)", config.bucket, config.region)
        client = boto3.client(
            "s3",
            region_name=config.region,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
        )
        return cls(client, config.bucket, config.prefix)

    def _put_object(self, key: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> Outcome:
        try:
            await asyncio.to_thread(self._put_object, key, data, content_type)
        except (BotoCoreError, ClientError) as exc:
            return TransientError(f"upload of {key} failed: {exc}")
        logger.info("  Uploaded to S3: %s", key)
        return Success(key)
