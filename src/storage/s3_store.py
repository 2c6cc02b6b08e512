# src/storage/s3_store.py — v1
"""S3-compatible blob store (CACHE_BACKEND=s3).

Supports AWS S3, MinIO, and other S3-compatible storage.
Requires 'boto3' package: pip install boto3.
"""

from __future__ import annotations

import logging
from pathlib import Path

from buildcache.core.models import CacheEntry
from buildcache.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)


class S3BlobStore(BaseBlobStore):
    """Store cache objects in an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize S3 store.

        Args:
            bucket: S3 bucket name.
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
        """
        try:
            import boto3
        except ImportError as e:
            raise ImportError(
                "boto3 package required for S3 store: pip install boto3"
            ) from e

        kwargs: dict = {}
        if region:
            kwargs["region_name"] = region
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._s3 = boto3.client("s3", **kwargs)
        self._bucket = bucket

    async def upload(self, local_path: Path, name: str, content_type: str) -> None:
        self._s3.upload_file(
            str(local_path),
            self._bucket,
            name,
            ExtraArgs={"ContentType": content_type},
        )
        logger.debug("S3 upload: s3://%s/%s (%s)", self._bucket, name, content_type)

    async def list_by_prefix(self, prefix: str) -> list[CacheEntry]:
        """List matching objects. Listings carry no content type."""
        paginator = self._s3.get_paginator("list_objects_v2")
        entries: list[CacheEntry] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                entries.append(
                    CacheEntry(
                        name=obj["Key"],
                        created_at=obj.get("LastModified"),
                        size=obj.get("Size"),
                    )
                )
        return entries

    async def download(self, name: str, local_path: Path) -> None:
        self._s3.download_file(self._bucket, name, str(local_path))
        logger.debug("S3 download: s3://%s/%s -> %s", self._bucket, name, local_path)

    async def head(self, name: str) -> CacheEntry:
        response = self._s3.head_object(Bucket=self._bucket, Key=name)
        return CacheEntry(
            name=name,
            created_at=response.get("LastModified"),
            content_type=response.get("ContentType"),
            size=response.get("ContentLength"),
        )
