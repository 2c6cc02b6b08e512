# src/storage/gcs_store.py — v1
"""Google Cloud Storage blob store (CACHE_BACKEND=gcs).

Authenticates with Application Default Credentials (service account key,
workload identity, gcloud login).
Requires 'google-cloud-storage' package: pip install google-cloud-storage.
"""

from __future__ import annotations

import logging
from pathlib import Path

from buildcache.core.models import CacheEntry
from buildcache.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)


class GcsBlobStore(BaseBlobStore):
    """Store cache objects in a GCS bucket."""

    def __init__(self, bucket: str, project: str | None = None) -> None:
        """Initialize GCS store.

        Args:
            bucket: GCS bucket name.
            project: Project for the client (optional, inferred from ADC).
        """
        try:
            from google.cloud import storage
        except ImportError as e:
            raise ImportError(
                "google-cloud-storage package required for GCS store: "
                "pip install google-cloud-storage"
            ) from e

        self._client = storage.Client(project=project) if project else storage.Client()
        self._bucket = self._client.bucket(bucket)

    async def upload(self, local_path: Path, name: str, content_type: str) -> None:
        blob = self._bucket.blob(name)
        blob.upload_from_filename(str(local_path), content_type=content_type)
        logger.debug("GCS upload: gs://%s/%s (%s)", self._bucket.name, name, content_type)

    async def list_by_prefix(self, prefix: str) -> list[CacheEntry]:
        """List matching objects. GCS listings carry the content type."""
        return [
            _entry(blob)
            for blob in self._client.list_blobs(self._bucket, prefix=prefix)
        ]

    async def download(self, name: str, local_path: Path) -> None:
        self._bucket.blob(name).download_to_filename(str(local_path))
        logger.debug("GCS download: gs://%s/%s -> %s", self._bucket.name, name, local_path)

    async def head(self, name: str) -> CacheEntry:
        blob = self._bucket.get_blob(name)
        if blob is None:
            raise FileNotFoundError(f"No such cache object: gs://{self._bucket.name}/{name}")
        return _entry(blob)


def _entry(blob) -> CacheEntry:
    return CacheEntry(
        name=blob.name,
        created_at=blob.time_created,
        content_type=blob.content_type,
        size=blob.size,
    )
