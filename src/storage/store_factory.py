# src/storage/store_factory.py — v2
"""Factory: instantiate the blob store from configuration."""

from __future__ import annotations

from buildcache.config.settings import Settings
from buildcache.storage.base_blob_store import BaseBlobStore
from buildcache.storage.local_store import LocalBlobStore


def create_blob_store(settings: Settings, bucket: str) -> BaseBlobStore:
    """Create the blob store selected by CACHE_BACKEND.

    Args:
        settings: Application settings.
        bucket: Resolved bucket name.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.cache_backend == "local":
        return LocalBlobStore(root=settings.cache_local_root, bucket=bucket)

    if settings.cache_backend == "s3":
        from buildcache.storage.s3_store import S3BlobStore
        return S3BlobStore(
            bucket=bucket,
            region=settings.cache_s3_region or None,
            endpoint_url=settings.cache_s3_endpoint_url or None,
        )

    if settings.cache_backend == "gcs":
        from buildcache.storage.gcs_store import GcsBlobStore
        return GcsBlobStore(bucket=bucket, project=settings.cache_gcs_project or None)

    raise ValueError(f"Unsupported cache backend: {settings.cache_backend!r}")
