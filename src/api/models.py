# src/api/models.py — v3
"""API-level options for save_cache/restore_cache and their resolution."""

from __future__ import annotations

from pydantic import BaseModel

from buildcache.config.settings import Settings
from buildcache.core.errors import ConfigUnsetError, ValidationError


class CacheOptions(BaseModel):
    """Options shared by save and restore.

    bucket: Bucket holding cache entries. Falls back to CACHE_BUCKET, then
        ACTIONS_GCS_CACHE_BUCKET.
    scope: Namespace prepended to every key. Falls back to CACHE_SCOPE,
        then to the repository name from GITHUB_REPOSITORY.
    """

    bucket: str | None = None
    scope: str | None = None


class UploadOptions(CacheOptions):
    """Options for save_cache."""


class DownloadOptions(CacheOptions):
    """Options for restore_cache.

    lookup_only: Only check that a matching entry exists and return its key;
        nothing is downloaded or extracted.
    """

    lookup_only: bool = False


class ResolvedOptions(BaseModel):
    bucket: str
    scope: str
    lookup_only: bool = False


def resolve_options(
    options: CacheOptions | None, settings: Settings
) -> ResolvedOptions:
    """Fill unset options from settings.

    Raises:
        ConfigUnsetError: If no bucket or scope can be determined.
        ValidationError: If the scope contains '/'.
    """
    options = options or CacheOptions()

    bucket = options.bucket if options.bucket is not None else settings.default_bucket
    if not bucket:
        raise ConfigUnsetError(
            "Config Error: no bucket value provided and neither CACHE_BUCKET nor "
            "ACTIONS_GCS_CACHE_BUCKET environment variable is set"
        )

    scope = options.scope
    if scope is None:
        scope = settings.cache_scope or settings.repository_name
    if not scope:
        raise ConfigUnsetError(
            "Config Error: no scope value provided and neither CACHE_SCOPE nor "
            "GITHUB_REPOSITORY environment variable is set"
        )
    if "/" in scope:
        raise ValidationError(f"Scope Validation Error: {scope!r} must not contain '/'")

    return ResolvedOptions(
        bucket=bucket,
        scope=scope,
        lookup_only=isinstance(options, DownloadOptions) and options.lookup_only,
    )
