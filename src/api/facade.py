# src/api/facade.py — v2
"""Public API facade — save and restore cache entries.

Usage:
    from buildcache.api.facade import restore_cache, save_cache
    await save_cache(["node_modules"], "npm-" + lock_hash)
    hit = await restore_cache(["node_modules"], "npm-" + lock_hash, ["npm-"])

Saving is strict: every failure propagates. Restoring is optional: only
validation, configuration and missing-tool errors propagate; anything else
is logged as a warning and reported as a miss (None).
"""

from __future__ import annotations

import logging
from typing import Sequence

from buildcache.api.models import (
    DownloadOptions,
    ResolvedOptions,
    UploadOptions,
    resolve_options,
)
from buildcache.archive.compression import (
    decode_content_type,
    encode_content_type,
    get_cache_filename,
    get_compression_method,
)
from buildcache.archive.tar import create_tar, extract_tar
from buildcache.cache.key_resolver import find_cache_entry, object_name
from buildcache.cache.paths import resolve_paths
from buildcache.cache.validation import check_key, check_keys
from buildcache.config.environment import EnvContext
from buildcache.config.settings import Settings, load_settings
from buildcache.core.errors import ConfigUnsetError, ToolNotFoundError, ValidationError
from buildcache.core.models import RestoreOutcome
from buildcache.logging.context import clear_context, set_operation_context
from buildcache.storage.base_blob_store import BaseBlobStore
from buildcache.storage.store_factory import create_blob_store
from buildcache.storage.workspace import temp_workspace

logger = logging.getLogger(__name__)

# Errors that reach restore_cache callers; everything else is a miss.
_FATAL_RESTORE_ERRORS = (ValidationError, ConfigUnsetError, ToolNotFoundError)


def is_feature_available() -> bool:
    """The blob-store backend is usable wherever it is configured."""
    return True


async def save_cache(
    paths: Sequence[str],
    key: str,
    options: UploadOptions | None = None,
    *,
    settings: Settings | None = None,
    env: EnvContext | None = None,
    store: BaseBlobStore | None = None,
) -> None:
    """Archive ``paths`` and upload them under ``key``.

    Args:
        paths: Path patterns relative to the working directory.
        key: Explicit cache key.
        options: Upload options (bucket, scope).
        settings: Global settings. Loaded from the environment if None.
        env: Host environment. Snapshotted from the process if None.
        store: Blob store. Built from settings if None.

    Raises:
        ValidationError: Key too long or no path matched.
        ConfigUnsetError: Bucket or scope unset.
        ToolNotFoundError: No tar on the host.
        CommandFailedError: tar/zstd failed.
    """
    check_key(key)
    settings = settings or load_settings()
    resolved = resolve_options(options, settings)
    env = env or EnvContext.from_settings(settings)

    set_operation_context("save", key, resolved.scope)
    try:
        cache_paths = resolve_paths(paths, env.working_directory)
        logger.debug("Cache Paths: %s", cache_paths)
        if not cache_paths:
            raise ValidationError(
                "Path Validation Error: Path(s) specified in the action for caching "
                "do(es) not exist, hence no cache is being saved."
            )

        method = await get_compression_method(env)
        store = store or create_blob_store(settings, resolved.bucket)
        name = object_name(resolved.scope, key)

        async with temp_workspace(env) as workspace:
            archive = await create_tar(workspace, cache_paths, method, env)
            logger.debug("Archive Path: %s", archive)
            await store.upload(archive, name, encode_content_type(method))

        logger.info("Cache saved with key: %s", key)
    finally:
        clear_context()


async def restore_cache(
    paths: Sequence[str],
    primary_key: str,
    restore_keys: Sequence[str] | None = None,
    options: DownloadOptions | None = None,
    *,
    settings: Settings | None = None,
    env: EnvContext | None = None,
    store: BaseBlobStore | None = None,
) -> str | None:
    """Restore the best matching cache entry into the working directory.

    Args:
        paths: Paths that were cached. Extraction restores whatever the
            archive holds; the list is only logged.
        primary_key: First key to try. Lookup is by prefix.
        restore_keys: Fallback keys, tried in order after ``primary_key``.
        options: Download options (bucket, scope, lookup_only).

    Returns:
        The key that matched, without the scope prefix, or None on a miss.

    Raises:
        ValidationError: More than 10 keys or a key over 512 characters.
        ConfigUnsetError: Bucket or scope unset.
        ToolNotFoundError: No tar on the host.
    """
    settings = settings or load_settings()
    resolved = resolve_options(options or DownloadOptions(), settings)

    keys = [primary_key, *(restore_keys or [])]
    logger.debug("Resolved Keys: %s", keys)
    check_keys(keys)

    env = env or EnvContext.from_settings(settings)
    set_operation_context("restore", primary_key, resolved.scope)
    try:
        logger.debug("Restore paths: %s", list(paths))
        outcome = await _restore(keys, resolved, settings, env, store)
    finally:
        clear_context()

    if outcome.fatal is not None:
        raise outcome.fatal
    return outcome.matched_key


async def _restore(
    keys: Sequence[str],
    resolved: ResolvedOptions,
    settings: Settings,
    env: EnvContext,
    store: BaseBlobStore | None,
) -> RestoreOutcome:
    try:
        store = store or create_blob_store(settings, resolved.bucket)
        entry = await find_cache_entry(store, keys, resolved.scope)
        if entry is None:
            logger.info("Cache not found for input keys: %s", ", ".join(keys))
            return RestoreOutcome()

        if entry.content_type is None:
            entry = await store.head(entry.name)

        if not entry.content_type:
            logger.warning("Cache entry %s did not have a Content-Type set", entry.name)
            return RestoreOutcome()

        method = decode_content_type(entry.content_type)
        if method is None:
            logger.warning(
                "Cache entry %s had unsupported Content-Type %r",
                entry.name, entry.content_type,
            )
            return RestoreOutcome()

        if not resolved.lookup_only:
            async with temp_workspace(env) as workspace:
                archive = workspace / get_cache_filename(method)
                await store.download(entry.name, archive)
                await extract_tar(archive, method, env)

        matched_key = entry.name[len(resolved.scope) + 1:]
        logger.info("Cache restored from key: %s", matched_key)
        return RestoreOutcome(matched_key=matched_key)

    except _FATAL_RESTORE_ERRORS as e:
        return RestoreOutcome(fatal=e)
    except Exception as e:
        logger.warning("Failed to restore: %s", e)
        return RestoreOutcome()
