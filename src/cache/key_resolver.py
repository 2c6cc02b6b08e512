# src/cache/key_resolver.py — v1
"""Resolve an ordered list of candidate keys to a single stored entry.

Per key, in order: list objects under ``{scope}/{key}``; an exact name match
wins outright (listings return it first when present), otherwise the most
recently created object under the prefix is used.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from buildcache.core.models import CacheEntry
from buildcache.storage.base_blob_store import BaseBlobStore

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def object_name(scope: str, key: str) -> str:
    return f"{scope}/{key}"


def _created(entry: CacheEntry) -> datetime:
    ts = entry.created_at or _EPOCH
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def newest_entry(entries: Sequence[CacheEntry]) -> CacheEntry:
    newest = entries[0]
    for entry in entries:
        if _created(newest) < _created(entry):
            newest = entry
    return newest


async def find_cache_entry(
    store: BaseBlobStore, keys: Sequence[str], scope: str
) -> CacheEntry | None:
    """Return the best entry for the first key with any match, or None."""
    for key in keys:
        prefix = object_name(scope, key)
        entries = await store.list_by_prefix(prefix)
        # Guard against stores whose prefix filtering is looser than ours.
        entries = [e for e in entries if e.name.startswith(prefix)]
        if not entries:
            logger.debug("No cache entries under %s", prefix)
            continue

        if entries[0].name == prefix:
            return entries[0]

        return newest_entry(entries)

    return None
