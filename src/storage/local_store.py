# src/storage/local_store.py — v2
"""Filesystem blob store (CACHE_BACKEND=local).

Each object is a data file plus a ``.meta.json`` sidecar holding its real
name, content type and creation time. Data files are named by the SHA-256 of
the object name, so any valid key fits the filesystem's name limit and keys
containing ``/`` stay inside the bucket directory.
"""

from __future__ import annotations

import hashlib
import json
import shutil
from datetime import datetime, timezone
from pathlib import Path

from buildcache.core.models import CacheEntry
from buildcache.storage.base_blob_store import BaseBlobStore

_META_SUFFIX = ".meta.json"


class LocalBlobStore(BaseBlobStore):
    """Store cache objects under ``root/bucket`` on the local filesystem."""

    def __init__(self, root: str | Path, bucket: str) -> None:
        self._dir = Path(root).expanduser() / bucket

    @staticmethod
    def _digest(name: str) -> str:
        return hashlib.sha256(name.encode("utf-8")).hexdigest()

    def _data_path(self, name: str) -> Path:
        return self._dir / self._digest(name)

    def _meta_path(self, name: str) -> Path:
        return self._dir / (self._digest(name) + _META_SUFFIX)

    async def upload(self, local_path: Path, name: str, content_type: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(local_path, self._data_path(name))
        meta = {
            "name": name,
            "content_type": content_type,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._meta_path(name).write_text(json.dumps(meta), encoding="utf-8")

    async def list_by_prefix(self, prefix: str) -> list[CacheEntry]:
        if not self._dir.is_dir():
            return []
        entries = []
        for meta_path in self._dir.glob("*" + _META_SUFFIX):
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
            name = meta.get("name", "")
            if name.startswith(prefix) and self._data_path(name).is_file():
                entries.append(self._entry(name, meta))
        return sorted(entries, key=lambda e: e.name)

    async def download(self, name: str, local_path: Path) -> None:
        data = self._data_path(name)
        if not data.is_file():
            raise FileNotFoundError(f"No such cache object: {name}")
        local_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(data, local_path)

    async def head(self, name: str) -> CacheEntry:
        if not self._data_path(name).is_file():
            raise FileNotFoundError(f"No such cache object: {name}")
        meta_path = self._meta_path(name)
        meta: dict = {}
        if meta_path.is_file():
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
        return self._entry(name, meta)

    def _entry(self, name: str, meta: dict) -> CacheEntry:
        stat = self._data_path(name).stat()
        created_at = meta.get("created_at")
        return CacheEntry(
            name=name,
            created_at=(
                datetime.fromisoformat(created_at)
                if created_at
                else datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
            ),
            content_type=meta.get("content_type"),
            size=stat.st_size,
        )
