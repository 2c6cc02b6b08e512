# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides a pinned host environment, isolated settings and an in-memory blob
store. Nothing here touches the network.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType

import pytest

from buildcache.config.environment import EnvContext
from buildcache.config.settings import Settings
from buildcache.core.models import CacheEntry
from buildcache.storage.base_blob_store import BaseBlobStore


class MemoryBlobStore(BaseBlobStore):
    """In-memory blob store that records every call."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.meta: dict[str, CacheEntry] = {}
        self.calls: list[tuple[str, str]] = []

    def add(
        self,
        name: str,
        data: bytes = b"",
        content_type: str | None = None,
        created_at: datetime | None = None,
    ) -> None:
        self.objects[name] = data
        self.meta[name] = CacheEntry(
            name=name,
            created_at=created_at or datetime.now(timezone.utc),
            content_type=content_type,
            size=len(data),
        )

    async def upload(self, local_path: Path, name: str, content_type: str) -> None:
        self.calls.append(("upload", name))
        self.add(name, Path(local_path).read_bytes(), content_type)

    async def list_by_prefix(self, prefix: str) -> list[CacheEntry]:
        self.calls.append(("list", prefix))
        return [self.meta[n] for n in sorted(self.meta) if n.startswith(prefix)]

    async def download(self, name: str, local_path: Path) -> None:
        self.calls.append(("download", name))
        Path(local_path).write_bytes(self.objects[name])

    async def head(self, name: str) -> CacheEntry:
        self.calls.append(("head", name))
        return self.meta[name]


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def env(tmp_path: Path, workdir: Path) -> EnvContext:
    """Linux host rooted in tmp_path, using the real PATH."""
    return EnvContext(
        platform="linux",
        working_directory=workdir,
        temp_root=tmp_path / "temp",
        search_path=os.environ.get("PATH"),
        environ=MappingProxyType(dict(os.environ)),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        cache_bucket="ci-cache",
        cache_scope="myrepo",
        cache_backend="local",
        cache_local_root=tmp_path / "store",
        github_repository="",
    )


@pytest.fixture
def memory_store() -> MemoryBlobStore:
    return MemoryBlobStore()
