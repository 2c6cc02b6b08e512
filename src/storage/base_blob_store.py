# src/storage/base_blob_store.py — v1
"""Abstract blob store interface.

Objects are addressed by name (``{scope}/{key}``) and carry a content type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from buildcache.core.models import CacheEntry


class BaseBlobStore(ABC):
    """Unified interface for remote cache storage backends."""

    @abstractmethod
    async def upload(self, local_path: Path, name: str, content_type: str) -> None:
        """Upload a local file as object ``name``."""

    @abstractmethod
    async def list_by_prefix(self, prefix: str) -> list[CacheEntry]:
        """List objects whose name starts with ``prefix``, in name order."""

    @abstractmethod
    async def download(self, name: str, local_path: Path) -> None:
        """Download object ``name`` to ``local_path``."""

    @abstractmethod
    async def head(self, name: str) -> CacheEntry:
        """Fetch full metadata for a single object."""
