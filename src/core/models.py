# src/core/models.py — v2
"""Core domain models: compression methods, archive tools, cache entries.

These are shared by the archive, cache and api subpackages.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class CompressionMethod(str, Enum):
    """Compression applied to a cache archive. Recorded in the content type."""

    GZIP = "gzip"
    ZSTD = "zstd"


class ToolVariant(str, Enum):
    """Flavor of the system tar utility."""

    GNU = "gnu"
    BSD = "bsd"


class HostFamily(str, Enum):
    WINDOWS = "windows"
    DARWIN = "darwin"
    LINUX = "linux"


class CommandType(str, Enum):
    CREATE = "create"
    EXTRACT = "extract"
    LIST = "list"


class ArchiveTool(BaseModel):
    """Resolved archiving executable. Not persisted."""

    model_config = ConfigDict(frozen=True)

    path: str
    variant: ToolVariant


class CacheEntry(BaseModel):
    """Metadata of a stored cache object.

    ``name`` is ``{scope}/{key}``. ``content_type`` may be None when the
    listing that produced the entry does not carry it (S3).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    created_at: datetime | None = None
    content_type: str | None = None
    size: int | None = None


class RestoreOutcome(BaseModel):
    """Result of a restore attempt.

    Either a matched key, a miss (``matched_key is None``) or a fatal error
    that must be raised to the caller.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    matched_key: str | None = None
    fatal: Exception | None = None
