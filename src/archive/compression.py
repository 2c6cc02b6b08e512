# src/archive/compression.py — v1
"""Compression method selection and its content-type encoding."""

from __future__ import annotations

import logging

from buildcache.config.environment import EnvContext
from buildcache.core.models import CompressionMethod
from buildcache.process.runner import get_version

logger = logging.getLogger(__name__)

CONTENT_TYPE_PREFIX = "application/x-buildcache-"


def get_cache_filename(method: CompressionMethod) -> str:
    """Archive filename for ``method``: ``cache.tar.gzip`` or ``cache.tar.zstd``."""
    return f"cache.tar.{method.value}"


def encode_content_type(method: CompressionMethod) -> str:
    return f"{CONTENT_TYPE_PREFIX}{method.value}"


def decode_content_type(content_type: str | None) -> CompressionMethod | None:
    """Recover the compression method from a stored content type.

    Returns None when the content type is missing, foreign or names an
    unknown method.
    """
    if not content_type or not content_type.startswith(CONTENT_TYPE_PREFIX):
        return None
    try:
        return CompressionMethod(content_type[len(CONTENT_TYPE_PREFIX):])
    except ValueError:
        return None


async def get_compression_method(env: EnvContext) -> CompressionMethod:
    """Use zstd when the zstd helper answers a version query, else gzip."""
    probe_env = None
    if env.search_path is not None:
        probe_env = {**env.environ, "PATH": env.search_path}
    version_output = await get_version("zstd", ["--quiet"], env=probe_env)
    if not version_output:
        return CompressionMethod.GZIP
    logger.debug("zstd version: %s", version_output)
    return CompressionMethod.ZSTD
