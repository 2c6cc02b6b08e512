# src/storage/workspace.py — v1
"""Scoped temporary directories for staging archives.

A workspace is a fresh ``{temp_root}/{uuid4}`` directory that is removed
when the ``async with`` block exits, including on error or cancellation.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from buildcache.config.environment import EnvContext

logger = logging.getLogger(__name__)


def create_temp_directory(env: EnvContext) -> Path:
    dest = env.temp_root / str(uuid.uuid4())
    dest.mkdir(parents=True, exist_ok=False)
    return dest


def remove_temp_directory(path: Path) -> None:
    """Remove ``path``; failures are logged and swallowed."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug("Failed to delete %s: %s", path, e)


@asynccontextmanager
async def temp_workspace(env: EnvContext) -> AsyncIterator[Path]:
    path = create_temp_directory(env)
    logger.debug("Workspace: %s", path)
    try:
        yield path
    finally:
        remove_temp_directory(path)
