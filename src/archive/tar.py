# src/archive/tar.py — v2
"""Create, extract and list cache archives with the host tar."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from buildcache.archive.commands import MANIFEST_FILENAME, build_commands
from buildcache.archive.compression import get_cache_filename
from buildcache.archive.platform import resolve_archive_tool
from buildcache.config.environment import EnvContext
from buildcache.core.models import ArchiveTool, CommandType, CompressionMethod
from buildcache.process.runner import run_command, run_commands
from buildcache.storage.workspace import temp_workspace

logger = logging.getLogger(__name__)


def write_manifest(archive_dir: Path, paths: Sequence[str]) -> Path:
    """Write the newline-separated list of paths tar reads with --files-from."""
    manifest = archive_dir / MANIFEST_FILENAME
    manifest.write_text("\n".join(paths), encoding="utf-8")
    return manifest


async def create_tar(
    archive_dir: Path,
    paths: Sequence[str],
    method: CompressionMethod,
    env: EnvContext,
    tool: ArchiveTool | None = None,
) -> Path:
    """Archive ``paths`` (relative to the working directory) into ``archive_dir``.

    Returns:
        Path of the written archive.
    """
    write_manifest(archive_dir, paths)
    tool = tool or await resolve_archive_tool(env)
    commands = build_commands(tool, method, CommandType.CREATE, env)
    await run_commands(commands, cwd=archive_dir)
    archive = archive_dir / get_cache_filename(method)
    logger.debug("Archive written: %s", archive)
    return archive


async def extract_tar(
    archive: Path,
    method: CompressionMethod,
    env: EnvContext,
    tool: ArchiveTool | None = None,
) -> None:
    """Extract ``archive`` into the working directory."""
    env.working_directory.mkdir(parents=True, exist_ok=True)
    tool = tool or await resolve_archive_tool(env)
    commands = build_commands(tool, method, CommandType.EXTRACT, env, str(archive))
    await run_commands(commands, cwd=archive.parent)


async def list_tar(
    archive: Path,
    method: CompressionMethod,
    env: EnvContext,
    tool: ArchiveTool | None = None,
) -> list[str]:
    """Return the member names of ``archive`` without extracting it.

    Commands run in a temporary workspace so an intermediate ``cache.tar``
    never lands beside the archive.
    """
    archive = archive.resolve()
    tool = tool or await resolve_archive_tool(env)
    commands = build_commands(tool, method, CommandType.LIST, env, str(archive))
    *prepare, listing = commands
    async with temp_workspace(env) as workspace:
        await run_commands(prepare, cwd=workspace)
        output = await run_command(listing, cwd=workspace)
    return [line for line in output.splitlines() if line.strip()]
