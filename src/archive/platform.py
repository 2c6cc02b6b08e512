# src/archive/platform.py — v1
"""Locate the tar executable and classify it as GNU or BSD.

Windows: prefer the GNU tar bundled with Git for Windows, then a GNU tar on
PATH, then the system bsdtar in System32.
Darwin: prefer ``gtar`` (Homebrew GNU tar), else the system bsdtar.
Other hosts: ``tar`` on PATH, assumed GNU.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import PureWindowsPath

from buildcache.config.environment import EnvContext
from buildcache.core.errors import ToolNotFoundError
from buildcache.core.models import ArchiveTool, HostFamily, ToolVariant
from buildcache.process.runner import get_version

logger = logging.getLogger(__name__)

GNU_TAR_SIGNATURE = "gnu tar"


def _file_exists(path: str) -> bool:
    return os.path.isfile(path)


def _which(name: str, env: EnvContext) -> str | None:
    return shutil.which(name, path=env.search_path)


def _probe_env(env: EnvContext) -> dict[str, str] | None:
    if env.search_path is None:
        return None
    return {**env.environ, "PATH": env.search_path}


async def _gnu_tar_on_windows(env: EnvContext) -> str | None:
    program_files = env.getenv("PROGRAMFILES", "C:\\Program Files")
    git_tar = str(PureWindowsPath(program_files, "Git", "usr", "bin", "tar.exe"))
    if _file_exists(git_tar):
        return git_tar

    version_output = await get_version("tar", env=_probe_env(env))
    if GNU_TAR_SIGNATURE in version_output.lower():
        return _which("tar", env)
    return None


async def _resolve_windows(env: EnvContext) -> ArchiveTool:
    gnu_tar = await _gnu_tar_on_windows(env)
    if gnu_tar:
        return ArchiveTool(path=gnu_tar, variant=ToolVariant.GNU)

    system_drive = env.getenv("SYSTEMDRIVE", "C:")
    system_tar = str(PureWindowsPath(f"{system_drive}\\", "Windows", "System32", "tar.exe"))
    if not _file_exists(system_tar):
        raise ToolNotFoundError("tar", f"no GNU tar found and {system_tar} is missing")
    return ArchiveTool(path=system_tar, variant=ToolVariant.BSD)


async def _resolve_darwin(env: EnvContext) -> ArchiveTool:
    gnu_tar = _which("gtar", env)
    if gnu_tar:
        return ArchiveTool(path=gnu_tar, variant=ToolVariant.GNU)
    return ArchiveTool(path=_require("tar", env), variant=ToolVariant.BSD)


async def _resolve_default(env: EnvContext) -> ArchiveTool:
    return ArchiveTool(path=_require("tar", env), variant=ToolVariant.GNU)


def _require(name: str, env: EnvContext) -> str:
    found = _which(name, env)
    if not found:
        raise ToolNotFoundError(name, "not found on PATH")
    return found


_RESOLVERS = {
    HostFamily.WINDOWS: _resolve_windows,
    HostFamily.DARWIN: _resolve_darwin,
    HostFamily.LINUX: _resolve_default,
}


async def resolve_archive_tool(env: EnvContext) -> ArchiveTool:
    """Find the archiving executable for the host described by ``env``.

    Raises:
        ToolNotFoundError: If no usable tar exists.
    """
    tool = await _RESOLVERS[env.host_family](env)
    logger.debug("Using %s tar at %s", tool.variant.value, tool.path)
    return tool
