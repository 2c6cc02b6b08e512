# src/config/environment.py — v1
"""Host environment snapshot injected into the archive and workspace code.

Nothing below buildcache.api reads os.environ, os.getcwd() or sys.platform
directly; they receive an EnvContext instead so tests can pin the platform,
working tree, temp root and search path.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from buildcache.config.settings import Settings
from buildcache.core.models import HostFamily


@dataclass(frozen=True)
class EnvContext:
    """Immutable view of the host the cache runs on."""

    platform: str
    working_directory: Path
    temp_root: Path
    search_path: str | None = None
    environ: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def host_family(self) -> HostFamily:
        if self.platform == "win32":
            return HostFamily.WINDOWS
        if self.platform == "darwin":
            return HostFamily.DARWIN
        return HostFamily.LINUX

    def getenv(self, name: str, default: str = "") -> str:
        return self.environ.get(name) or default

    @classmethod
    def from_settings(cls, settings: Settings) -> EnvContext:
        """Snapshot the current process environment."""
        environ = MappingProxyType(dict(os.environ))
        working_directory = Path(settings.github_workspace or os.getcwd())
        temp_root = (
            Path(settings.runner_temp)
            if settings.runner_temp
            else default_temp_root(sys.platform, environ)
        )
        return cls(
            platform=sys.platform,
            working_directory=working_directory,
            temp_root=temp_root,
            search_path=environ.get("PATH"),
            environ=environ,
        )


def default_temp_root(platform: str, environ: Mapping[str, str]) -> Path:
    """Temp root used when RUNNER_TEMP is not set."""
    if platform == "win32":
        base = environ.get("USERPROFILE") or "C:\\"
        return Path(base) / "actions" / "temp"
    if platform == "darwin":
        return Path("/Users/actions/temp")
    return Path("/home/actions/temp")
