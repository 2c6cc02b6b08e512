# src/core/errors.py — v1
"""Exception taxonomy for cache save/restore.

ValidationError, ConfigUnsetError and ToolNotFoundError are always fatal.
CommandFailedError is fatal during save and degraded to a miss on restore.
"""

from __future__ import annotations

MAX_ERROR = 1024 * 5  # Maximum length of captured command output to keep
TRUNC_PREFIX = "[TRUNC]"  # Marks captured output that was truncated


class CacheError(Exception):
    """Base class for exceptions raised by buildcache."""


class ValidationError(CacheError):
    """Caller input violates a hard limit (key length, key count, empty paths)."""


class ConfigUnsetError(CacheError):
    """Required configuration (bucket, scope) is missing."""


class ToolNotFoundError(CacheError):
    """No usable archiving executable exists on the host."""

    def __init__(self, tool: str, detail: str = "") -> None:
        message = f"Unable to locate executable file: {tool}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.tool = tool


class CommandFailedError(CacheError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, output: str = "") -> None:
        if len(output) > MAX_ERROR:
            output = TRUNC_PREFIX + output[-MAX_ERROR:]
        program = command.split(" ")[0]
        m = f"{program} failed with exit code {returncode}"
        if output:
            m = f"{m}: {output!r}"
        super().__init__(m)
        self.command = command
        self.returncode = returncode
        self.output = output
