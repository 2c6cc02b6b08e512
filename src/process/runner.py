# src/process/runner.py — v1
"""Asynchronous execution of external commands (tar, zstd).

Commands produced by buildcache.archive.commands are plain shell strings,
so they are run through the shell. Output is captured combined.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Sequence

from buildcache.core.errors import CommandFailedError

logger = logging.getLogger(__name__)


async def run_command(
    command: str,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a shell command and return its combined stdout/stderr.

    Raises:
        CommandFailedError: If the command exits with a non-zero status.
    """
    logger.debug("Running: %s (cwd=%s)", command, cwd or ".")
    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    try:
        stdout, _ = await proc.communicate()
    except asyncio.CancelledError:
        # Do not leave tar/zstd running when the caller gives up.
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    output = stdout.decode(errors="replace") if stdout else ""
    if proc.returncode != 0:
        raise CommandFailedError(command, proc.returncode or -1, output.strip())
    if output:
        logger.debug(output.rstrip())
    return output


async def run_commands(
    commands: Sequence[str],
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run commands in order, stopping at the first failure."""
    for command in commands:
        await run_command(command, cwd=cwd, env=env)


async def get_version(
    app: str,
    additional_args: Sequence[str] = (),
    env: Mapping[str, str] | None = None,
) -> str:
    """Return the trimmed combined output of ``app [args] --version``.

    Never raises: a missing executable or a failing probe yields "".
    """
    args = [*additional_args, "--version"]
    logger.debug("Checking %s %s", app, " ".join(args))
    output = ""
    try:
        proc = await asyncio.create_subprocess_exec(
            app,
            *args,
            env=dict(env) if env is not None else None,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        stdout, _ = await proc.communicate()
        output = stdout.decode(errors="replace") if stdout else ""
    except OSError as e:
        logger.debug("%s", e)

    output = output.strip()
    if output:
        logger.debug(output)
    return output
