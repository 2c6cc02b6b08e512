# src/archive/commands.py — v1
"""Build the tar/zstd command lines that create, extract or list an archive.

Platform quirks live in two lookup tables rather than in branches:

- COMPRESSION_TABLE: how each compression method is wired in for a given
  (host family, tar variant). Looked up most specific first, with ``None``
  acting as a wildcard.
- GNU_EXTRA_FLAGS: flags GNU tar needs on particular hosts.

bsdtar on Windows cannot drive an external compressor, so for zstd there the
operation is split into a tar step and a separate zstd step around an
intermediate ``cache.tar``.

Everything here is pure: the functions return strings and never run them.
"""

from __future__ import annotations

from dataclasses import dataclass

from buildcache.archive.compression import get_cache_filename
from buildcache.config.environment import EnvContext
from buildcache.core.models import (
    ArchiveTool,
    CommandType,
    CompressionMethod,
    HostFamily,
    ToolVariant,
)

MANIFEST_FILENAME = "manifest.txt"
INTERMEDIATE_TARFILE = "cache.tar"


@dataclass(frozen=True)
class CompressionStage:
    """Compression wiring for one table row.

    When ``two_step`` is False, ``compress``/``decompress`` are extra tar
    arguments. When True they are standalone command templates with
    ``{archive}`` and ``{tarfile}`` placeholders.
    """

    compress: tuple[str, ...]
    decompress: tuple[str, ...]
    two_step: bool = False


_TableKey = tuple[HostFamily | None, ToolVariant | None, CompressionMethod]

COMPRESSION_TABLE: dict[_TableKey, CompressionStage] = {
    (None, None, CompressionMethod.GZIP): CompressionStage(
        compress=("-z",),
        decompress=("-z",),
    ),
    (None, None, CompressionMethod.ZSTD): CompressionStage(
        compress=("--use-compress-program", "zstdmt"),
        decompress=("--use-compress-program", "zstdmt"),
    ),
    (HostFamily.WINDOWS, None, CompressionMethod.ZSTD): CompressionStage(
        compress=("--use-compress-program", '"zstd -T0"'),
        decompress=("--use-compress-program", '"zstd -d"'),
    ),
    (HostFamily.WINDOWS, ToolVariant.BSD, CompressionMethod.ZSTD): CompressionStage(
        compress=("zstd -T0 --force -o {archive} {tarfile}",),
        decompress=("zstd -d --force -o {tarfile} {archive}",),
        two_step=True,
    ),
}

GNU_EXTRA_FLAGS: dict[HostFamily, tuple[str, ...]] = {
    # A drive-letter colon would otherwise be read as host:path.
    HostFamily.WINDOWS: ("--force-local",),
    HostFamily.DARWIN: ("--delay-directory-restore",),
}


def lookup_stage(
    host: HostFamily, variant: ToolVariant, method: CompressionMethod
) -> CompressionStage:
    """Return the most specific table row for the combination."""
    for key in ((host, variant, method), (host, None, method), (None, None, method)):
        stage = COMPRESSION_TABLE.get(key)
        if stage is not None:
            return stage
    raise KeyError(f"No compression wiring for {method.value!r}")


def normalize_path(path: str) -> str:
    """Forward slashes only; the string is passed to tar verbatim."""
    return path.replace("\\", "/")


def _quote(arg: str) -> str:
    if any(c.isspace() for c in arg) and not arg.startswith('"'):
        return f'"{arg}"'
    return arg


def _tar_args(
    tool: ArchiveTool,
    method: CompressionMethod,
    command_type: CommandType,
    env: EnvContext,
    archive: str,
    two_step: bool,
) -> list[str]:
    workdir = _quote(normalize_path(str(env.working_directory)))
    args = [_quote(tool.path)]

    if command_type is CommandType.CREATE:
        target = INTERMEDIATE_TARFILE if two_step else get_cache_filename(method)
        args += [
            "--posix",
            "-cf", target,
            "--exclude", target,
            "-P",
            "-C", workdir,
            "--files-from", MANIFEST_FILENAME,
        ]
    elif command_type is CommandType.EXTRACT:
        source = INTERMEDIATE_TARFILE if two_step else _quote(normalize_path(archive))
        args += ["-xf", source, "-P", "-C", workdir]
    else:
        source = INTERMEDIATE_TARFILE if two_step else _quote(normalize_path(archive))
        args += ["-tf", source, "-P"]

    if tool.variant is ToolVariant.GNU:
        args += GNU_EXTRA_FLAGS.get(env.host_family, ())

    return args


def build_commands(
    tool: ArchiveTool,
    method: CompressionMethod,
    command_type: CommandType,
    env: EnvContext,
    archive: str = "",
) -> list[str]:
    """Return the shell commands to run, in order.

    Create commands expect to run inside the directory holding the manifest;
    the archive is written there under its canonical filename. Extract and
    list commands take the path of an existing archive.
    """
    stage = lookup_stage(env.host_family, tool.variant, method)
    tar_args = _tar_args(tool, method, command_type, env, archive, stage.two_step)

    if command_type is CommandType.CREATE:
        compression = stage.compress
        archive_ref = get_cache_filename(method)
    else:
        compression = stage.decompress
        archive_ref = _quote(normalize_path(archive))

    if not stage.two_step:
        return [" ".join([*tar_args, *compression])]

    helper = " ".join(compression).format(
        archive=archive_ref, tarfile=INTERMEDIATE_TARFILE
    )
    tar_command = " ".join(tar_args)
    if command_type is CommandType.CREATE:
        return [tar_command, helper]
    return [helper, tar_command]
