# src/main.py — v2
"""CLI entry point — save, restore, list commands.

Usage:
    buildcache save <key> <path>... [--bucket B] [--scope S]
    buildcache restore <key> <path>... [--restore-key K]... [--lookup-only]
    buildcache list <archive> --method {gzip,zstd}
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from buildcache.version import __version__

if TYPE_CHECKING:
    from buildcache.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="buildcache",
        description=f"buildcache v{__version__} — tar-based build cache on blob storage",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--backend", choices=["s3", "gcs", "local"], default=None,
        help="Blob store backend (default: CACHE_BACKEND or s3)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- save ---
    p_save = subparsers.add_parser("save", help="Archive paths and upload them")
    p_save.add_argument("key", help="Cache key")
    p_save.add_argument("paths", nargs="+", help="Path patterns to cache")
    _add_store_options(p_save)
    p_save.set_defaults(func=_cmd_save)

    # --- restore ---
    p_restore = subparsers.add_parser(
        "restore", help="Download and extract the best matching entry",
    )
    p_restore.add_argument("key", help="Primary cache key (prefix match)")
    p_restore.add_argument("paths", nargs="+", help="Path patterns that were cached")
    p_restore.add_argument(
        "-r", "--restore-key", dest="restore_keys", action="append", default=[],
        help="Fallback key, may be repeated (tried in order)",
    )
    p_restore.add_argument(
        "--lookup-only", action="store_true",
        help="Only report whether an entry exists",
    )
    _add_store_options(p_restore)
    p_restore.set_defaults(func=_cmd_restore)

    # --- list ---
    p_list = subparsers.add_parser("list", help="List the members of a cache archive")
    p_list.add_argument("archive", type=Path, help="Path to cache.tar.<method>")
    p_list.add_argument(
        "--method", choices=["gzip", "zstd"], default=None,
        help="Compression method (default: from the archive suffix)",
    )
    p_list.set_defaults(func=_cmd_list)

    return parser


def _add_store_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--bucket", default=None, help="Bucket (default: CACHE_BUCKET)")
    parser.add_argument(
        "--scope", default=None,
        help="Key namespace (default: CACHE_SCOPE or repository name)",
    )


async def _cmd_save(args: argparse.Namespace, settings: Settings) -> int:
    """Save paths under a key."""
    from buildcache.api.facade import save_cache
    from buildcache.api.models import UploadOptions

    options = UploadOptions(bucket=args.bucket, scope=args.scope)
    await save_cache(args.paths, args.key, options, settings=settings)
    return 0


async def _cmd_restore(args: argparse.Namespace, settings: Settings) -> int:
    """Restore paths; prints the matched key, nothing on a miss."""
    from buildcache.api.facade import restore_cache
    from buildcache.api.models import DownloadOptions

    options = DownloadOptions(
        bucket=args.bucket, scope=args.scope, lookup_only=args.lookup_only,
    )
    matched = await restore_cache(
        args.paths, args.key, args.restore_keys, options, settings=settings,
    )
    if matched is not None:
        print(matched)
    return 0


async def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """List archive members."""
    from buildcache.archive.tar import list_tar
    from buildcache.config.environment import EnvContext
    from buildcache.core.models import CompressionMethod

    archive: Path = args.archive.resolve()
    if not archive.is_file():
        logger.error("Archive not found: %s", archive)
        return 1

    method_name = args.method or archive.suffix.lstrip(".")
    try:
        method = CompressionMethod(method_name)
    except ValueError:
        logger.error("Cannot infer compression method from %s; use --method", archive.name)
        return 1

    env = EnvContext.from_settings(settings)
    for member in await list_tar(archive, method, env):
        print(member)
    return 0


def _load_settings(args: argparse.Namespace) -> Settings:
    from buildcache.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.backend:
        overrides["cache_backend"] = args.backend
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return load_settings(**overrides)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from buildcache.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("s3transfer").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
