# src/cache/paths.py — v1
"""Expand cache path patterns against the working tree.

Patterns follow the usual CI cache conventions: one glob per entry, ``**``
recursion, ``~`` expansion, and ``!pattern`` to exclude earlier matches.
Matched directories are returned as-is; tar recurses into them itself.
"""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def _absolute_pattern(pattern: str, workspace: Path) -> str:
    pattern = os.path.expanduser(pattern.strip())
    if not os.path.isabs(pattern):
        pattern = os.path.join(str(workspace), pattern)
    return os.path.normpath(pattern)


def _relative(path: str, workspace: Path) -> str:
    relative = os.path.relpath(path, str(workspace)).replace(os.sep, "/")
    return "." if relative in ("", ".") else relative


def resolve_paths(patterns: Sequence[str], workspace: Path) -> list[str]:
    """Return matches relative to ``workspace`` with ``/`` separators.

    Order follows the patterns, then sorted matches within a pattern.
    """
    matched: dict[str, None] = {}
    for raw in patterns:
        raw = raw.strip()
        if not raw or raw.startswith("#"):
            continue

        exclude = raw.startswith("!")
        pattern = _absolute_pattern(raw[1:] if exclude else raw, workspace)
        hits = sorted(glob.glob(pattern, recursive=True, include_hidden=True))

        for hit in hits:
            relative = _relative(hit, workspace)
            if exclude:
                matched.pop(relative, None)
            else:
                logger.debug("Matched: %s", relative)
                matched[relative] = None

    return list(matched)
