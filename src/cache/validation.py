# src/cache/validation.py — v1
"""Key limits, checked before any network or disk activity."""

from __future__ import annotations

from typing import Sequence

from buildcache.core.errors import ValidationError

MAX_KEY_LENGTH = 512
MAX_KEY_COUNT = 10


def check_key(key: str) -> None:
    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError(
            f"Key Validation Error: {key} cannot be larger than {MAX_KEY_LENGTH} characters."
        )


def check_keys(keys: Sequence[str]) -> None:
    """Validate an ordered restore key list (primary key first)."""
    if len(keys) > MAX_KEY_COUNT:
        raise ValidationError(
            f"Key Validation Error: Keys are limited to a maximum of {MAX_KEY_COUNT}"
        )
    for key in keys:
        check_key(key)
