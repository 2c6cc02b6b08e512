# src/logging/context.py — v2
"""Contextual logging support — attach operation, cache key and scope to records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per save/restore call; contextvars keep concurrent calls apart.
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)
_scope: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scope", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    operation: str | None = None
    cache_key: str | None = None
    scope: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    return LogContext(
        operation=_operation.get(),
        cache_key=_cache_key.get(),
        scope=_scope.get(),
    )


def set_operation_context(operation: str, cache_key: str, scope: str | None = None) -> None:
    """Set context for one save/restore call."""
    _operation.set(operation)
    _cache_key.set(cache_key)
    _scope.set(scope)


def clear_context() -> None:
    """Reset all context variables."""
    _operation.set(None)
    _cache_key.set(None)
    _scope.set(None)
