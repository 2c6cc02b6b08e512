# src/config/settings.py — v3
"""Typed configuration loaded from the environment via pydantic-settings.

Single source of truth for deployment-specific settings: store backend and
bucket, scope discovery, CI workspace locations and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Blob store ===
    cache_bucket: str = ""
    cache_scope: str = ""
    cache_backend: Literal["s3", "gcs", "local"] = "s3"
    cache_local_root: Path = Path("~/.buildcache/store")
    cache_s3_region: str = ""
    cache_s3_endpoint_url: str = ""
    cache_gcs_project: str = ""
    # ACTIONS_GCS_CACHE_BUCKET, used when CACHE_BUCKET is unset
    actions_gcs_cache_bucket: str = ""

    # === CI context ===
    github_repository: str = ""
    github_workspace: str = ""
    runner_temp: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "local" and not str(self.cache_local_root).strip():
            errors.append("CACHE_BACKEND=local requires CACHE_LOCAL_ROOT")

        if "/" in self.cache_scope:
            errors.append("CACHE_SCOPE must not contain '/'")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def repository_name(self) -> str:
        """Name part of GITHUB_REPOSITORY (``owner/name`` -> ``name``)."""
        return self.github_repository.rstrip("/").rsplit("/", 1)[-1]

    @property
    def default_bucket(self) -> str:
        """CACHE_BUCKET, else ACTIONS_GCS_CACHE_BUCKET."""
        return self.cache_bucket or self.actions_gcs_cache_bucket


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
