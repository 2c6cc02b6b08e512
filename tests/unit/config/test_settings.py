# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildcache.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_backend(self):
        s = Settings(_env_file=None)
        assert s.cache_backend == "s3"
        assert s.cache_local_root == Path("~/.buildcache/store")

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_format == "text"
        assert s.log_file is None
        assert s.log_rotation == "10MB"


class TestSettingsFromEnv:
    def test_reads_bucket(self, monkeypatch):
        monkeypatch.setenv("CACHE_BUCKET", "from-env")
        s = Settings(_env_file=None)
        assert s.cache_bucket == "from-env"

    def test_reads_ci_context(self, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/widgets")
        monkeypatch.setenv("RUNNER_TEMP", "/runner/_temp")
        s = Settings(_env_file=None)
        assert s.repository_name == "widgets"
        assert s.runner_temp == "/runner/_temp"

    def test_override_beats_env(self, monkeypatch):
        monkeypatch.setenv("CACHE_BUCKET", "from-env")
        s = load_settings(_env_file=None, cache_bucket="explicit")
        assert s.cache_bucket == "explicit"


class TestSettingsValidation:
    def test_scope_with_slash(self):
        with pytest.raises(ConfigurationError, match="CACHE_SCOPE"):
            Settings(_env_file=None, cache_scope="octo/widgets")

    def test_negative_retention(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_retention=-1)

    def test_invalid_backend(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache_backend="azure")

    def test_gcs_backend_and_bucket_fallback(self, monkeypatch):
        monkeypatch.delenv("CACHE_BUCKET", raising=False)
        monkeypatch.setenv("ACTIONS_GCS_CACHE_BUCKET", "ci-gcs")
        s = Settings(_env_file=None, cache_backend="gcs")
        assert s.cache_backend == "gcs"
        assert s.default_bucket == "ci-gcs"


class TestRepositoryName:
    def test_empty(self):
        assert Settings(_env_file=None, github_repository="").repository_name == ""

    def test_plain_name(self):
        assert Settings(_env_file=None, github_repository="widgets").repository_name == "widgets"
