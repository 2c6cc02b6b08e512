# tests/unit/storage/test_workspace.py — v1
"""Tests for storage/workspace.py — scoped temp directories."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from buildcache.storage.workspace import (
    create_temp_directory,
    remove_temp_directory,
    temp_workspace,
)


class TestCreateTempDirectory:
    def test_unique_dirs_under_temp_root(self, env):
        a = create_temp_directory(env)
        b = create_temp_directory(env)
        assert a != b
        assert a.parent == env.temp_root
        assert a.is_dir()


class TestRemoveTempDirectory:
    def test_missing_is_ignored(self, tmp_path):
        remove_temp_directory(tmp_path / "missing")

    def test_errors_are_swallowed(self, tmp_path):
        with patch("buildcache.storage.workspace.shutil.rmtree", side_effect=PermissionError("busy")):
            remove_temp_directory(tmp_path)
        assert tmp_path.exists()


class TestTempWorkspace:
    @pytest.mark.asyncio
    async def test_removed_on_success(self, env):
        async with temp_workspace(env) as ws:
            (ws / "file").write_text("x")
        assert not ws.exists()

    @pytest.mark.asyncio
    async def test_removed_on_error(self, env):
        with pytest.raises(RuntimeError):
            async with temp_workspace(env) as ws:
                raise RuntimeError("boom")
        assert not ws.exists()

    @pytest.mark.asyncio
    async def test_removed_on_cancellation(self, env):
        entered = asyncio.Event()
        seen = []

        async def worker():
            async with temp_workspace(env) as ws:
                seen.append(ws)
                entered.set()
                await asyncio.sleep(60)

        task = asyncio.create_task(worker())
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not seen[0].exists()
