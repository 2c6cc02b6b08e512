# tests/unit/archive/test_tar.py — v2
"""Tests for archive/tar.py — command execution is mocked."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import AsyncMock, patch

import pytest

from buildcache.archive.tar import create_tar, extract_tar, list_tar, write_manifest
from buildcache.core.models import ArchiveTool, CompressionMethod, ToolVariant

TOOL = ArchiveTool(path="/usr/bin/tar", variant=ToolVariant.GNU)


class TestWriteManifest:
    def test_newline_separated(self, tmp_path):
        manifest = write_manifest(tmp_path, ["a", "b/c", "."])
        assert manifest.name == "manifest.txt"
        assert manifest.read_text() == "a\nb/c\n."


class TestCreateTar:
    @pytest.mark.asyncio
    async def test_runs_in_archive_dir(self, tmp_path, env):
        with patch("buildcache.archive.tar.run_commands", new=AsyncMock()) as run:
            archive = await create_tar(tmp_path, ["node_modules"], CompressionMethod.GZIP, env, TOOL)

        assert archive == tmp_path / "cache.tar.gzip"
        assert (tmp_path / "manifest.txt").read_text() == "node_modules"
        commands = run.await_args.args[0]
        assert len(commands) == 1
        assert "--files-from manifest.txt" in commands[0]
        assert run.await_args.kwargs["cwd"] == tmp_path

    @pytest.mark.asyncio
    async def test_resolves_tool_when_not_given(self, tmp_path, env):
        with patch(
            "buildcache.archive.tar.resolve_archive_tool", new=AsyncMock(return_value=TOOL)
        ) as resolve, patch("buildcache.archive.tar.run_commands", new=AsyncMock()):
            await create_tar(tmp_path, ["x"], CompressionMethod.ZSTD, env)
        resolve.assert_awaited_once_with(env)


class TestExtractTar:
    @pytest.mark.asyncio
    async def test_creates_workdir(self, tmp_path, env):
        env.working_directory.rmdir()
        archive = tmp_path / "dl" / "cache.tar.gzip"
        with patch("buildcache.archive.tar.run_commands", new=AsyncMock()) as run:
            await extract_tar(archive, CompressionMethod.GZIP, env, TOOL)
        assert env.working_directory.is_dir()
        assert run.await_args.kwargs["cwd"] == archive.parent
        assert f"-xf {archive.as_posix()}" in run.await_args.args[0][0]


class TestListTar:
    @pytest.mark.asyncio
    async def test_parses_members(self, tmp_path, env):
        archive = tmp_path / "cache.tar.gzip"
        with patch("buildcache.archive.tar.run_commands", new=AsyncMock()) as prepare, patch(
            "buildcache.archive.tar.run_command",
            new=AsyncMock(return_value="a/\na/b.txt\n\n"),
        ):
            members = await list_tar(archive, CompressionMethod.GZIP, env, TOOL)
        assert members == ["a/", "a/b.txt"]
        assert prepare.await_args.args[0] == []

    @pytest.mark.asyncio
    async def test_two_step_listing_stays_out_of_archive_dir(self, tmp_path, env):
        win_env = replace(env, platform="win32")
        bsd_tool = ArchiveTool(path="C:/Windows/System32/tar.exe", variant=ToolVariant.BSD)
        archive = tmp_path / "downloads" / "cache.tar.zstd"
        archive.parent.mkdir()
        archive.write_bytes(b"")

        with patch("buildcache.archive.tar.run_commands", new=AsyncMock()) as prepare, patch(
            "buildcache.archive.tar.run_command", new=AsyncMock(return_value="a\n"),
        ) as listing:
            members = await list_tar(archive, CompressionMethod.ZSTD, win_env, bsd_tool)

        assert members == ["a"]
        assert prepare.await_args.args[0][0].startswith("zstd -d")
        workspace = prepare.await_args.kwargs["cwd"]
        assert listing.await_args.kwargs["cwd"] == workspace
        assert workspace.parent == env.temp_root
        assert not workspace.exists()
        assert sorted(p.name for p in archive.parent.iterdir()) == ["cache.tar.zstd"]
