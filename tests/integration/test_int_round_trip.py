# tests/integration/test_int_round_trip.py — v1
"""End-to-end save/restore through the real tar and the local blob store."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from buildcache.api.facade import restore_cache, save_cache
from buildcache.archive.compression import get_cache_filename
from buildcache.archive.tar import list_tar
from buildcache.core.errors import ValidationError
from buildcache.core.models import CompressionMethod
from buildcache.storage.local_store import LocalBlobStore

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not sys.platform.startswith("linux") or shutil.which("tar") is None,
        reason="needs GNU tar on a Linux host",
    ),
]

FILES = {
    "deps/a.txt": b"alpha\n",
    "deps/sub/b.bin": bytes(range(256)),
    "build/out.o": b"\x7fELF",
    "build/notes.txt": b"not cached",
}


def _populate(root: Path) -> None:
    for rel, data in FILES.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(root=tmp_path / "store", bucket="ci-cache")


def _method(method: CompressionMethod):
    return patch(
        "buildcache.api.facade.get_compression_method",
        new=AsyncMock(return_value=method),
    )


async def _round_trip(method, settings, env, store, tmp_path):
    workdir = env.working_directory
    _populate(workdir)

    with _method(method):
        await save_cache(
            ["deps", "build/*.o"], "linux-abc", settings=settings, env=env, store=store,
        )

    shutil.rmtree(workdir)
    matched = await restore_cache(
        ["deps", "build/*.o"], "linux-", settings=settings, env=env, store=store,
    )
    assert matched == "linux-abc"

    expected = {k: v for k, v in FILES.items() if k != "build/notes.txt"}
    assert _snapshot(workdir) == expected

    archive = tmp_path / "inspect" / get_cache_filename(method)
    await store.download("myrepo/linux-abc", archive)
    members = await list_tar(archive, method, env)
    assert "deps/a.txt" in members
    assert "build/out.o" in members
    assert "build/notes.txt" not in members
    assert not any(m.endswith("manifest.txt") for m in members)


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_gzip(self, settings, env, store, tmp_path):
        await _round_trip(CompressionMethod.GZIP, settings, env, store, tmp_path)

    @pytest.mark.asyncio
    @pytest.mark.skipif(shutil.which("zstdmt") is None, reason="zstd helper not installed")
    async def test_zstd(self, settings, env, store, tmp_path):
        await _round_trip(CompressionMethod.ZSTD, settings, env, store, tmp_path)

    @pytest.mark.asyncio
    async def test_newest_of_several_entries(self, settings, env, store):
        workdir = env.working_directory
        with _method(CompressionMethod.GZIP):
            for version in ("1", "2"):
                (workdir / "v.txt").write_text(version)
                await save_cache(
                    ["v.txt"], f"build-{version}", settings=settings, env=env, store=store,
                )

        (workdir / "v.txt").unlink()
        assert await restore_cache(["v.txt"], "build-", settings=settings, env=env, store=store) == "build-2"
        assert (workdir / "v.txt").read_text() == "2"

    @pytest.mark.asyncio
    async def test_nothing_to_save(self, settings, env, store):
        with pytest.raises(ValidationError):
            await save_cache(["missing"], "k", settings=settings, env=env, store=store)
        assert await store.list_by_prefix("") == []

    @pytest.mark.asyncio
    async def test_corrupt_archive_is_a_miss(self, settings, env, store, tmp_path):
        bogus = tmp_path / "bogus"
        bogus.write_bytes(b"not a tarball")
        await store.upload(bogus, "myrepo/k", "application/x-buildcache-gzip")
        assert await restore_cache(["x"], "k", settings=settings, env=env, store=store) is None
