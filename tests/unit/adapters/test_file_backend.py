"""Tests for FileCounterBackend against a temporary directory."""

from __future__ import annotations

import os
import stat

import pytest

from pingpong.adapters.file_store.file_backend import FileCounterBackend
from pingpong.domain.errors import BackendUnavailable


@pytest.fixture
def counter_path(tmp_path):
    return tmp_path / "files" / "pingpong-count.txt"


@pytest.fixture(params=[True, False], ids=["atomic", "truncate"])
def backend(request, counter_path):
    return FileCounterBackend(counter_path, atomic_writes=request.param)


# ─── Schema / lifecycle ──────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ping_creates_parent_directory(backend, counter_path):
    await backend.ping()
    assert counter_path.parent.is_dir()


@pytest.mark.asyncio
async def test_ensure_schema_initializes_to_zero(backend, counter_path):
    await backend.ping()
    await backend.ensure_schema()
    assert counter_path.read_text() == "0"
    assert await backend.read() == 0


@pytest.mark.asyncio
async def test_ensure_schema_keeps_existing_value(backend, counter_path):
    counter_path.parent.mkdir(parents=True)
    counter_path.write_text("17")
    await backend.ensure_schema()
    assert counter_path.read_text() == "17"


@pytest.mark.asyncio
async def test_ping_fails_when_parent_is_a_file(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    backend = FileCounterBackend(blocker / "count.txt")
    with pytest.raises(BackendUnavailable):
        await backend.ping()


# ─── Increment / read ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_increment_returns_old_value_and_rewrites_file(backend, counter_path):
    await backend.ping()
    await backend.ensure_schema()

    assert await backend.increment_and_return() == 0
    assert await backend.increment_and_return() == 1
    assert counter_path.read_text() == "2"
    assert await backend.read() == 2


@pytest.mark.asyncio
async def test_restart_resumes_from_persisted_value(counter_path):
    first = FileCounterBackend(counter_path)
    await first.ping()
    await first.ensure_schema()
    for _ in range(3):
        await first.increment_and_return()
    await first.close()

    second = FileCounterBackend(counter_path)
    await second.ensure_schema()
    assert await second.read() == 3
    assert await second.increment_and_return() == 3


@pytest.mark.asyncio
async def test_atomic_writes_leave_no_temp_files(counter_path):
    backend = FileCounterBackend(counter_path, atomic_writes=True)
    await backend.ping()
    await backend.ensure_schema()
    await backend.increment_and_return()
    assert [p.name for p in counter_path.parent.iterdir()] == [counter_path.name]


@pytest.mark.asyncio
async def test_atomic_write_syncs_parent_directory(counter_path, monkeypatch):
    backend = FileCounterBackend(counter_path, atomic_writes=True)
    await backend.ping()
    await backend.ensure_schema()

    synced = []
    real_fsync = os.fsync

    def recording_fsync(fd):
        synced.append(stat.S_ISDIR(os.fstat(fd).st_mode))
        real_fsync(fd)

    monkeypatch.setattr(os, "fsync", recording_fsync)
    await backend.increment_and_return()

    # file contents first, then the directory holding the renamed entry
    assert synced == [False, True]
    assert counter_path.read_text() == "1"


# ─── Recovery ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_truncated_file_reads_as_zero(backend, counter_path):
    """Crash between truncate and rewrite leaves an empty file."""
    counter_path.parent.mkdir(parents=True)
    counter_path.write_text("")
    await backend.ensure_schema()
    assert await backend.read() == 0


@pytest.mark.asyncio
async def test_garbage_content_reads_as_zero(backend, counter_path):
    counter_path.parent.mkdir(parents=True)
    counter_path.write_text("12\x00\x00garbage")
    await backend.ensure_schema()
    assert await backend.read() == 0


@pytest.mark.asyncio
async def test_increment_recovers_from_garbage(backend, counter_path):
    counter_path.parent.mkdir(parents=True)
    counter_path.write_text("not a number")
    assert await backend.increment_and_return() == 0
    assert counter_path.read_text() == "1"


@pytest.mark.asyncio
async def test_missing_file_reads_as_zero(backend):
    assert await backend.read() == 0
