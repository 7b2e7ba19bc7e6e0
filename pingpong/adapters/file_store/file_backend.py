"""Flat-file counter backend — implements CounterBackend."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from pingpong.application.ports.counter_backend import CounterBackend
from pingpong.domain.errors import BackendUnavailable, MalformedState
from pingpong.domain.value_objects.counter_value import parse_counter_value

logger = logging.getLogger(__name__)


class FileCounterBackend(CounterBackend):
    """Counter stored as decimal ASCII in a single file.

    With ``atomic_writes`` the new value is written to a temporary file in the
    same directory and renamed over the old one. Without it the file is
    truncated and rewritten in place, which a crash can leave empty or
    partial; reads recover such content as 0.
    """

    def __init__(self, path: Path, atomic_writes: bool = True):
        self._path = Path(path)
        self._atomic_writes = atomic_writes

    @property
    def path(self) -> Path:
        return self._path

    async def ping(self) -> None:
        await self._run(self._probe)

    async def ensure_schema(self) -> None:
        try:
            await asyncio.to_thread(self._create_if_absent)
        except OSError as e:
            raise BackendUnavailable(f"Failed to create counter file {self._path}: {e}") from e

    async def read(self) -> int:
        return await self._run(self._read_value)

    async def increment_and_return(self) -> int:
        return await self._run(self._increment)

    async def close(self) -> None:
        return None

    # ─── Blocking helpers (run in a worker thread) ───────────────────

    async def _run(self, func):
        try:
            return await asyncio.to_thread(func)
        except OSError as e:
            raise BackendUnavailable(f"Counter file {self._path} unavailable: {e}") from e

    def _probe(self) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        if not os.access(directory, os.W_OK):
            raise PermissionError(f"Directory {directory} is not writable")

    def _create_if_absent(self) -> None:
        if self._path.exists():
            logger.info("Found existing counter value: %d", self._read_value())
            return
        self._write_value(0)
        logger.info("Initialized counter file %s to 0", self._path)

    def _read_value(self) -> int:
        try:
            raw = self._path.read_text(encoding="ascii", errors="replace")
        except FileNotFoundError:
            logger.warning("Counter file %s missing, treating counter as 0", self._path)
            return 0
        try:
            return parse_counter_value(raw)
        except MalformedState as e:
            logger.warning("%s in %s, treating counter as 0", e, self._path)
            return 0

    def _increment(self) -> int:
        old_value = self._read_value()
        self._write_value(old_value + 1)
        return old_value

    def _write_value(self, value: int) -> None:
        data = str(value)
        if not self._atomic_writes:
            with self._path.open("w", encoding="ascii") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            return

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        _fsync_directory(self._path.parent)


def _fsync_directory(directory: Path) -> None:
    """Persist a rename: the new directory entry survives a power loss."""
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
