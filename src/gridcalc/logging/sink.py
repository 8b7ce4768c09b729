"""Filesystem NDJSON event sink with locked appends.

Events are appended as one JSON line per event to
``<log_dir>/logs/events.ndjson``.  Writes use
``json.dumps(sort_keys=True)`` for deterministic output.

Appends hold an exclusive ``fcntl.flock`` on the file and reads hold a
shared one.  Where ``fcntl`` is unavailable (Windows) locking is skipped.
"""

from __future__ import annotations

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator

from gridcalc.logging.events import GridcalcEvent

try:
    import fcntl
except ImportError:  # Windows
    fcntl = None  # type: ignore[assignment]

# Default tail-read size (2 MB)
_DEFAULT_TAIL_BYTES = 2 * 1024 * 1024


@contextmanager
def _locked(fh: IO[Any], *, exclusive: bool) -> Iterator[None]:
    if fcntl is None:
        yield
        return
    fcntl.flock(fh.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    try:
        yield
    finally:
        fcntl.flock(fh.fileno(), fcntl.LOCK_UN)


class EventSink:
    """Append-only NDJSON log of gridcalc events."""

    def __init__(self, log_dir: Path, *, fsync: bool = False, tail_bytes: int | None = None) -> None:
        self.logs_dir = Path(log_dir) / "logs"
        self._fsync = fsync
        self._tail_bytes = tail_bytes if tail_bytes is not None else _DEFAULT_TAIL_BYTES
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self.logs_dir / "events.ndjson"

    def write(self, event: GridcalcEvent) -> None:
        """Append *event* to the log."""
        line = json.dumps(event.model_dump(mode="json"), sort_keys=True, default=str) + "\n"
        with open(self.path, "a", encoding="utf-8") as fh, _locked(fh, exclusive=True):
            fh.write(line)
            fh.flush()
            if self._fsync:
                os.fsync(fh.fileno())

    def read(
        self,
        *,
        level: str | None = None,
        event_type: str | None = None,
        limit: int = 200,
    ) -> list[dict[str, Any]]:
        """Read events most-recent-first, with optional filters.

        Only the last ``tail_bytes`` of the file are read; corrupt lines
        are skipped.
        """
        events = []
        for line in self._tail_lines():
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if level and event.get("level") != level:
                continue
            if event_type and event.get("event_type") != event_type:
                continue
            events.append(event)
        events.reverse()
        return events[:min(limit, 2000)]

    def _tail_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        with open(self.path, "rb") as fh, _locked(fh, exclusive=False):
            size = os.fstat(fh.fileno()).st_size
            if size > self._tail_bytes:
                fh.seek(size - self._tail_bytes)
                fh.readline()  # partial line
            data = fh.read()
        return [line for line in data.decode("utf-8", errors="replace").splitlines() if line.strip()]
