"""Context manager recording one shiftplan command run."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class RunTelemetryLogger(AbstractContextManager["RunTelemetryLogger"]):
    """Append a ``run`` record to a JSONL log when the block exits.

    Parameters
    ----------
    log_path:
        JSONL path where run records are appended.
    command:
        CLI command name (``"generate"``, ``"export"`` ...).
    schedule_path:
        Schedule file the run read, if any.
    config:
        Settings and filters in effect for the run.
    """

    log_path: Path
    command: str
    schedule_path: str | None = None
    config: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    metrics: dict[str, Any] = field(default_factory=dict, init=False)
    _start_time: float = field(default=0.0, init=False)
    _start_timestamp: str | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "RunTelemetryLogger":
        self._start_time = time.perf_counter()
        self._start_timestamp = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self._close(status="error", error=repr(exc))
            return False
        self._close(status="ok", error=None)
        return False

    def record(self, **metrics: Any) -> None:
        """Merge metrics into the record written on exit."""
        self.metrics.update(metrics)

    def elapsed(self) -> float:
        return time.perf_counter() - self._start_time

    def _close(self, *, status: str, error: str | None) -> None:
        if self._closed:
            return
        duration = self.elapsed() if self._start_time else 0.0
        record = {
            "record_type": "run",
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "command": self.command,
            "schedule_path": self.schedule_path,
            "status": status,
            "metrics": dict(self.metrics),
            "config": dict(self.config or {}),
            "error": error,
            "started_at": self._start_timestamp,
            "finished_at": _iso_now(),
            "duration_seconds": round(duration, 3),
        }
        append_jsonl(self.log_path, record)
        self._closed = True


__all__ = ["RunTelemetryLogger"]
