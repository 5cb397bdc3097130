from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "section",
    "task",
]


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    start_time: float = field(default_factory=time.time)
    status: TaskStatus = TaskStatus.RUNNING
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0

    def stats(self) -> str:
        keys = ("patterns", "entries", "ignored", "untracked")
        parts = [f"{k}={self.meta[k]}" for k in keys if k in self.meta]
        return f" [{' '.join(parts)}]" if parts else ""


_VERBOSITY: int = 0  # global verbosity level set by CLI (-v repeats)


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    """Output backend for audit reports and diagnostics.

    Report content (sections and their items) and diagnostics (status,
    warnings, errors, task completion lines) go through separate methods so
    a backend may route them to different streams.
    """

    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        raise NotImplementedError

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        raise NotImplementedError

    # Report content
    def header(self, text: str, **fields: Any) -> None:
        raise NotImplementedError

    def section(self, title: str) -> None:
        raise NotImplementedError

    def item(self, text: str, **fields: Any) -> None:
        raise NotImplementedError

    def end_section(self) -> None:
        pass

    # Diagnostics
    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stdout)
    return _ACTIVE_REPORTER


@contextmanager
def section(title: str, reporter: Optional[Reporter] = None):
    rep = reporter or get_reporter()
    rep.section(title)
    try:
        yield rep
    finally:
        rep.end_section()


@contextmanager
def task(task_id: str, name: str, reporter: Optional[Reporter] = None, **meta: Any):
    """Bracket a unit of work; the yielded dict collects final stats."""
    rep = reporter or get_reporter()
    rep.start_task(task_id, name, **meta)
    final: Dict[str, Any] = {}
    try:
        yield final
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED, **final)
        raise
    else:
        rep.end_task(task_id, TaskStatus.SUCCESS, **final)
