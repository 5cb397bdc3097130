from __future__ import annotations

import sys
import time
from typing import Any, Dict
from .base import Reporter, TaskStatus, TaskRecord, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",  # success
    TaskStatus.FAILED: "✖",  # failure
    TaskStatus.SKIPPED: "→",  # skipped / forward
}


class PlainReporter(Reporter):
    """Plain deterministic reporter.

    Sections and items go to ``stream`` (stdout by default), diagnostics to
    ``err_stream`` (stderr by default).
    """

    def __init__(self, stream=None, err_stream=None, use_color: bool | None = None):
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr
        self.use_color = (
            use_color
            if use_color is not None
            else getattr(self.err_stream, "isatty", lambda: False)()
        )
        self._tasks: Dict[str, TaskRecord] = {}
        self._first_section = True

    def _c(self, code: str, text: str):
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, meta=meta)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        if get_verbosity() < 1 and status is TaskStatus.SUCCESS:
            return
        icon = ICONS.get(status, "?")
        self.err_stream.write(
            f" {icon} {rec.name} ({rec.duration():.2f}s){rec.stats()}\n"
        )

    def header(self, text: str, **fields: Any) -> None:
        self.stream.write(f"{text}\n")
        self._first_section = False

    def section(self, title: str) -> None:
        if not self._first_section:
            self.stream.write("\n")
        self._first_section = False
        self.stream.write(f"{title}\n")

    def item(self, text: str, **fields: Any) -> None:
        self.stream.write(f"  - {text}\n")

    def status(self, message: str, **fields: Any) -> None:
        prefix = self._c("32", "INFO")
        self.err_stream.write(f"{prefix}: {message}\n")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        prefix = self._c("36", f"VERB{level}")
        self.err_stream.write(f"{prefix}: {message}\n")

    def error(self, message: str, **fields: Any) -> None:
        prefix = self._c("31", "ERROR")
        self.err_stream.write(f"{prefix}: {message}\n")

    def warning(self, message: str, **fields: Any) -> None:
        prefix = self._c("33", "WARN")
        self.err_stream.write(f"{prefix}: {message}\n")

    def flush(self) -> None:
        for s in (self.stream, self.err_stream):
            flush = getattr(s, "flush", None)
            if flush:
                flush()
