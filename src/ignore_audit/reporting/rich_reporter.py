from __future__ import annotations

import time
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from .base import Reporter, TaskStatus, TaskRecord, get_verbosity

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
    TaskStatus.SKIPPED: "→",
}


class RichReporter(Reporter):
    """Colored reporter with a spinner while a task is running."""

    def __init__(
        self,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = err_console or Console(
            stderr=True, highlight=False, soft_wrap=True
        )
        self._tasks: Dict[str, TaskRecord] = {}
        self._status: Optional[Status] = None

    def _stop_status(self) -> None:
        if self._status:
            try:
                self._status.stop()
            finally:
                self._status = None

    # Tasks --------------------------------------------------------------------
    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, meta=meta)
        self._stop_status()
        if self.err_console.is_terminal:
            self._status = self.err_console.status(escape(name), spinner="dots")
            self._status.start()

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        self._stop_status()
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        if get_verbosity() < 1 and status is TaskStatus.SUCCESS:
            return
        icon = _STATUS_ICON.get(status, "")
        self.err_console.print(
            f"{icon} {escape(rec.name)} ({rec.duration():.2f}s){escape(rec.stats())}"
        )

    # Report content -----------------------------------------------------------
    def header(self, text: str, **fields: Any) -> None:
        self._stop_status()
        self.console.print(f"[bold]{escape(text)}[/]")

    def section(self, title: str) -> None:
        self._stop_status()
        self.console.rule(f"[bold]{escape(title)}[/]", align="left")

    def item(self, text: str, **fields: Any) -> None:
        style = "cyan" if text.endswith("/") else ""
        line = escape(text)
        if style:
            line = f"[{style}]{line}[/]"
        self.console.print(f"  - {line}")

    # Messaging ----------------------------------------------------------------
    def status(self, message: str, **fields: Any) -> None:
        self.err_console.print(f"[green]INFO[/]: {escape(message)}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.err_console.print(f"[cyan]VERB{level}[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.err_console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def warning(self, message: str, **fields: Any) -> None:
        self.err_console.print(f"[yellow]WARN[/]: {escape(message)}")

    def flush(self) -> None:
        self._stop_status()
