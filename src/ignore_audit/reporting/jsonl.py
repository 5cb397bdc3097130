from __future__ import annotations

import json
import sys
import time
from typing import Any, Dict, List, Optional
from .base import Reporter, TaskStatus, TaskRecord, get_verbosity


class JsonLinesReporter(Reporter):
    """Machine-readable JSON lines reporter.

    Each report section is emitted as one ``section`` event carrying all of
    its items, once the section is closed.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}
        self._title: Optional[str] = None
        self._items: List[str] = []

    def _emit(self, obj: dict):
        self.stream.write(json.dumps(obj, sort_keys=True) + "\n")

    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, meta=meta)
        self._emit({"event": "task_start", "id": task_id, "name": name, **meta})

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
        self._emit(
            {
                "event": "task_end",
                "id": task_id,
                "status": status.name.lower(),
                "duration_seconds": rec.duration(),
                **rec.meta,
            }
        )

    def header(self, text: str, **fields: Any) -> None:
        self._emit({"event": "header", "text": text, **fields})

    def section(self, title: str) -> None:
        self.end_section()
        self._title = title
        self._items = []

    def item(self, text: str, **fields: Any) -> None:
        self._items.append(text)

    def end_section(self) -> None:
        if self._title is None:
            return
        self._emit(
            {"event": "section", "title": self._title, "items": self._items}
        )
        self._title = None
        self._items = []

    def status(self, message: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": "info", **fields}
        )

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._emit(
            {
                "event": "status",
                "message": message,
                "level": f"verbose{level}",
                "vlevel": level,
                **fields,
            }
        )

    def error(self, message: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": "error", **fields}
        )

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(
            {
                "event": "status",
                "message": message,
                "level": "warning",
                **fields,
            }
        )

    def flush(self) -> None:
        self.end_section()
