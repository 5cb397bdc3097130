"""Collapse matched paths into a short, depth-limited listing.

Directory matches are truncated to ``depth`` leading segments. File matches
keep their file name and at most ``depth - 1`` leading directories (never
fewer than one), so ``dist/assets/js/app.js`` becomes ``dist/app.js`` at the
default depth of 2. Keys lying inside a directory group are then dropped,
leaving only the highest-level entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

__all__ = ["DEFAULT_SUMMARY_DEPTH", "SummaryEntry", "summary_key", "summarize"]

DEFAULT_SUMMARY_DEPTH = 2


@dataclass(frozen=True, slots=True)
class SummaryEntry:
    display_path: str
    is_directory_group: bool

    def __str__(self) -> str:
        return self.display_path


def summary_key(path: str, depth: int = DEFAULT_SUMMARY_DEPTH) -> str:
    is_dir = path.endswith("/")
    parts = [p for p in path.strip("/").split("/") if p]
    if is_dir:
        return "/".join(parts[:depth]) + "/"
    if len(parts) > depth:
        parts = parts[: max(1, depth - 1)] + [parts[-1]]
    return "/".join(parts)


def _inside(path: str, group: str) -> bool:
    return path == group or path.startswith(group.rstrip("/") + "/")


def summarize(
    matched_paths: Iterable[str], summary_depth: int = DEFAULT_SUMMARY_DEPTH
) -> List[SummaryEntry]:
    if summary_depth < 1:
        raise ValueError(f"summary depth must be >= 1, got {summary_depth}")
    keys = {summary_key(p, summary_depth) for p in matched_paths if p.strip("/")}
    collapsed: List[str] = []
    groups: List[str] = []
    # sorted order puts every ancestor before its descendants
    for key in sorted(keys):
        if any(_inside(key, g) for g in groups):
            continue
        collapsed.append(key)
        if key.endswith("/"):
            groups.append(key)
    return [SummaryEntry(k, k.endswith("/")) for k in collapsed]
