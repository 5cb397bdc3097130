"""Render an AuditResult as labeled sections through a Reporter."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .base import Reporter, get_reporter, section

if TYPE_CHECKING:  # pragma: no cover
    from ..audit import AuditResult

__all__ = ["render_report", "NONE_MARKER"]

NONE_MARKER = "none"


def _tool_title(result: "AuditResult") -> str:
    from ..classifier import Category

    names = ", ".join(f.name for f in result.tool_files)
    return f"{Category.TOOL_IGNORED.label} (from {names})" if names else Category.TOOL_IGNORED.label


def _tool_empty_marker(result: "AuditResult") -> str:
    names = ", ".join(f.name for f in result.tool_files) or "tool ignore"
    if not result.tool_files_found:
        return f"{NONE_MARKER} (no {names} file found)"
    if result.tool_pattern_count == 0:
        return f"{NONE_MARKER} ({names} is empty)"
    return NONE_MARKER


def _items(rep: Reporter, paths: List[str], empty: str) -> None:
    if not paths:
        rep.item(empty)
        return
    for p in paths:
        rep.item(p)


def render_report(result: "AuditResult", reporter: Optional[Reporter] = None) -> None:
    from ..classifier import Category

    rep = reporter or get_reporter()
    rep.header(f"Repo root: {result.root}", root=str(result.root))
    for category in (Category.VCS_IGNORED, Category.VCS_UNTRACKED_UNIGNORED):
        entries = result.summaries.get(category)
        if entries is None:
            continue
        with section(category.label, rep):
            _items(rep, [e.display_path for e in entries], NONE_MARKER)
    entries = result.summaries.get(Category.TOOL_IGNORED) or []
    with section(_tool_title(result), rep):
        _items(rep, [e.display_path for e in entries], _tool_empty_marker(result))
    rep.flush()
