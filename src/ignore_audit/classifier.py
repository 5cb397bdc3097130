from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from .vcs import VcsStatus

__all__ = ["Category", "Classification", "classify", "covered_by"]


class Category(Enum):
    VCS_IGNORED = "vcs_ignored"
    VCS_UNTRACKED_UNIGNORED = "vcs_untracked_unignored"
    TOOL_IGNORED = "tool_ignored"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: Dict[Category, str] = {
    Category.VCS_IGNORED: "Git-ignored items (present on disk)",
    Category.VCS_UNTRACKED_UNIGNORED: "Untracked items (not ignored)",
    Category.TOOL_IGNORED: "Tool-ignored items",
}


def covered_by(path: str, claimed: Iterable[str]) -> bool:
    """True when ``path`` equals or lies inside one of the ``claimed`` paths."""
    return _Claims(claimed).covers(path)


class _Claims:
    def __init__(self, paths: Iterable[str]) -> None:
        self._exact: Set[str] = set()
        self._dirs: Set[str] = set()
        for p in paths:
            bare = p.rstrip("/")
            self._exact.add(bare)
            if p.endswith("/"):
                self._dirs.add(bare)

    def covers(self, path: str) -> bool:
        bare = path.rstrip("/")
        if bare in self._exact:
            return True
        parts = bare.split("/")
        for i in range(1, len(parts)):
            if "/".join(parts[:i]) in self._dirs:
                return True
        return False


@dataclass(slots=True)
class Classification:
    """Three disjoint path sets.

    Precedence is VCS-ignored, then tool-ignored, then untracked: the tool
    section lists what version control does not already ignore, and an
    untracked path already shown there (or inside a tool-ignored directory)
    is not listed again.

    ``vcs_ignored`` and ``vcs_untracked`` are None when version control was
    unavailable; ``vcs_untracked`` alone is None when the collaborator has no
    tracking information.
    """

    vcs_ignored: Optional[FrozenSet[str]]
    vcs_untracked: Optional[FrozenSet[str]]
    tool_ignored: FrozenSet[str] = frozenset()
    warnings: List[str] = field(default_factory=list)

    @property
    def vcs_available(self) -> bool:
        return self.vcs_ignored is not None

    def get(self, category: Category) -> Optional[FrozenSet[str]]:
        if category is Category.VCS_IGNORED:
            return self.vcs_ignored
        if category is Category.VCS_UNTRACKED_UNIGNORED:
            return self.vcs_untracked
        return self.tool_ignored

    def category_of(self, path: str) -> Optional[Category]:
        for category in Category:
            paths = self.get(category)
            if paths and path in paths:
                return category
        return None


def classify(
    tool_matches: Iterable[str], vcs_status: Optional[VcsStatus]
) -> Classification:
    """Bucket paths into the three categories.

    ``tool_matches`` are display paths (directories end with '/') produced by
    walking the tool ignore patterns.
    """
    tool = set(tool_matches)
    if vcs_status is None:
        return Classification(None, None, frozenset(tool))
    ignored = set(vcs_status.ignored)
    ignored_claims = _Claims(ignored)
    extra = {p for p in tool if not ignored_claims.covers(p)}
    claimed = _Claims(ignored | extra)
    untracked = {p for p in vcs_status.untracked_unignored if not claimed.covers(p)}
    return Classification(
        vcs_ignored=frozenset(ignored),
        vcs_untracked=(
            frozenset(untracked) if vcs_status.reports_untracked else None
        ),
        tool_ignored=frozenset(extra),
    )
