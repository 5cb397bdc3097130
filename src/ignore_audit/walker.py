from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from .errors import E_UNREADABLE_ENTRY, UnreadableEntryError, missing_root
from .patterns import Matcher, PatternSet

log = logging.getLogger(__name__)

DEFAULT_EXCLUDED_DIRS: Tuple[str, ...] = (".git",)


@dataclass(frozen=True, slots=True)
class ScanEntry:
    relative_path: str
    is_directory: bool

    @property
    def display(self) -> str:
        return f"{self.relative_path}/" if self.is_directory else self.relative_path


@dataclass(slots=True)
class WalkResult:
    entries: Set[ScanEntry] = field(default_factory=set)
    warnings: List[UnreadableEntryError] = field(default_factory=list)
    visited_dirs: List[str] = field(default_factory=list)

    def display_paths(self) -> Set[str]:
        return {entry.display for entry in self.entries}


class TreeWalker:
    """Walk a directory tree and collect the entries a PatternSet ignores.

    Directories are evaluated before their contents; an ignored directory is
    recorded once and never entered.
    """

    def __init__(
        self,
        pattern_set: PatternSet,
        *,
        excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
        case_sensitive: bool = True,
    ) -> None:
        self._matcher = Matcher(pattern_set, case_sensitive=case_sensitive)
        self._excluded = frozenset(excluded_dirs)

    def scan(self, root: Path) -> WalkResult:
        root = Path(root)
        if not root.is_dir():
            raise missing_root(root)
        result = WalkResult()
        if not self._matcher.pattern_set:
            log.debug("no patterns from %s, skipping walk", self._matcher.pattern_set.source)
            return result
        stack: List[Tuple[Path, str]] = [(root, "")]
        while stack:
            current, rel_dir = stack.pop()
            result.visited_dirs.append(rel_dir)
            try:
                children = sorted(os.scandir(current), key=lambda e: e.name, reverse=True)
            except PermissionError as exc:
                log.warning("Skipping directory due to permission error: %s", current)
                result.warnings.append(
                    UnreadableEntryError(
                        code=E_UNREADABLE_ENTRY,
                        message=f"permission denied: {rel_dir or '.'}",
                        context={"path": rel_dir or ".", "error": str(exc)},
                    )
                )
                continue
            except FileNotFoundError:
                # removed while walking
                continue
            subdirs: List[Tuple[Path, str]] = []
            for child in children:
                rel = f"{rel_dir}/{child.name}" if rel_dir else child.name
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                if is_dir:
                    if child.name in self._excluded:
                        continue
                    if self._matcher.is_ignored(rel, True):
                        log.debug("pruned ignored directory: %s/", rel)
                        result.entries.add(ScanEntry(rel, True))
                        continue
                    subdirs.append((Path(child.path), rel))
                elif self._matcher.is_ignored(rel, False):
                    result.entries.add(ScanEntry(rel, False))
            stack.extend(subdirs)
        log.debug(
            "walk of %s: %d match(es), %d director(ies) visited",
            root,
            len(result.entries),
            len(result.visited_dirs),
        )
        return result


def walk(
    root: Path,
    pattern_set: PatternSet,
    *,
    excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    case_sensitive: bool = True,
) -> Set[ScanEntry]:
    walker = TreeWalker(
        pattern_set, excluded_dirs=excluded_dirs, case_sensitive=case_sensitive
    )
    return walker.scan(root).entries


__all__ = ["ScanEntry", "WalkResult", "TreeWalker", "walk", "DEFAULT_EXCLUDED_DIRS"]
