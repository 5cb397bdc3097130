"""Version-control status collaborators.

A collaborator answers one question for a root directory: which existing
paths does version control ignore, and which are untracked but not ignored.
``GitCliStatus`` asks the ``git`` binary; ``PatternFileStatus`` evaluates
ignore files locally and knows nothing about tracking.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional, Protocol, Sequence

from pathspec.util import normalize_file

from .errors import vcs_unavailable
from .patterns import PatternSet, load_pattern_file
from .walker import DEFAULT_EXCLUDED_DIRS, TreeWalker

log = logging.getLogger(__name__)

Runner = Callable[[Sequence[str], Path], "subprocess.CompletedProcess[str]"]


@dataclass(frozen=True, slots=True)
class VcsStatus:
    ignored: FrozenSet[str] = frozenset()
    untracked_unignored: FrozenSet[str] = frozenset()
    # False when the collaborator has no tracking information at all
    reports_untracked: bool = True


class VcsStatusProvider(Protocol):
    name: str

    def status(self, root: Path) -> VcsStatus:
        ...


def normalize_vcs_path(path: str) -> str:
    """POSIX-relative form of a reported path, trailing '/' preserved."""
    is_dir = path.endswith("/")
    norm = normalize_file(path).strip("/")
    return f"{norm}/" if is_dir and norm else norm


def _default_runner(cmd: Sequence[str], cwd: Path) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        list(cmd),
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=False,
    )


def _split_nul(output: str) -> List[str]:
    return [item for item in output.split("\0") if item]


def parse_porcelain_ignored(output: str) -> List[str]:
    """Extract ``!!`` entries from ``git status --porcelain -z`` output."""
    ignored: List[str] = []
    tokens = _split_nul(output)
    i = 0
    while i < len(tokens):
        entry = tokens[i]
        i += 1
        code, path = entry[:2], entry[3:]
        if code[0] in "RC":
            # rename/copy records carry the source path as an extra field
            i += 1
        if code == "!!":
            ignored.append(path)
    return ignored


@dataclass
class GitCliStatus:
    """Collaborator backed by the git command line, one call per query."""

    git: str = "git"
    runner: Runner = field(default=_default_runner)
    name: str = "git"

    def _run(self, args: Sequence[str], cwd: Path) -> str:
        cmd = [self.git, *args]
        log.debug("Running git: %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            result = self.runner(cmd, cwd)
        except FileNotFoundError as exc:
            raise vcs_unavailable(
                f"{self.git} not found in PATH", {"command": cmd}
            ) from exc
        if result.returncode != 0:
            raise vcs_unavailable(
                (result.stderr or "").strip() or f"git exited with {result.returncode}",
                {"command": cmd, "returncode": result.returncode},
            )
        return result.stdout

    def status(self, root: Path) -> VcsStatus:
        prefix = self._run(["rev-parse", "--show-prefix"], root).strip()
        status_out = self._run(
            ["status", "--ignored", "--porcelain=v1", "-z", "--", "."], root
        )
        ignored = set()
        for path in parse_porcelain_ignored(status_out):
            if prefix and not path.startswith(prefix):
                continue
            rel = normalize_vcs_path(path[len(prefix):])
            if rel:
                ignored.add(rel)
        untracked_out = self._run(
            ["ls-files", "--others", "--exclude-standard", "-z"], root
        )
        untracked = {
            normalize_vcs_path(p) for p in _split_nul(untracked_out)
        }
        untracked.discard("")
        log.debug(
            "git reported %d ignored and %d untracked path(s)",
            len(ignored),
            len(untracked),
        )
        return VcsStatus(frozenset(ignored), frozenset(untracked))


@dataclass
class PatternFileStatus:
    """Offline collaborator evaluating VCS ignore files with the local matcher."""

    ignore_files: Sequence[str] = (".gitignore",)
    excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS
    comment_mode: str = "strict"
    case_sensitive: bool = True
    name: str = "patterns"

    def pattern_set(self, root: Path) -> PatternSet:
        sets = [
            load_pattern_file(
                root / name, display_name=name, comment_mode=self.comment_mode
            )
            for name in self.ignore_files
        ]
        return PatternSet.merge(*sets)

    def status(self, root: Path) -> VcsStatus:
        walker = TreeWalker(
            self.pattern_set(root),
            excluded_dirs=self.excluded_dirs,
            case_sensitive=self.case_sensitive,
        )
        result = walker.scan(root)
        return VcsStatus(
            ignored=frozenset(result.display_paths()), reports_untracked=False
        )


def find_repo_root(start: Path, runner: Optional[Runner] = None) -> Path:
    """Top of the enclosing git work tree, or ``start`` when there is none."""
    run = runner or _default_runner
    try:
        result = run(["git", "rev-parse", "--show-toplevel"], start)
    except FileNotFoundError:
        return start
    if result.returncode != 0 or not result.stdout.strip():
        return start
    return Path(result.stdout.strip())


__all__ = [
    "VcsStatus",
    "VcsStatusProvider",
    "GitCliStatus",
    "PatternFileStatus",
    "find_repo_root",
    "normalize_vcs_path",
    "parse_porcelain_ignored",
]
