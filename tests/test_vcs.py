import subprocess
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from ignore_audit.errors import VcsUnavailableError
from ignore_audit.vcs import (
    GitCliStatus,
    PatternFileStatus,
    find_repo_root,
    normalize_vcs_path,
    parse_porcelain_ignored,
)


class FakeGit:
    """Scripted stand-in for the git binary keyed by subcommand."""

    def __init__(self, outputs: Dict[str, str], returncode: int = 0, stderr: str = ""):
        self.outputs = outputs
        self.returncode = returncode
        self.stderr = stderr
        self.calls: List[List[str]] = []

    def __call__(self, cmd: Sequence[str], cwd: Path):
        self.calls.append(list(cmd))
        sub = cmd[1]
        return subprocess.CompletedProcess(
            list(cmd), self.returncode, self.outputs.get(sub, ""), self.stderr
        )


def _missing_git(cmd, cwd):
    raise FileNotFoundError(cmd[0])


def test_parse_porcelain_picks_ignored_entries_only():
    out = "!! node_modules/\0?? new.txt\0R  new_name.py\0old_name.py\0!! .env\0"
    assert parse_porcelain_ignored(out) == ["node_modules/", ".env"]


def test_normalize_vcs_path():
    assert normalize_vcs_path("./dist/") == "dist/"
    assert normalize_vcs_path("a/b.txt") == "a/b.txt"


def test_git_status_collects_ignored_and_untracked(tmp_path: Path):
    fake = FakeGit(
        {
            "rev-parse": "\n",
            "status": "!! node_modules/\0!! .env\0?? scratch/\0",
            "ls-files": "scratch/a.py\0scratch/b.py\0",
        }
    )
    status = GitCliStatus(runner=fake).status(tmp_path)
    assert status.ignored == {"node_modules/", ".env"}
    assert status.untracked_unignored == {"scratch/a.py", "scratch/b.py"}
    assert [c[1] for c in fake.calls] == ["rev-parse", "status", "ls-files"]
    assert "--ignored" in fake.calls[1]


def test_git_status_rebases_paths_for_subdirectory_root(tmp_path: Path):
    fake = FakeGit(
        {
            "rev-parse": "web/\n",
            "status": "!! web/.next/\0!! web/.env.local\0",
            "ls-files": "draft.md\0",
        }
    )
    status = GitCliStatus(runner=fake).status(tmp_path)
    assert status.ignored == {".next/", ".env.local"}
    assert status.untracked_unignored == {"draft.md"}


def test_not_a_repository_is_unavailable(tmp_path: Path):
    fake = FakeGit({}, returncode=128, stderr="fatal: not a git repository")
    with pytest.raises(VcsUnavailableError) as exc_info:
        GitCliStatus(runner=fake).status(tmp_path)
    assert "not a git repository" in exc_info.value.message


def test_missing_git_binary_is_unavailable(tmp_path: Path):
    with pytest.raises(VcsUnavailableError):
        GitCliStatus(runner=_missing_git).status(tmp_path)


def test_find_repo_root_falls_back_to_start(tmp_path: Path):
    assert find_repo_root(tmp_path, runner=_missing_git) == tmp_path
    fake = FakeGit({}, returncode=128)
    assert find_repo_root(tmp_path, runner=fake) == tmp_path
    fake = FakeGit({"rev-parse": "/work/repo\n"})
    assert find_repo_root(tmp_path, runner=fake) == Path("/work/repo")


def test_pattern_file_status_uses_gitignore(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("node_modules/\n.env\n", encoding="utf-8")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("x")
    (tmp_path / ".env").write_text("SECRET=1")
    (tmp_path / "app.js").write_text("x")
    status = PatternFileStatus().status(tmp_path)
    assert status.ignored == {"node_modules/", ".env"}
    assert not status.reports_untracked
