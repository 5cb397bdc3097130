import os
import sys
from pathlib import Path

import pytest

from ignore_audit.errors import MissingRootError
from ignore_audit.patterns import compile_patterns
from ignore_audit.walker import ScanEntry, TreeWalker, walk


def _touch(root: Path, *rels: str) -> None:
    for rel in rels:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("x", encoding="utf-8")


def test_ignored_directory_is_recorded_once_and_pruned(tmp_path: Path):
    _touch(tmp_path, "node_modules/a/b/c.txt", "src/main.py")
    result = TreeWalker(compile_patterns("node_modules/\n")).scan(tmp_path)
    assert result.entries == {ScanEntry("node_modules", True)}
    assert "node_modules/a" not in result.visited_dirs
    assert "node_modules" not in result.visited_dirs
    assert "src" in result.visited_dirs


def test_files_in_kept_directories_are_evaluated(tmp_path: Path):
    _touch(tmp_path, "a.log", "src/b.log", "src/keep.log", "src/c.py")
    entries = walk(tmp_path, compile_patterns("*.log\n!keep.log\n"))
    assert {e.display for e in entries} == {"a.log", "src/b.log"}


def test_display_marks_directories():
    assert ScanEntry("dist", True).display == "dist/"
    assert ScanEntry("dist/out.js", False).display == "dist/out.js"


def test_git_directory_is_never_scanned(tmp_path: Path):
    _touch(tmp_path, ".git/config", ".git/objects/ab/cd", "x.tmp")
    result = TreeWalker(compile_patterns("*\n!x.tmp\n")).scan(tmp_path)
    assert result.entries == set()
    assert ".git" not in result.visited_dirs


def test_custom_excluded_dirs(tmp_path: Path):
    _touch(tmp_path, "vendor/lib.tmp", "app.tmp")
    entries = walk(
        tmp_path, compile_patterns("*.tmp\n"), excluded_dirs=(".git", "vendor")
    )
    assert {e.display for e in entries} == {"app.tmp"}


def test_negated_file_inside_ignored_directory_stays_hidden(tmp_path: Path):
    _touch(tmp_path, "build/keep.txt", "build/other.txt")
    entries = walk(tmp_path, compile_patterns("build/\n!build/keep.txt\n"))
    assert {e.display for e in entries} == {"build/"}


def test_trailing_double_star_reports_contents(tmp_path: Path):
    _touch(tmp_path, "cache/a.bin", "cache/sub/b.bin")
    entries = walk(tmp_path, compile_patterns("cache/**\n"))
    assert {e.display for e in entries} == {"cache/a.bin", "cache/sub/"}


def test_empty_pattern_set_skips_walk(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    result = TreeWalker(compile_patterns("")).scan(tmp_path)
    assert result.entries == set()
    assert result.visited_dirs == []


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(MissingRootError):
        walk(tmp_path / "absent", compile_patterns("*.o\n"))


@pytest.mark.skipif(
    sys.platform == "win32" or os.geteuid() == 0,
    reason="permission bits are not enforced",
)
def test_unreadable_directory_is_skipped_with_warning(tmp_path: Path):
    _touch(tmp_path, "locked/secret.tmp", "open/file.tmp")
    locked = tmp_path / "locked"
    locked.chmod(0)
    try:
        result = TreeWalker(compile_patterns("*.tmp\n")).scan(tmp_path)
    finally:
        locked.chmod(0o755)
    assert {e.display for e in result.entries} == {"open/file.tmp"}
    assert len(result.warnings) == 1
    assert result.warnings[0].context["path"] == "locked"


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
def test_symlinked_directory_is_not_followed(tmp_path: Path):
    _touch(tmp_path, "real/data.tmp")
    (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
    entries = walk(tmp_path, compile_patterns("*.tmp\nlink\n"))
    assert {e.display for e in entries} == {"real/data.tmp", "link"}
