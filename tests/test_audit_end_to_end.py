"""End-to-end audit scenarios using the offline pattern collaborator."""

import io
import json
from pathlib import Path

import pytest

from ignore_audit.audit import run_audit
from ignore_audit.classifier import Category
from ignore_audit.config import AuditConfig
from ignore_audit.errors import MissingRootError, vcs_unavailable
from ignore_audit.reporting import JsonLinesReporter, PlainReporter, render_report
from ignore_audit.vcs import VcsStatus


def _touch(root: Path, *rels: str) -> None:
    for rel in rels:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("x", encoding="utf-8")


@pytest.fixture()
def sample_repo(tmp_path: Path) -> Path:
    _touch(tmp_path, "node_modules/pkg/index.js", ".env", "dist/out.js", "src/app.js")
    (tmp_path / ".gitignore").write_text("node_modules/\n.env\n", encoding="utf-8")
    (tmp_path / ".claude").mkdir()
    (tmp_path / ".claude" / ".claudeignore").write_text("dist/\n", encoding="utf-8")
    return tmp_path


class UnavailableVcs:
    name = "git"

    def status(self, root: Path) -> VcsStatus:
        raise vcs_unavailable("fatal: not a git repository")


def _render(result) -> str:
    out, err = io.StringIO(), io.StringIO()
    render_report(result, PlainReporter(stream=out, err_stream=err, use_color=False))
    return out.getvalue()


def test_end_to_end_sections(sample_repo: Path):
    result = run_audit(AuditConfig(root=sample_repo, vcs_backend="patterns"))
    summaries = result.summaries
    assert [e.display_path for e in summaries[Category.VCS_IGNORED]] == [
        ".env",
        "node_modules/",
    ]
    assert [e.display_path for e in summaries[Category.TOOL_IGNORED]] == ["dist/"]
    text = _render(result)
    assert "index.js" not in text
    assert "out.js" not in text
    assert "  - dist/\n" in text
    assert "  - node_modules/\n" in text


def test_tool_file_overlapping_vcs_is_not_double_reported(sample_repo: Path):
    (sample_repo / ".claude" / ".claudeignore").write_text(
        "dist/\nnode_modules/\n", encoding="utf-8"
    )
    result = run_audit(AuditConfig(root=sample_repo, vcs_backend="patterns"))
    assert result.classification.tool_ignored == {"dist/"}


def test_vcs_unavailable_degrades_to_tool_only(sample_repo: Path):
    result = run_audit(AuditConfig(root=sample_repo), UnavailableVcs())
    assert result.summaries[Category.VCS_IGNORED] is None
    assert [e.display_path for e in result.summaries[Category.TOOL_IGNORED]] == [
        "dist/"
    ]
    assert any("unavailable" in w for w in result.warnings)
    text = _render(result)
    assert "Git-ignored" not in text
    assert "Tool-ignored items (from .claude/.claudeignore)" in text


def test_missing_tool_file_marker(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    result = run_audit(AuditConfig(root=tmp_path, vcs_backend="none"))
    assert "  - none (no .claude/.claudeignore file found)\n" in _render(result)


def test_empty_tool_file_marker(tmp_path: Path):
    _touch(tmp_path, "a.txt")
    (tmp_path / ".claude").mkdir()
    (tmp_path / ".claude" / ".claudeignore").write_text("# nothing\n", encoding="utf-8")
    result = run_audit(AuditConfig(root=tmp_path, vcs_backend="none"))
    assert "  - none (.claude/.claudeignore is empty)\n" in _render(result)


def test_no_matches_marker(sample_repo: Path):
    (sample_repo / ".claude" / ".claudeignore").write_text("*.nothing\n", encoding="utf-8")
    result = run_audit(AuditConfig(root=sample_repo, vcs_backend="patterns"))
    text = _render(result)
    assert text.rstrip().endswith("  - none")


def test_git_backend_with_scripted_status(sample_repo: Path):
    class ScriptedVcs:
        name = "git"

        def status(self, root: Path) -> VcsStatus:
            return VcsStatus(
                ignored=frozenset({"node_modules/", ".env"}),
                untracked_unignored=frozenset({"src/app.js"}),
            )

    result = run_audit(AuditConfig(root=sample_repo), ScriptedVcs())
    text = _render(result)
    assert "Untracked items (not ignored)\n  - src/app.js\n" in text


def test_json_reporter_emits_sections(sample_repo: Path):
    result = run_audit(AuditConfig(root=sample_repo, vcs_backend="patterns"))
    buf = io.StringIO()
    render_report(result, JsonLinesReporter(stream=buf))
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    sections = {e["title"]: e["items"] for e in events if e["event"] == "section"}
    assert sections["Git-ignored items (present on disk)"] == [".env", "node_modules/"]
    assert sections["Tool-ignored items (from .claude/.claudeignore)"] == ["dist/"]


def test_missing_root_is_fatal(tmp_path: Path):
    with pytest.raises(MissingRootError):
        run_audit(AuditConfig(root=tmp_path / "gone", vcs_backend="none"))


def test_invalid_range_line_is_a_warning(tmp_path: Path):
    _touch(tmp_path, "a.txt", "b.md")
    (tmp_path / ".claude").mkdir()
    (tmp_path / ".claude" / ".claudeignore").write_text(
        "[z-a].txt\n*.txt\n", encoding="utf-8"
    )
    result = run_audit(AuditConfig(root=tmp_path, vcs_backend="none"))
    assert result.classification.tool_ignored == {"a.txt"}
    assert any("[z-a].txt" in w for w in result.warnings)


def test_untracked_files_under_tool_ignored_directory_are_not_listed(sample_repo: Path):
    _touch(sample_repo, "sub/keep.py")
    (sample_repo / ".claude" / ".claudeignore").write_text(
        "dist/\n*.py\n", encoding="utf-8"
    )

    class ScriptedVcs:
        name = "git"

        def status(self, root: Path) -> VcsStatus:
            return VcsStatus(
                ignored=frozenset({"node_modules/", ".env"}),
                untracked_unignored=frozenset(
                    {"dist/out.js", "sub/keep.py", "src/app.js", ".gitignore"}
                ),
            )

    result = run_audit(AuditConfig(root=sample_repo), ScriptedVcs())
    untracked = [e.display_path for e in result.summaries[Category.VCS_UNTRACKED_UNIGNORED]]
    tool = [e.display_path for e in result.summaries[Category.TOOL_IGNORED]]
    assert untracked == [".gitignore", "src/app.js"]
    assert tool == ["dist/", "sub/keep.py"]
    assert "out.js" not in _render(result)


def test_repo_root_header_is_part_of_the_report(sample_repo: Path):
    result = run_audit(AuditConfig(root=sample_repo, vcs_backend="none"))
    out, err = io.StringIO(), io.StringIO()
    render_report(result, PlainReporter(stream=out, err_stream=err, use_color=False))
    assert out.getvalue().startswith(f"Repo root: {result.root}\n\nTool-ignored items")
    assert "Repo root" not in err.getvalue()
