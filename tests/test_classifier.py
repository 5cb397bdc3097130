from ignore_audit.classifier import Category, classify, covered_by
from ignore_audit.vcs import VcsStatus


def test_vcs_ignored_paths_never_reported_as_tool_ignored():
    status = VcsStatus(ignored=frozenset({"node_modules/", ".env"}))
    result = classify({"node_modules/", ".env", "dist/"}, status)
    assert result.vcs_ignored == {"node_modules/", ".env"}
    assert result.tool_ignored == {"dist/"}


def test_tool_matches_inside_vcs_ignored_directory_are_claimed():
    status = VcsStatus(ignored=frozenset({"build/"}))
    result = classify({"build/cache/", "build/x.o", "buildinfo.txt"}, status)
    assert result.tool_ignored == {"buildinfo.txt"}


def test_tool_matches_take_precedence_over_untracked():
    status = VcsStatus(
        untracked_unignored=frozenset(
            {"dist/out.js", "sub/keep.py", "notes/todo.md", "README.md"}
        )
    )
    result = classify({"dist/", "sub/keep.py", "other.tmp"}, status)
    assert result.tool_ignored == {"dist/", "sub/keep.py", "other.tmp"}
    # files inside a tool-ignored directory are not listed again
    assert result.vcs_untracked == {"notes/todo.md", "README.md"}


def test_untracked_inside_ignored_is_dropped():
    status = VcsStatus(
        ignored=frozenset({"logs/"}),
        untracked_unignored=frozenset({"logs/a.txt", "new.py"}),
    )
    result = classify(set(), status)
    assert result.vcs_untracked == {"new.py"}


def test_categories_are_disjoint():
    status = VcsStatus(
        ignored=frozenset({"a/", "b.txt"}),
        untracked_unignored=frozenset({"c.txt", "a/d.txt"}),
    )
    result = classify({"a/", "b.txt", "c.txt", "e/"}, status)
    seen = {}
    for category in Category:
        for path in result.get(category) or ():
            assert path not in seen, (path, seen.get(path), category)
            seen[path] = category
    assert result.category_of("e/") is Category.TOOL_IGNORED
    assert result.category_of("b.txt") is Category.VCS_IGNORED


def test_without_vcs_only_tool_category_is_populated():
    result = classify({"dist/"}, None)
    assert not result.vcs_available
    assert result.vcs_ignored is None and result.vcs_untracked is None
    assert result.tool_ignored == {"dist/"}


def test_no_tracking_information_hides_untracked_category():
    status = VcsStatus(ignored=frozenset({"x/"}), reports_untracked=False)
    result = classify({"y.tmp"}, status)
    assert result.vcs_untracked is None
    assert result.vcs_ignored == {"x/"}


def test_covered_by():
    assert covered_by("a/b/c.txt", ["a/"])
    assert covered_by("a/", ["a/"])
    assert not covered_by("ab/c", ["a/"])
    # a file claim does not cover other paths
    assert not covered_by("a/b", ["a"])
