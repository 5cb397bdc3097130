"""Last-match-wins evaluation of a PatternSet against relative paths.

Each pattern is rebuilt as gitignore text and handed to pathspec's gitignore
pattern class for its regular expression; negation and directory-only
handling stay with the structured ``IgnorePattern`` fields.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from pathspec.patterns.gitignore import GitIgnorePatternError
from pathspec.patterns.gitignore.basic import GitIgnoreBasicPattern

from .models import IgnorePattern, MalformedPatternLine, MatchDecision, PatternSet

__all__ = [
    "Matcher",
    "matches",
    "compile_pattern",
    "gitignore_text",
    "normalize_relative",
]

log = logging.getLogger(__name__)


def normalize_relative(path: str) -> str:
    return "/".join(seg for seg in path.replace("\\", "/").split("/") if seg)


def gitignore_text(pattern: IgnorePattern) -> str:
    """Rebuild the gitignore line for ``pattern`` without its negation."""
    body = "/".join(pattern.segments)
    if pattern.anchored:
        body = "/" + body
    elif body[0] in "!#":
        # a literal leading '!' or '#' must stay escaped
        body = "\\" + body
    if pattern.directory_only:
        body += "/"
    return body


def compile_pattern(
    pattern: IgnorePattern, *, case_sensitive: bool = True
) -> re.Pattern[str]:
    """Compile ``pattern`` to a regex matched against ``/``-joined paths.

    Raises ``GitIgnorePatternError`` when pathspec rejects the glob or the
    resulting expression does not compile (``[z-a]`` ranges, a dangling
    backslash).
    """
    regex, include = GitIgnoreBasicPattern.pattern_to_regex(gitignore_text(pattern))
    if regex is None or include is None:
        raise GitIgnorePatternError(f"pattern {pattern.raw!r} matches nothing")
    try:
        return re.compile(regex, 0 if case_sensitive else re.IGNORECASE)
    except re.error as exc:
        raise GitIgnorePatternError(
            f"invalid glob in pattern {pattern.raw!r}: {exc}"
        ) from exc


@dataclass(frozen=True, slots=True)
class _CompiledPattern:
    pattern: IgnorePattern
    regex: re.Pattern[str]

    def hits(self, path: str, is_directory: bool) -> bool:
        if self.pattern.directory_only:
            if not is_directory:
                return False
            # directory patterns end in a separator in pathspec's dialect
            path += "/"
        return self.regex.search(path) is not None


class Matcher:
    """Evaluate a PatternSet with last-matching-pattern-wins semantics.

    Patterns pathspec cannot compile are dropped and listed in ``skipped``.
    """

    def __init__(self, pattern_set: PatternSet, *, case_sensitive: bool = True):
        self.pattern_set = pattern_set
        self.case_sensitive = case_sensitive
        self.skipped: List[MalformedPatternLine] = []
        self._compiled: List[_CompiledPattern] = []
        for p in pattern_set:
            try:
                regex = compile_pattern(p, case_sensitive=case_sensitive)
            except GitIgnorePatternError as exc:
                log.debug("dropping pattern %s: %s", p.location(), exc)
                self.skipped.append(
                    MalformedPatternLine(p.source, p.line, p.raw, str(exc))
                )
                continue
            self._compiled.append(_CompiledPattern(p, regex))

    def explain(
        self, relative_path: str, is_directory: bool
    ) -> Optional[IgnorePattern]:
        """Return the last pattern matching the path, negated or not."""
        path = normalize_relative(relative_path)
        if not path:
            return None
        for compiled in reversed(self._compiled):
            if compiled.hits(path, is_directory):
                return compiled.pattern
        return None

    def decide(self, relative_path: str, is_directory: bool) -> MatchDecision:
        deciding = self.explain(relative_path, is_directory)
        if deciding is None or deciding.negated:
            return MatchDecision.NOT_IGNORED
        return MatchDecision.IGNORED

    def is_ignored(self, relative_path: str, is_directory: bool) -> bool:
        return self.decide(relative_path, is_directory).ignored


@lru_cache(maxsize=32)
def _matcher_for(pattern_set: PatternSet, case_sensitive: bool) -> Matcher:
    return Matcher(pattern_set, case_sensitive=case_sensitive)


def matches(
    pattern_set: PatternSet,
    relative_path: str,
    is_directory: bool,
    *,
    case_sensitive: bool = True,
) -> MatchDecision:
    return _matcher_for(pattern_set, case_sensitive).decide(
        relative_path, is_directory
    )
