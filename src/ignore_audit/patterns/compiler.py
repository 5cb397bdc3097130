"""Compile gitignore-syntax text into an ordered PatternSet.

Two comment modes are supported:

``inline``
    Lines are stripped and everything from the first ``#`` on is dropped,
    the historical behaviour of the audit script, so ``file#1.txt``
    compiles to ``file``.

``strict``
    Only a leading unescaped ``#`` starts a comment, ``\\#`` is a literal
    ``#`` and trailing whitespace is kept only when backslash-escaped.

Lines pathspec refuses to turn into an expression, such as ``[z-a].txt``,
are reported like any other malformed line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from pathspec.patterns.gitignore import GitIgnorePatternError

from ..errors import E_MALFORMED_PATTERN, MalformedPatternError
from .matcher import compile_pattern
from .models import IgnorePattern, MalformedPatternLine, PatternSet

__all__ = [
    "COMMENT_MODES",
    "compile_patterns",
    "compile_line",
    "load_pattern_file",
]

log = logging.getLogger(__name__)

COMMENT_MODES = ("inline", "strict")


def _strip_trailing_unescaped(text: str) -> str:
    end = len(text)
    while end > 0 and text[end - 1] in " \t":
        # count backslashes in front of the space
        bs = 0
        j = end - 2
        while j >= 0 and text[j] == "\\":
            bs += 1
            j -= 1
        if bs % 2 == 1:
            break
        end -= 1
    return text[:end]


def _clean_line(raw: str, comment_mode: str) -> Optional[str]:
    """Return the pattern text of ``raw`` or None for blank/comment lines."""
    if comment_mode == "inline":
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            return None
        cleaned = stripped.split("#", 1)[0].rstrip()
        return cleaned or None
    text = raw.rstrip("\r\n")
    if not text.strip() or text.startswith("#"):
        return None
    text = _strip_trailing_unescaped(text)
    return text or None


def compile_line(
    text: str,
    *,
    source: Optional[str] = None,
    line: int = 0,
) -> Tuple[Optional[IgnorePattern], Optional[str]]:
    """Compile one cleaned pattern line.

    Returns ``(pattern, None)`` or ``(None, reason)`` when nothing matchable
    is left after the prefix/suffix markers are removed.
    """
    body = text
    negated = False
    if body.startswith("!"):
        negated = True
        body = body[1:]
    elif body.startswith("\\!") or body.startswith("\\#"):
        body = body[1:]

    directory_only = False
    if body.endswith("/") and not body.endswith("\\/"):
        directory_only = True
        body = body.rstrip("/")

    anchored = False
    if body.startswith("/"):
        anchored = True
        body = body.lstrip("/")
    if "/" in body:
        # a slash in the middle anchors the pattern as well
        anchored = True

    segments = tuple(seg for seg in body.split("/") if seg)
    if not segments:
        return None, "pattern has no path segments"
    return (
        IgnorePattern(
            raw=text,
            segments=segments,
            anchored=anchored,
            directory_only=directory_only,
            negated=negated,
            source=source,
            line=line,
        ),
        None,
    )


def compile_patterns(
    text: str,
    *,
    source: Optional[str] = None,
    comment_mode: str = "inline",
    strict_errors: bool = False,
) -> PatternSet:
    if comment_mode not in COMMENT_MODES:
        raise ValueError(f"unknown comment mode: {comment_mode!r}")
    patterns: List[IgnorePattern] = []
    warnings: List[MalformedPatternLine] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        cleaned = _clean_line(raw, comment_mode)
        if cleaned is None:
            continue
        pattern, reason = compile_line(cleaned, source=source, line=lineno)
        if pattern is not None:
            try:
                compile_pattern(pattern)
            except GitIgnorePatternError as exc:
                pattern, reason = None, str(exc)
        if pattern is None:
            diag = MalformedPatternLine(source, lineno, raw, reason or "")
            if strict_errors:
                raise MalformedPatternError(
                    code=E_MALFORMED_PATTERN,
                    message=str(diag),
                    context={"source": source, "line": lineno},
                )
            log.debug("skipping pattern line %s", diag)
            warnings.append(diag)
            continue
        patterns.append(pattern)
    log.debug(
        "compiled %d pattern(s) from %s", len(patterns), source or "<text>"
    )
    return PatternSet(
        patterns=tuple(patterns), source=source, warnings=tuple(warnings)
    )


def load_pattern_file(
    path: str | Path,
    *,
    display_name: Optional[str] = None,
    comment_mode: str = "inline",
    strict_errors: bool = False,
) -> PatternSet:
    """Compile an ignore file; a missing file yields an empty set."""
    p = Path(path)
    name = display_name or p.as_posix()
    if not p.is_file():
        log.debug("ignore file not found: %s", p)
        return PatternSet(source=name)
    text = p.read_text(encoding="utf-8", errors="replace")
    return compile_patterns(
        text,
        source=name,
        comment_mode=comment_mode,
        strict_errors=strict_errors,
    )
