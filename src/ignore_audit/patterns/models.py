"""Dataclass models for compiled ignore patterns."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

__all__ = [
    "IgnorePattern",
    "PatternSet",
    "MalformedPatternLine",
    "MatchDecision",
]


@dataclass(frozen=True, slots=True)
class IgnorePattern:
    """One compiled line of gitignore-syntax text.

    ``segments`` holds the glob tokens of the pattern body split on ``/``;
    the leading ``!``, the leading ``/`` and the trailing ``/`` have already
    been folded into ``negated``, ``anchored`` and ``directory_only``.
    """

    raw: str
    segments: Tuple[str, ...]
    anchored: bool = False
    directory_only: bool = False
    negated: bool = False
    source: Optional[str] = None
    line: int = 0

    def location(self) -> str:
        return f"{self.source or '<text>'}:{self.line}"


@dataclass(frozen=True, slots=True)
class MalformedPatternLine:
    source: Optional[str]
    line: int
    text: str
    reason: str

    def __str__(self) -> str:
        return f"{self.source or '<text>'}:{self.line}: {self.reason}: {self.text!r}"


@dataclass(frozen=True, slots=True)
class PatternSet:
    patterns: Tuple[IgnorePattern, ...] = ()
    source: Optional[str] = None
    warnings: Tuple[MalformedPatternLine, ...] = field(
        default=(), compare=False
    )

    def __iter__(self) -> Iterator[IgnorePattern]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    @classmethod
    def merge(cls, *sets: "PatternSet") -> "PatternSet":
        # Later sets override earlier ones, so file order is kept.
        patterns: list[IgnorePattern] = []
        warnings: list[MalformedPatternLine] = []
        sources: list[str] = []
        for s in sets:
            patterns.extend(s.patterns)
            warnings.extend(s.warnings)
            if s.source:
                sources.append(s.source)
        return cls(
            patterns=tuple(patterns),
            source=", ".join(sources) or None,
            warnings=tuple(warnings),
        )


class MatchDecision(Enum):
    IGNORED = "ignored"
    NOT_IGNORED = "not_ignored"

    @property
    def ignored(self) -> bool:
        return self is MatchDecision.IGNORED
