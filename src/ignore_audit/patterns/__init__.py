"""Gitignore-syntax pattern compilation and matching."""

from .models import IgnorePattern, MalformedPatternLine, MatchDecision, PatternSet
from .compiler import COMMENT_MODES, compile_line, compile_patterns, load_pattern_file
from .matcher import Matcher, matches

__all__ = [
    "IgnorePattern",
    "MalformedPatternLine",
    "MatchDecision",
    "PatternSet",
    "COMMENT_MODES",
    "compile_line",
    "compile_patterns",
    "load_pattern_file",
    "Matcher",
    "matches",
]
