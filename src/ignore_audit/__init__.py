"""Audit which on-disk paths version control or a tool ignore file excludes."""

from .patterns import (
    IgnorePattern,
    MatchDecision,
    Matcher,
    PatternSet,
    compile_patterns,
    load_pattern_file,
    matches,
)
from .walker import ScanEntry, TreeWalker, WalkResult, walk
from .classifier import Category, Classification, classify
from .summary import SummaryEntry, summarize
from .vcs import GitCliStatus, PatternFileStatus, VcsStatus, VcsStatusProvider
from .config import AuditConfig, resolve_config
from .audit import AuditResult, run_audit

__version__ = "0.1.0"

__all__ = [
    "IgnorePattern",
    "MatchDecision",
    "Matcher",
    "PatternSet",
    "compile_patterns",
    "load_pattern_file",
    "matches",
    "ScanEntry",
    "TreeWalker",
    "WalkResult",
    "walk",
    "Category",
    "Classification",
    "classify",
    "SummaryEntry",
    "summarize",
    "GitCliStatus",
    "PatternFileStatus",
    "VcsStatus",
    "VcsStatusProvider",
    "AuditConfig",
    "resolve_config",
    "AuditResult",
    "run_audit",
]
