"""High-level audit API: scan, classify and summarize one root."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .classifier import Category, Classification, classify
from .config import AuditConfig
from .errors import VcsUnavailableError, missing_root
from .patterns import PatternSet, load_pattern_file
from .reporting import Reporter, task
from .summary import SummaryEntry, summarize
from .vcs import GitCliStatus, PatternFileStatus, VcsStatus, VcsStatusProvider
from .walker import TreeWalker

__all__ = [
    "ToolFileState",
    "AuditResult",
    "make_vcs_provider",
    "load_tool_patterns",
    "run_audit",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolFileState:
    name: str
    exists: bool
    pattern_count: int


@dataclass(slots=True)
class AuditResult:
    root: Path
    config: AuditConfig
    classification: Classification
    tool_files: List[ToolFileState]
    summaries: Dict[Category, Optional[List[SummaryEntry]]] = field(
        default_factory=dict
    )
    warnings: List[str] = field(default_factory=list)

    @property
    def tool_files_found(self) -> bool:
        return any(f.exists for f in self.tool_files)

    @property
    def tool_pattern_count(self) -> int:
        return sum(f.pattern_count for f in self.tool_files)


def make_vcs_provider(config: AuditConfig) -> Optional[VcsStatusProvider]:
    if config.vcs_backend == "git":
        return GitCliStatus()
    if config.vcs_backend == "patterns":
        return PatternFileStatus(
            ignore_files=config.vcs_ignore_files,
            excluded_dirs=config.excluded_dirs,
            case_sensitive=config.case_sensitive,
        )
    return None


def _check_root(root: Path) -> Path:
    if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
        raise missing_root(root)
    return root.resolve()


def load_tool_patterns(
    config: AuditConfig, root: Path
) -> tuple[PatternSet, List[ToolFileState]]:
    sets: List[PatternSet] = []
    states: List[ToolFileState] = []
    for name in config.tool_ignore_files:
        path = root / name
        ps = load_pattern_file(
            path, display_name=name, comment_mode=config.comment_mode
        )
        sets.append(ps)
        states.append(ToolFileState(name, path.is_file(), len(ps)))
    return PatternSet.merge(*sets), states


def run_audit(
    config: AuditConfig,
    vcs_provider: Optional[VcsStatusProvider] = None,
    *,
    use_default_vcs: bool = True,
    reporter: Optional[Reporter] = None,
) -> AuditResult:
    """Run one full audit.

    ``vcs_provider`` overrides the backend named in ``config``; pass
    ``use_default_vcs=False`` with no provider to skip VCS entirely.
    Only ``MissingRootError`` escapes; other problems become warnings.
    """
    root = _check_root(Path(config.root))
    warnings: List[str] = []

    tool_set, tool_files = load_tool_patterns(config, root)
    for diag in tool_set.warnings:
        msg = f"malformed pattern line skipped: {diag}"
        log.warning(msg)
        warnings.append(msg)

    walker = TreeWalker(
        tool_set,
        excluded_dirs=config.excluded_dirs,
        case_sensitive=config.case_sensitive,
    )
    with task("scan.tool", "Scan tool ignore patterns", reporter) as stats:
        walked = walker.scan(root)
        stats.update(patterns=len(tool_set), entries=len(walked.entries))
    for err in walked.warnings:
        log.warning("unreadable entry skipped: %s", err.message)
        warnings.append(err.message)

    provider = vcs_provider
    if provider is None and use_default_vcs:
        provider = make_vcs_provider(config)
    vcs_status: Optional[VcsStatus] = None
    if provider is not None:
        try:
            with task("scan.vcs", f"Query {provider.name} status", reporter) as stats:
                vcs_status = provider.status(root)
                stats.update(
                    ignored=len(vcs_status.ignored),
                    untracked=len(vcs_status.untracked_unignored),
                )
        except VcsUnavailableError as exc:
            msg = f"version control status unavailable, reporting tool-ignored items only: {exc.message}"
            log.warning(msg)
            warnings.append(msg)
            vcs_status = None

    classification = classify(walked.display_paths(), vcs_status)
    classification.warnings.extend(warnings)

    summaries: Dict[Category, Optional[List[SummaryEntry]]] = {}
    for category in Category:
        paths = classification.get(category)
        summaries[category] = (
            None if paths is None else summarize(paths, config.summary_depth)
        )
    return AuditResult(
        root=root,
        config=config,
        classification=classification,
        tool_files=tool_files,
        summaries=summaries,
        warnings=warnings,
    )
