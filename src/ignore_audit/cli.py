"""Command line interface for ignore-audit."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .audit import load_tool_patterns, run_audit
from .config import VCS_BACKENDS, resolve_config
from .errors import ConfigError, MissingRootError, missing_root
from .logging import configure_logging, get_logger
from .patterns import COMMENT_MODES, Matcher, PatternSet, load_pattern_file
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    render_report,
    section,
    set_reporter,
    set_verbosity,
)
from .vcs import find_repo_root

log = get_logger()

EXIT_OK = 0
EXIT_NOT_IGNORED = 1
EXIT_ERROR = 2


def _resolve_root(args: argparse.Namespace) -> Path:
    value = getattr(args, "root", None)
    if value:
        p = Path(value)
        return p if p.is_absolute() else (Path.cwd() / p).resolve()
    return find_repo_root(Path.cwd())


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    mapping = {
        "tool_ignore": "tool_ignore_files",
        "vcs": "vcs_backend",
        "vcs_ignore": "vcs_ignore_files",
        "depth": "summary_depth",
        "comment_mode": "comment_mode",
        "exclude_dir": "excluded_dirs",
    }
    for attr, key in mapping.items():
        value = getattr(args, attr, None)
        if value is not None:
            overrides[key] = value
    if getattr(args, "ignore_case", False):
        overrides["case_sensitive"] = False
    return overrides


def _load_config(args: argparse.Namespace):
    root = _resolve_root(args)
    config_path = getattr(args, "config", None)
    return resolve_config(
        root,
        config_path=Path(config_path) if config_path else None,
        cli_overrides=_cli_overrides(args),
    )


def _report_cmd(args: argparse.Namespace) -> int:
    config = _load_config(args)
    result = run_audit(config)
    render_report(result)
    return EXIT_OK


def _check_cmd(args: argparse.Namespace) -> int:
    config = _load_config(args)
    root = Path(config.root)
    if not root.is_dir():
        raise missing_root(root)
    ignore_files: Optional[List[str]] = getattr(args, "ignore_file", None)
    if ignore_files:
        pattern_set = PatternSet.merge(
            *(
                load_pattern_file(
                    root / name, display_name=name, comment_mode=config.comment_mode
                )
                for name in ignore_files
            )
        )
    else:
        pattern_set, _ = load_tool_patterns(config, root)
    for diag in pattern_set.warnings:
        log.warning("malformed pattern line skipped: %s", diag)
    matcher = Matcher(pattern_set, case_sensitive=config.case_sensitive)

    rep = get_reporter()
    any_ignored = False
    with section("Ignore check", rep):
        for raw in args.paths:
            candidate = Path(raw)
            absolute = candidate if candidate.is_absolute() else root / candidate
            try:
                rel = absolute.resolve().relative_to(root.resolve()).as_posix()
            except ValueError:
                rep.warning(f"path outside of root: {raw}")
                continue
            is_dir = raw.endswith("/") or absolute.is_dir()
            pattern = matcher.explain(rel, is_dir)
            if pattern is None:
                if args.non_matching:
                    rep.item(f"::\t{rel}")
                continue
            if not pattern.negated:
                any_ignored = True
            rep.item(f"{pattern.location()}:{pattern.raw}\t{rel}")
    rep.flush()
    return EXIT_OK if any_ignored else EXIT_NOT_IGNORED


def build_parser() -> argparse.ArgumentParser:
    # Options accepted before or after the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--root",
        default=argparse.SUPPRESS,
        help="Root directory to scan (default: enclosing git work tree, else cwd)",
    )
    common.add_argument(
        "--config",
        default=argparse.SUPPRESS,
        help="YAML configuration file (default: <root>/.ignore-audit.yaml if present)",
    )
    common.add_argument(
        "--tool-ignore",
        dest="tool_ignore",
        action="append",
        default=argparse.SUPPRESS,
        help="Tool-specific ignore file relative to root (repeatable)",
    )
    common.add_argument(
        "--comment-mode",
        choices=list(COMMENT_MODES),
        default=argparse.SUPPRESS,
        help="inline: drop text after '#' (default); strict: gitignore escaping rules",
    )
    common.add_argument(
        "--ignore-case",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Match patterns case-insensitively",
    )

    p = argparse.ArgumentParser(
        prog="ignore-audit",
        description="List on-disk paths excluded by version control or by a tool ignore file",
        parents=[common],
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    p.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )
    sub = p.add_subparsers(dest="cmd")

    r = sub.add_parser(
        "report", help="Audit ignored paths (default command)", parents=[common]
    )
    r.add_argument(
        "--vcs",
        choices=list(VCS_BACKENDS),
        default=None,
        help="Version control status source: git CLI (default), local ignore patterns, or none",
    )
    r.add_argument(
        "--vcs-ignore",
        dest="vcs_ignore",
        action="append",
        default=None,
        help="Ignore file used by --vcs patterns (repeatable, default .gitignore)",
    )
    r.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Summary depth for collapsing nested paths (default 2)",
    )
    r.add_argument(
        "--exclude-dir",
        dest="exclude_dir",
        action="append",
        default=None,
        help="Directory name never scanned (repeatable, default .git)",
    )
    r.set_defaults(func=_report_cmd)

    c = sub.add_parser(
        "check",
        help="Show which pattern decides each path (like git check-ignore -v)",
        parents=[common],
    )
    c.add_argument("paths", nargs="+", help="Paths relative to root")
    c.add_argument(
        "--ignore-file",
        dest="ignore_file",
        action="append",
        default=None,
        help="Ignore file to evaluate (repeatable, default: tool ignore files)",
    )
    c.add_argument(
        "-n",
        "--non-matching",
        action="store_true",
        help="Also list paths no pattern matches",
    )
    c.set_defaults(func=_check_cmd)

    p.set_defaults(func=_report_cmd)
    return p


def _select_reporter(name: str, no_color: bool) -> None:
    if name == "json":
        set_reporter(JsonLinesReporter())
    elif name == "silent":
        set_reporter(SilentReporter())
    elif name == "rich" and not no_color:
        if sys.stdout.isatty():
            set_reporter(RichReporter())
        else:
            # Fallback quietly to plain if no TTY
            set_reporter(PlainReporter())
    else:
        set_reporter(PlainReporter(use_color=False if no_color else None))


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter, args.no_color)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except (MissingRootError, ConfigError) as exc:
        rep = get_reporter()
        rep.error(exc.message)
        rep.flush()
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
