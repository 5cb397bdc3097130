"""Audit configuration: defaults, YAML file, environment, CLI overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import config_error
from .patterns import COMMENT_MODES
from .summary import DEFAULT_SUMMARY_DEPTH
from .walker import DEFAULT_EXCLUDED_DIRS

__all__ = [
    "AuditConfig",
    "VCS_BACKENDS",
    "DEFAULT_CONFIG_NAME",
    "load_config_file",
    "apply_env",
    "resolve_config",
]

log = logging.getLogger(__name__)

VCS_BACKENDS = ("git", "patterns", "none")
DEFAULT_CONFIG_NAME = ".ignore-audit.yaml"
ENV_SUMMARY_DEPTH = "IGNORE_AUDIT_SUMMARY_DEPTH"
ENV_VCS = "IGNORE_AUDIT_VCS"


@dataclass(frozen=True, slots=True)
class AuditConfig:
    root: Path = field(default_factory=Path.cwd)
    tool_ignore_files: Tuple[str, ...] = (".claude/.claudeignore",)
    vcs_backend: str = "git"
    vcs_ignore_files: Tuple[str, ...] = (".gitignore",)
    summary_depth: int = DEFAULT_SUMMARY_DEPTH
    excluded_dirs: Tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    comment_mode: str = "inline"
    case_sensitive: bool = True

    def validate(self) -> "AuditConfig":
        if self.vcs_backend not in VCS_BACKENDS:
            raise config_error(
                f"unknown vcs backend {self.vcs_backend!r}",
                {"choices": list(VCS_BACKENDS)},
            )
        if self.comment_mode not in COMMENT_MODES:
            raise config_error(
                f"unknown comment mode {self.comment_mode!r}",
                {"choices": list(COMMENT_MODES)},
            )
        if self.summary_depth < 1:
            raise config_error(
                f"summary_depth must be >= 1, got {self.summary_depth}"
            )
        return self


_TUPLE_KEYS = {"tool_ignore_files", "vcs_ignore_files", "excluded_dirs"}
_INT_KEYS = {"summary_depth"}
_BOOL_KEYS = {"case_sensitive"}


def _coerce(key: str, value: Any) -> Any:
    if key in _TUPLE_KEYS:
        if isinstance(value, str):
            return (value,)
        if not isinstance(value, (list, tuple)):
            raise config_error(f"{key} must be a list of strings")
        return tuple(str(v) for v in value)
    if key in _INT_KEYS:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise config_error(f"{key} must be an integer, got {value!r}") from exc
    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise config_error(f"{key} must be true or false")
        return value
    if key == "root":
        return Path(value)
    return str(value)


def _overrides(data: Mapping[str, Any], origin: str) -> Dict[str, Any]:
    known = {f.name for f in fields(AuditConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise config_error(
            f"unknown configuration key(s) in {origin}: {', '.join(unknown)}",
            {"keys": unknown},
        )
    return {k: _coerce(k, v) for k, v in data.items() if v is not None}


def load_config_file(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise config_error(f"config file not found: {p}", {"path": str(p)})
    try:
        data: Any = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise config_error(f"invalid YAML in {p}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise config_error(f"root of {p} must be a mapping")
    log.debug("loaded config from %s", p)
    return _overrides(data, str(p))


def apply_env(
    config: AuditConfig, environ: Optional[Mapping[str, str]] = None
) -> AuditConfig:
    env = os.environ if environ is None else environ
    updates: Dict[str, Any] = {}
    if env.get(ENV_SUMMARY_DEPTH):
        updates["summary_depth"] = _coerce("summary_depth", env[ENV_SUMMARY_DEPTH])
    if env.get(ENV_VCS):
        updates["vcs_backend"] = env[ENV_VCS].strip().lower()
    return replace(config, **updates) if updates else config


def resolve_config(
    root: Path,
    *,
    config_path: Optional[Path] = None,
    cli_overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AuditConfig:
    """Build the effective configuration for ``root``.

    Precedence, lowest first: defaults, YAML file (``config_path`` or
    ``.ignore-audit.yaml`` in the root), environment, CLI overrides.
    """
    config = AuditConfig(root=root)
    file_path = config_path
    if file_path is None and (root / DEFAULT_CONFIG_NAME).is_file():
        file_path = root / DEFAULT_CONFIG_NAME
    if file_path is not None:
        file_values = load_config_file(file_path)
        file_values.pop("root", None)
        config = replace(config, **file_values)
    config = apply_env(config, environ)
    if cli_overrides:
        config = replace(
            config, **_overrides(cli_overrides, "command line")
        )
    return config.validate()
