"""Error definitions for ignore-audit."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_MISSING_ROOT = "E_MISSING_ROOT"
E_VCS_UNAVAILABLE = "E_VCS_UNAVAILABLE"
E_MALFORMED_PATTERN = "E_MALFORMED_PATTERN"
E_UNREADABLE_ENTRY = "E_UNREADABLE_ENTRY"
E_CONFIG = "E_CONFIG"


@dataclass
class AuditError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class MissingRootError(AuditError):
    pass


class VcsUnavailableError(AuditError):
    pass


class MalformedPatternError(AuditError):
    pass


class UnreadableEntryError(AuditError):
    pass


class ConfigError(AuditError):
    pass


def missing_root(root: Any) -> MissingRootError:
    return MissingRootError(
        code=E_MISSING_ROOT,
        message=f"scan root does not exist or is not a readable directory: {root}",
        context={"root": str(root)},
    )


def vcs_unavailable(
    message: str, context: Optional[Dict[str, Any]] = None
) -> VcsUnavailableError:
    return VcsUnavailableError(
        code=E_VCS_UNAVAILABLE, message=message, context=context
    )


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> ConfigError:
    return ConfigError(code=E_CONFIG, message=message, context=context)


__all__ = [
    "AuditError",
    "MissingRootError",
    "VcsUnavailableError",
    "MalformedPatternError",
    "UnreadableEntryError",
    "ConfigError",
    "missing_root",
    "vcs_unavailable",
    "config_error",
    "E_MISSING_ROOT",
    "E_VCS_UNAVAILABLE",
    "E_MALFORMED_PATTERN",
    "E_UNREADABLE_ENTRY",
    "E_CONFIG",
]
