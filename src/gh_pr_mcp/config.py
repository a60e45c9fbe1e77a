"""Configuration loading for gh-pr-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
The server never handles GitHub credentials; gh owns its authenticated session.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import SafeError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Host configuration for gh execution, audit and logging."""

    gh_path: str
    repo_dir: Path | None
    timeout_s: float | None

    audit_log_path: Path | None
    audit_max_bytes: int
    audit_max_backups: int
    log_level: int


def _parse_timeout(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError as exc:
        raise SafeError(code="Config", message="GH_PR_MCP_TIMEOUT_S must be a number of seconds") from exc
    if timeout <= 0:
        raise SafeError(code="Config", message="GH_PR_MCP_TIMEOUT_S must be > 0")
    return timeout


def _parse_log_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    normalized = value.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise SafeError(
            code="Config",
            message=f"GH_PR_MCP_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}",
        )
    return getattr(logging, normalized)


def _absolute_path(value: str, *, name: str) -> Path:
    p = Path(value)
    if not p.is_absolute():
        raise SafeError(code="Config", message=f"{name} must be an absolute path when set")
    return p


def load_config_from_env() -> ServerConfig:
    """Load and validate configuration from environment variables.

    Raises:
        SafeError: If configuration is invalid.
    """
    gh_path = (os.getenv("GH_PR_MCP_GH_PATH") or "gh").strip()
    if not gh_path:
        raise SafeError(code="Config", message="GH_PR_MCP_GH_PATH must not be blank")

    repo_dir: Path | None = None
    repo_dir_raw = os.getenv("GH_PR_MCP_REPO_DIR")
    if repo_dir_raw:
        repo_dir = _absolute_path(repo_dir_raw, name="GH_PR_MCP_REPO_DIR")
        if not repo_dir.is_dir():
            raise SafeError(code="Config", message="GH_PR_MCP_REPO_DIR must be an existing directory")

    timeout_s = _parse_timeout(os.getenv("GH_PR_MCP_TIMEOUT_S"))

    audit_path: Path | None = None
    audit_path_raw = os.getenv("GH_PR_MCP_AUDIT_LOG_PATH")
    if audit_path_raw:
        audit_path = _absolute_path(audit_path_raw, name="GH_PR_MCP_AUDIT_LOG_PATH")

    # Retention is host-controlled and not exposed in tool outputs.
    audit_max_bytes = 5 * 1024 * 1024
    audit_max_backups = 2

    return ServerConfig(
        gh_path=gh_path,
        repo_dir=repo_dir,
        timeout_s=timeout_s,
        audit_log_path=audit_path,
        audit_max_bytes=audit_max_bytes,
        audit_max_backups=audit_max_backups,
        log_level=_parse_log_level(os.getenv("GH_PR_MCP_LOG_LEVEL")),
    )
