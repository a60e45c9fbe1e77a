"""Runtime initialization coverage for tools."""

from __future__ import annotations

import sys

import gh_pr_mcp.tools as tools
import pytest


def test_initialize_runtime_from_env_caches_runtime(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GH_PR_MCP_GH_PATH", sys.executable)
    monkeypatch.delenv("GH_PR_MCP_REPO_DIR", raising=False)
    monkeypatch.delenv("GH_PR_MCP_TIMEOUT_S", raising=False)
    monkeypatch.delenv("GH_PR_MCP_AUDIT_LOG_PATH", raising=False)
    monkeypatch.delenv("GH_PR_MCP_LOG_LEVEL", raising=False)
    monkeypatch.setattr(tools, "_RUNTIME", None)

    r1 = tools.initialize_runtime_from_env()
    r2 = tools.initialize_runtime_from_env()

    assert r1 is r2
    assert r1.config.gh_path == sys.executable
    assert r1.config.timeout_s is None
