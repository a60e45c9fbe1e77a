"""Shared test doubles for tool dispatch."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import gh_pr_mcp.tools as tools
import pytest
from gh_pr_mcp.audit import AuditEvent
from gh_pr_mcp.commands import GhCommand
from gh_pr_mcp.config import ServerConfig
from gh_pr_mcp.errors import SafeError


@dataclass
class DummyAudit:
    events: list[AuditEvent] = field(default_factory=list)

    def write_event(self, event: AuditEvent) -> None:
        self.events.append(event)

    def measure_start(self) -> float:
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        return int((time.monotonic() - start) * 1000)


@dataclass
class DummyRunner:
    output: str = ""
    error: SafeError | None = None
    calls: list[GhCommand] = field(default_factory=list)

    async def run(self, command: GhCommand) -> str:
        self.calls.append(command)
        if self.error is not None:
            raise self.error
        return self.output


def make_config(**overrides: object) -> ServerConfig:
    values: dict[str, object] = {
        "gh_path": "gh",
        "repo_dir": None,
        "timeout_s": None,
        "audit_log_path": None,
        "audit_max_bytes": 5 * 1024 * 1024,
        "audit_max_backups": 2,
        "log_level": 20,
    }
    values.update(overrides)
    return ServerConfig(**values)  # type: ignore[arg-type]


@pytest.fixture
def runner() -> DummyRunner:
    return DummyRunner(output="ok\n")


@pytest.fixture
def audit() -> DummyAudit:
    return DummyAudit()


@pytest.fixture
def runtime(monkeypatch: pytest.MonkeyPatch, runner: DummyRunner, audit: DummyAudit) -> tools.Runtime:
    rt = tools.Runtime(
        config=make_config(),
        audit=audit,  # type: ignore[arg-type]
        runner=runner,  # type: ignore[arg-type]
    )
    monkeypatch.setattr(tools, "initialize_runtime_from_env", lambda: rt)
    return rt
