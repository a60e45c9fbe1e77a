"""Tool registry and dispatch layer.

This module:
- defines the four pull request tools (public contract surface)
- validates arguments against each tool's declared input schema
- builds a per-server runtime from host-provided config
- runs the built gh command and wraps its output in a reply

Invalid arguments and unknown tools are raised as SafeError for the protocol layer.
gh failures are returned as flagged replies so agents can read them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from .audit import AuditLogger, build_event, new_correlation_id
from .commands import GhCommand, build_command
from .config import ServerConfig, load_config_from_env
from .errors import SafeError
from .gh_cli import GhCliRunner

logger = logging.getLogger(__name__)

PR_STATES: tuple[str, ...] = ("open", "closed", "merged", "all")

TOOL_METADATA: dict[str, dict[str, Any]] = {
    "create_pr": {
        "description": "Create a new pull request",
        "inputSchema": {
            "type": "object",
            "required": ["title"],
            "properties": {
                "title": {"type": "string", "description": "Title of the pull request"},
                "body": {"type": "string", "description": "Body/description of the pull request"},
                "base": {"type": "string", "description": "The branch into which you want your code merged"},
                "head": {"type": "string", "description": "The branch that contains commits for your pull request"},
                "draft": {"type": "boolean", "description": "Create the pull request as a draft"},
            },
        },
    },
    "list_prs": {
        "description": "List pull requests in the current repository",
        "inputSchema": {
            "type": "object",
            "properties": {
                "state": {"type": "string", "enum": list(PR_STATES), "description": "Filter by state"},
                "base": {"type": "string", "description": "Filter by base branch"},
                "limit": {"type": "number", "description": "Maximum number of pull requests to fetch"},
            },
        },
    },
    "view_pr": {
        "description": "View a specific pull request",
        "inputSchema": {
            "type": "object",
            "required": ["number"],
            "properties": {
                "number": {"type": "integer", "minimum": 1, "description": "Pull request number"},
            },
        },
    },
    "comment_pr": {
        "description": "Add a comment to a pull request",
        "inputSchema": {
            "type": "object",
            "required": ["number", "body"],
            "properties": {
                "number": {"type": "integer", "minimum": 1, "description": "Pull request number"},
                "body": {"type": "string", "description": "Comment text"},
            },
        },
    },
}


@dataclass(frozen=True, slots=True)
class ToolReply:
    """Reply envelope: one text block, flagged when gh failed."""

    text: str
    is_error: bool = False


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-server runtime dependencies shared across tool calls."""

    config: ServerConfig
    audit: AuditLogger
    runner: GhCliRunner


_RUNTIME: Runtime | None = None


def _as_integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value) if value.is_integer() else value
    return None


def validate_tool_arguments(tool_name: str, arguments: Any) -> dict[str, Any]:
    """Validate tool arguments against the tool's declared input schema.

    Enforces required fields, basic JSON types (string/integer/number/boolean),
    ``enum`` and ``minimum``. Undeclared fields are ignored and dropped.

    Returns:
        The declared fields that were supplied, with numbers normalized.
    """
    if tool_name not in TOOL_METADATA:
        raise SafeError(code="NotFound", message=f"Unknown tool: {tool_name}")
    if not isinstance(arguments, dict):
        raise SafeError(code="UserInput", message="Arguments must be an object")

    schema = TOOL_METADATA[tool_name]["inputSchema"]
    props: dict[str, Any] = schema.get("properties", {})
    required: list[str] = schema.get("required", [])

    for k in required:
        if k not in arguments:
            raise SafeError(code="UserInput", message=f"Missing required field: {k}")

    cleaned: dict[str, Any] = {}
    for k, spec in props.items():
        if k not in arguments:
            continue
        expected = spec.get("type")
        v = arguments[k]
        if expected == "string" and not isinstance(v, str):
            raise SafeError(code="UserInput", message=f"Field '{k}' must be a string")
        if expected == "boolean" and not isinstance(v, bool):
            raise SafeError(code="UserInput", message=f"Field '{k}' must be a boolean")
        if expected == "integer":
            v = _as_integer(v)
            if v is None:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be an integer")
        if expected == "number":
            v = _as_number(v)
            if v is None:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be a number")

        allowed = spec.get("enum")
        if allowed is not None and v not in allowed:
            raise SafeError(code="UserInput", message=f"Field '{k}' must be one of: {', '.join(allowed)}")

        minimum = spec.get("minimum")
        if isinstance(minimum, int) and v < minimum:
            raise SafeError(code="UserInput", message=f"Field '{k}' must be >= {minimum}")

        cleaned[k] = v
    return cleaned


def is_valid_tool_arguments(tool_name: str, arguments: Any) -> bool:
    """Return True if the arguments satisfy the tool's schema. Never raises."""
    try:
        validate_tool_arguments(tool_name, arguments)
    except SafeError:
        return False
    return True


def initialize_runtime_from_env() -> Runtime:
    """Initialize and cache runtime from environment.

    Called at server startup (fail-fast), and can also be used lazily.
    """
    global _RUNTIME  # pylint: disable=global-statement
    if _RUNTIME is not None:
        return _RUNTIME

    config = load_config_from_env()
    audit = AuditLogger(
        sink_path=config.audit_log_path,
        max_bytes=config.audit_max_bytes,
        max_backups=config.audit_max_backups,
    )
    runner = GhCliRunner(gh_path=config.gh_path, cwd=config.repo_dir, timeout_s=config.timeout_s)

    _RUNTIME = Runtime(config=config, audit=audit, runner=runner)
    return _RUNTIME


def _unknown_tool_error(name: str) -> SafeError:
    return SafeError(
        code="NotFound",
        message=f"Unknown tool: {name}",
        hint=f"Available tools: {', '.join(sorted(TOOL_METADATA.keys()))}",
    )


async def dispatch_tool(name: str, arguments: Any) -> ToolReply:
    """Dispatch a tool call.

    Raises:
        SafeError: ``NotFound`` for unknown tools, ``UserInput`` for invalid arguments.
    """
    correlation_id = new_correlation_id()
    if arguments is None:
        arguments = {}

    try:
        runtime = initialize_runtime_from_env()
    except SafeError as err:
        # Unknown tools are reported as such even when configuration is broken.
        failure = _unknown_tool_error(name) if name not in TOOL_METADATA else err
        outcome = "denied" if failure is not err else "failed"
        # Still emit an audit event to stderr when runtime could not be initialized.
        AuditLogger(sink_path=None).write_event(
            build_event(correlation_id=correlation_id, operation=name, outcome=outcome, reason=failure.message)
        )
        raise failure from None

    start = runtime.audit.measure_start()
    command: GhCommand | None = None

    def audit(outcome: str, reason: str | None = None, exit_code: int | None = None) -> None:
        runtime.audit.write_event(
            build_event(
                correlation_id=correlation_id,
                operation=name,
                outcome=outcome,
                reason=reason,
                duration_ms=runtime.audit.measure_duration_ms(start),
                command=command.suffix if command is not None else None,
                exit_code=exit_code,
            )
        )

    try:
        if name not in TOOL_METADATA:
            raise _unknown_tool_error(name)

        try:
            validated = validate_tool_arguments(name, arguments)
        except SafeError as err:
            raise SafeError(code="UserInput", message=f"Invalid {name} arguments", hint=err.message) from err

        command = build_command(name, validated)
        output = await runtime.runner.run(command)

    except SafeError as err:
        if err.code == "GitHubCLI":
            logger.warning("Tool %s: gh failed (exit code %s)", name, err.status_code)
            audit("failed", reason="gh command failed", exit_code=err.status_code)
            return ToolReply(text=err.message, is_error=True)
        logger.info("Tool %s rejected: %s", name, err.hint or err.message)
        audit("denied", reason=err.message)
        raise
    except Exception:
        audit("failed", reason="Internal error")
        raise

    audit("succeeded", exit_code=0)
    return ToolReply(text=output)
