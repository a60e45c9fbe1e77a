"""Safe error types and serialization helpers.

Validation and dispatch failures are raised to the protocol layer; gh failures are
returned to agents as flagged replies. Both carry a stable code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An error safe to expose to agents."""

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None


def gh_command_error(message: str, *, exit_code: int | None = None) -> SafeError:
    """Return the error raised when the gh process fails or cannot be spawned."""
    return SafeError(code="GitHubCLI", message=f"GitHub CLI error: {message}", status_code=exit_code)


def safe_error_to_result(err: SafeError) -> dict[str, Any]:
    """Convert a SafeError into the standard error envelope."""
    return to_error_result(code=err.code, message=err.message, hint=err.hint)


def to_error_result(*, code: str, message: str, hint: str | None = None) -> dict[str, Any]:
    """Build a standard error envelope."""
    out: dict[str, Any] = {"ok": False, "code": code, "message": message}
    if hint:
        out["hint"] = hint
    return out


def not_found_error(message: str, hint: str | None = None) -> dict[str, Any]:
    """Error for unknown tools or resources."""
    return to_error_result(code="NotFound", message=message, hint=hint)

