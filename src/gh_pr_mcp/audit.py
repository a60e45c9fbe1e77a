"""Structured audit logging.

Exactly one JSON line is written per tool call, whatever its outcome: always to
stderr, and to a size-rotated file when the host configures one.
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

logger = logging.getLogger(__name__)


def new_correlation_id() -> str:
    """Generate a random correlation id for traceability."""
    return uuid.uuid4().hex


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single audit event. ``None`` fields are left out of the JSON line."""

    timestamp: str
    correlation_id: str
    operation: str
    outcome: str
    reason: str | None
    duration_ms: int | None
    command: str | None
    exit_code: int | None

    def to_json(self) -> str:
        payload = {k: v for k, v in asdict(self).items() if v is not None}
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class AuditLogger:
    """Writes audit events through dedicated logging handlers.

    The handlers are owned by the instance rather than attached to a named logger, so
    audit lines never mix with application logs. Sink I/O errors are reported by
    ``logging.Handler.handleError`` and never break tool execution.
    """

    def __init__(
        self,
        *,
        sink_path: Path | None,
        max_bytes: int = 5 * 1024 * 1024,
        max_backups: int = 2,
    ) -> None:
        """Create an audit logger.

        Args:
            sink_path: Optional JSONL file; rotated to ``.1`` .. ``.<max_backups>``
                once it reaches ``max_bytes``. With ``max_backups=0`` it is never rotated.
        """
        self._handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if sink_path is not None:
            try:
                sink_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.warning("Audit file sink disabled: %s", exc)
            else:
                self._handlers.append(
                    RotatingFileHandler(
                        sink_path,
                        maxBytes=max_bytes,
                        backupCount=max_backups,
                        encoding="utf-8",
                        delay=True,
                    )
                )

    def write_event(self, event: AuditEvent) -> None:
        """Emit one audit line to every sink."""
        record = logging.makeLogRecord(
            {"name": __name__, "levelno": logging.INFO, "levelname": "INFO", "msg": event.to_json()}
        )
        for handler in self._handlers:
            handler.handle(record)

    def close(self) -> None:
        """Close the file sink, if any."""
        for handler in self._handlers[1:]:
            handler.close()

    def measure_start(self) -> float:
        """Return a monotonic start timestamp for duration measurement."""
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        """Convert a monotonic start timestamp into elapsed milliseconds."""
        return int((time.monotonic() - start) * 1000)


def build_event(
    *,
    correlation_id: str,
    operation: str,
    outcome: str,
    reason: str | None = None,
    duration_ms: int | None = None,
    command: str | None = None,
    exit_code: int | None = None,
) -> AuditEvent:
    """Construct an audit event."""
    return AuditEvent(
        timestamp=_now_rfc3339(),
        correlation_id=correlation_id,
        operation=operation,
        outcome=outcome,
        reason=reason,
        duration_ms=duration_ms,
        command=command,
        exit_code=exit_code,
    )
