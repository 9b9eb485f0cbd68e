"""Structured logging helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields expected in structured logs."""

    deal_id: str | None = None
    round_id: str | None = None
    round_number: int | None = None
    trace_id: str | None = None


def build_log_event(event: str, context: LogContext, **fields: Any) -> dict[str, Any]:
    """Build a normalized structured log payload."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "deal_id": context.deal_id,
        "round_id": context.round_id,
        "round_number": context.round_number,
        "trace_id": context.trace_id,
    }
    payload.update(fields)
    return payload
