"""Identifier generation helpers."""

from __future__ import annotations

import time
import uuid


def new_deal_id() -> str:
    """Create a time-prefixed deal identifier."""
    return f"deal-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def new_round_id() -> str:
    """Create a UUID4-based round identifier."""
    return str(uuid.uuid4())
