"""Negotiation round snapshot model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from charterdesk.models.base import utcnow
from charterdesk.models.deal import DealTags
from charterdesk.models.enums import RoundStatus


@dataclass(frozen=True)
class Round:
    """Immutable snapshot of one paste-and-draft cycle.

    Only ``status`` and ``last_updated_at`` ever change, and the round store
    does that by swapping in a copy rather than editing this instance.
    """

    round_id: str
    deal_id: str
    round_number: int
    created_at: datetime = field(default_factory=utcnow)
    last_updated_at: datetime = field(default_factory=utcnow)
    status: RoundStatus = RoundStatus.IN_PROGRESS
    subject: str = ""
    body: str = ""
    raw_input: str = ""
    offer: dict[str, str] = field(default_factory=dict)
    counter_on: dict[str, str] = field(default_factory=dict)
    tags: DealTags = field(default_factory=DealTags)
