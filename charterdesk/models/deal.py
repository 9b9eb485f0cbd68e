"""Deal and classification-tag models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from charterdesk.models.base import utcnow
from charterdesk.models.enums import DealState


@dataclass(frozen=True)
class DealTags:
    """Route/cargo/size/basis classification carried by rounds and deals."""

    route: str = ""
    cargo: str = ""
    size: str = ""
    basis: str = ""


@dataclass
class Deal:
    deal_id: str
    created_at: datetime = field(default_factory=utcnow)
    tags: DealTags = field(default_factory=DealTags)
    fixed: bool = False
    fixed_at: datetime | None = None
    fixed_round: int | None = None

    @property
    def state(self) -> DealState:
        return DealState.FIXED if self.fixed else DealState.OPEN

    def is_consistent(self) -> bool:
        """``fixed`` holds exactly when both ``fixed_at`` and ``fixed_round`` are set."""
        has_marks = self.fixed_at is not None and self.fixed_round is not None
        return self.fixed == has_marks
