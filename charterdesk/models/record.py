"""Per-deal aggregate persisted as one document."""

from __future__ import annotations

from dataclasses import dataclass, field

from charterdesk.models.deal import Deal
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.round import Round


@dataclass
class DealRecord:
    deal: Deal
    ledger: ConsolidatedLedger
    rounds: list[Round] = field(default_factory=list)

    @property
    def deal_id(self) -> str:
        return self.deal.deal_id

    @classmethod
    def new(cls, deal_id: str) -> "DealRecord":
        return cls(deal=Deal(deal_id=deal_id), ledger=ConsolidatedLedger(deal_id=deal_id))

    def find_round(self, round_id: str) -> Round | None:
        for item in self.rounds:
            if item.round_id == round_id:
                return item
        return None

    def max_round_number(self) -> int:
        return max((item.round_number for item in self.rounds), default=0)
