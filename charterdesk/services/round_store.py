"""Round store: append-only round snapshots grouped by deal."""

from __future__ import annotations

import logging
from dataclasses import replace

from charterdesk.core.exceptions import NotFoundError
from charterdesk.models.deal import DealTags
from charterdesk.models.enums import RoundStatus
from charterdesk.models.record import DealRecord
from charterdesk.models.round import Round
from charterdesk.models.base import utcnow
from charterdesk.schemas.offers import RoundInput
from charterdesk.services.base_service import BaseService
from charterdesk.utils.ids import new_round_id

logger = logging.getLogger(__name__)


def append_to_record(record: DealRecord, round_data: RoundInput) -> Round:
    """Append the next round to an already loaded deal record."""
    now = utcnow()
    item = Round(
        round_id=new_round_id(),
        deal_id=record.deal_id,
        round_number=record.max_round_number() + 1,
        created_at=now,
        last_updated_at=now,
        status=RoundStatus.IN_PROGRESS,
        subject=round_data.subject,
        body=round_data.body,
        raw_input=round_data.raw_input,
        offer=dict(round_data.offer),
        counter_on=dict(round_data.counter_on),
        tags=DealTags(
            route=round_data.route,
            cargo=round_data.cargo,
            size=round_data.size,
            basis=round_data.basis,
        ),
    )
    record.rounds.append(item)
    return item


def set_status_in_record(record: DealRecord, round_id: str, status: RoundStatus) -> Round:
    """Swap in a copy of the round with only status and timestamp changed."""
    for index, item in enumerate(record.rounds):
        if item.round_id == round_id:
            updated = replace(item, status=RoundStatus(status), last_updated_at=utcnow())
            record.rounds[index] = updated
            return updated
    raise NotFoundError(f"Round {round_id} not found in deal {record.deal_id}")


class RoundStore(BaseService):
    """Service for appending and listing rounds."""

    def append_round(self, deal_id: str, round_data: RoundInput) -> Round:
        with self.repository.transaction(deal_id) as record:
            item = append_to_record(record, round_data)
        logger.info(
            "round.appended",
            extra={"event": "round.appended", "deal_id": deal_id, "round_number": item.round_number},
        )
        return item

    def list_rounds(self, deal_id: str) -> list[Round]:
        record = self.repository.load(deal_id)
        if record is None:
            return []
        return sorted(record.rounds, key=lambda item: item.round_number)

    def max_round_number(self, deal_id: str) -> int:
        record = self.repository.load(deal_id)
        return record.max_round_number() if record is not None else 0

    def find_round(self, round_id: str) -> Round | None:
        for record in self.repository.load_all():
            item = record.find_round(round_id)
            if item is not None:
                return item
        return None

    def update_round_status(self, round_id: str, status: RoundStatus) -> Round:
        """Explicit desk reset of a round's status; no workflow rules apply here."""
        item = self.find_round(round_id)
        if item is None:
            raise NotFoundError(f"Round {round_id} not found")
        with self.repository.transaction(item.deal_id) as record:
            updated = set_status_in_record(record, round_id, status)
        logger.info(
            "round.status_updated",
            extra={
                "event": "round.status_updated",
                "deal_id": updated.deal_id,
                "round_number": updated.round_number,
                "status": updated.status.value,
            },
        )
        return updated
