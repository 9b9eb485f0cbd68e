"""Deal lifecycle service: fixing, dropping and the fixtures board."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd

from charterdesk.core.config import get_config
from charterdesk.models.base import utcnow
from charterdesk.models.deal import Deal
from charterdesk.models.enums import RoundStatus
from charterdesk.models.outcome import Outcome
from charterdesk.models.record import DealRecord
from charterdesk.models.round import Round
from charterdesk.orchestration.state_machine import InvalidTransitionError, round_state_machine
from charterdesk.services.base_service import BaseService
from charterdesk.services.round_store import set_status_in_record
from charterdesk.utils.frames import records_to_df
from charterdesk.utils.ids import new_deal_id

logger = logging.getLogger(__name__)

EMPTY_CELL = "—"


@dataclass
class FixtureRow:
    deal_id: str
    latest_round: int
    fixed_round: int
    route: str
    cargo: str
    size: str
    basis: str
    vessel: str
    owners: str
    laycan: str
    load_ports: str
    discharge_ports: str
    freight: str
    demurrage: str
    payment: str
    fixed_at: datetime | None

    def haystack(self) -> str:
        return " ".join(
            [
                self.deal_id,
                self.route,
                self.cargo,
                self.size,
                self.basis,
                self.vessel,
                self.owners,
                self.load_ports,
                self.discharge_ports,
                self.freight,
                self.laycan,
            ]
        ).lower()


@dataclass
class CounterStats:
    total: int = 0
    in_progress: int = 0
    completed: int = 0
    dropped: int = 0


def _fixture_row(record: DealRecord) -> FixtureRow:
    ledger = record.ledger
    placeholder = get_config().UNKNOWN_PLACEHOLDER
    deal = record.deal

    def cell(name: str) -> str:
        return ledger.get(name).strip() or EMPTY_CELL

    return FixtureRow(
        deal_id=deal.deal_id,
        latest_round=record.max_round_number(),
        fixed_round=deal.fixed_round or 0,
        route=deal.tags.route,
        cargo=deal.tags.cargo,
        size=deal.tags.size,
        basis=deal.tags.basis,
        vessel=ledger.header.vessel.strip() or placeholder,
        owners=ledger.header.owners.strip() or placeholder,
        laycan=cell("laycan"),
        load_ports=cell("load_ports"),
        discharge_ports=cell("discharge_ports"),
        freight=cell("freight"),
        demurrage=cell("demurrage"),
        payment=cell("payment"),
        fixed_at=deal.fixed_at,
    )


class DealService(BaseService):
    """Service for deal creation and the Open -> Fixed lifecycle."""

    def get_or_create_deal(self, deal_id: str | None = None) -> Deal:
        """Idempotent: returns the stored deal or creates it (generating an id if needed)."""
        return self.repository.get_or_create(deal_id or new_deal_id()).deal

    def get_deal(self, deal_id: str) -> Deal | None:
        record = self.repository.load(deal_id)
        return record.deal if record is not None else None

    def _locate(self, round_id: str) -> DealRecord | None:
        for record in self.repository.load_all():
            if record.find_round(round_id) is not None:
                return record
        return None

    def _transition(self, round_id: str, target: RoundStatus) -> tuple[Outcome, DealRecord | None, Round | None]:
        located = self._locate(round_id)
        if located is None:
            return Outcome.advisory(f"Round {round_id} not found."), None, None
        current = located.find_round(round_id)
        try:
            round_state_machine.assert_transition(current.status, target)
        except InvalidTransitionError as exc:
            logger.info(
                "round.transition_refused",
                extra={
                    "event": "round.transition_refused",
                    "deal_id": located.deal_id,
                    "round_number": current.round_number,
                    "from_status": current.status.value,
                    "to_status": target.value,
                },
            )
            return Outcome.advisory(str(exc)), located, current
        return Outcome.success(), located, current

    def mark_fixed(self, round_id: str) -> Outcome:
        """Complete the round and fix its deal at that round number.

        The most recent mark always wins, even when it points at an earlier
        round than a previous fix.
        """
        outcome, located, current = self._transition(round_id, RoundStatus.COMPLETED)
        if not outcome.ok:
            return outcome

        with self.repository.transaction(located.deal_id) as record:
            updated = set_status_in_record(record, round_id, RoundStatus.COMPLETED)
            deal = record.deal
            previous_round = deal.fixed_round
            deal.fixed = True
            deal.fixed_at = utcnow()
            deal.fixed_round = updated.round_number
            deal.tags = updated.tags

        if previous_round is not None and previous_round > updated.round_number:
            logger.warning(
                "deal.fixed_round_moved_back",
                extra={
                    "event": "deal.fixed_round_moved_back",
                    "deal_id": deal.deal_id,
                    "previous_round": previous_round,
                    "fixed_round": updated.round_number,
                },
            )
        logger.info(
            "deal.fixed",
            extra={"event": "deal.fixed", "deal_id": deal.deal_id, "fixed_round": deal.fixed_round},
        )
        return Outcome.success(payload=deal, message="Marked fixed.")

    def mark_dropped(self, round_id: str) -> Outcome:
        outcome, located, _ = self._transition(round_id, RoundStatus.DROPPED)
        if not outcome.ok:
            return outcome

        with self.repository.transaction(located.deal_id) as record:
            updated = set_status_in_record(record, round_id, RoundStatus.DROPPED)
        logger.info(
            "round.dropped",
            extra={"event": "round.dropped", "deal_id": updated.deal_id, "round_number": updated.round_number},
        )
        return Outcome.success(payload=updated, message="Marked dropped.")

    def list_fixed_deals(self, query: str | None = None) -> list[FixtureRow]:
        """Fixed deals, most recently fixed first, optionally filtered by a search string."""
        rows = [_fixture_row(record) for record in self.repository.load_all() if record.deal.fixed]
        needle = (query or "").strip().lower()
        if needle:
            rows = [row for row in rows if needle in row.haystack()]
        rows.sort(key=lambda row: row.fixed_at.isoformat() if row.fixed_at else "", reverse=True)
        return rows

    def fixtures_frame(self, query: str | None = None) -> pd.DataFrame:
        return records_to_df(self.list_fixed_deals(query), index_column="deal_id")

    def _all_rounds(self) -> list[Round]:
        return [item for record in self.repository.load_all() for item in record.rounds]

    def counter_stats(self) -> CounterStats:
        stats = CounterStats()
        for item in self._all_rounds():
            stats.total += 1
            if item.status == RoundStatus.IN_PROGRESS:
                stats.in_progress += 1
            elif item.status == RoundStatus.COMPLETED:
                stats.completed += 1
            elif item.status == RoundStatus.DROPPED:
                stats.dropped += 1
        return stats

    def stale_rounds(self, now: datetime | None = None) -> list[Round]:
        """In-progress rounds untouched for at least ``STALE_AFTER_HOURS``."""
        cutoff = (now or utcnow()) - timedelta(hours=get_config().STALE_AFTER_HOURS)
        return [
            item
            for item in self._all_rounds()
            if item.status == RoundStatus.IN_PROGRESS and item.last_updated_at <= cutoff
        ]

    def search_rounds(
        self,
        query: str | None = None,
        status: RoundStatus | None = None,
        route: str | None = None,
    ) -> list[Round]:
        needle = (query or "").strip().lower()
        matches = []
        for item in self._all_rounds():
            if status is not None and item.status != status:
                continue
            if route is not None and item.tags.route != route:
                continue
            if needle:
                hay = " ".join(
                    [
                        item.deal_id,
                        item.subject,
                        item.body,
                        item.raw_input,
                        item.status.value,
                        *vars(item.tags).values(),
                        *item.offer.values(),
                        *item.counter_on.values(),
                    ]
                ).lower()
                if needle not in hay:
                    continue
            matches.append(item)
        matches.sort(key=lambda item: item.created_at, reverse=True)
        return matches
