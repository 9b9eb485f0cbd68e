"""Negotiation desk facade over the round store, ledger, reconciliation and recap.

Every operation completes before returning. Failures the desk can act on
come back as an :class:`Outcome` with an advisory message, never as an
exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from charterdesk.core.logging import LogContext, build_log_event
from charterdesk.database.deal_store import DealRepository
from charterdesk.models.deal import DealTags
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.outcome import Outcome
from charterdesk.models.reconciliation import ReconciliationRow
from charterdesk.models.round import Round
from charterdesk.models.terms import HEADER_FIELDS, TERM_FIELDS
from charterdesk.schemas.offers import DraftPayload, OfferPayload, RoundInput
from charterdesk.services import reconciliation
from charterdesk.services.base_service import BaseService
from charterdesk.services.collaborators import DraftWriter, OfferExtractor
from charterdesk.services.deal_service import DealService
from charterdesk.services.ledger_projector import merge_into_ledger, set_ledger_field
from charterdesk.services.offer_normalizer import combine_extractions, pre_extract
from charterdesk.services.recap_formatter import NOT_FIXED_ADVISORY, format_recap
from charterdesk.services.round_store import RoundStore, append_to_record
from charterdesk.utils.ids import new_deal_id
from charterdesk.utils.validators import contains_forbidden_tokens

logger = logging.getLogger(__name__)

LEDGER_FROZEN_ADVISORY = "Deal is fixed; the ledger is read-only."
ROUND_AFTER_FIX_ADVISORY = "Deal is fixed; round recorded for history, ledger unchanged."
BUSY_ADVISORY = "A draft is already being generated. Please wait."
EMPTY_DRAFT_ADVISORY = "Draft returned empty. Please retry."
EMPTY_INPUT_ADVISORY = "Please paste the owners/broker text first."
DRAFT_FAILED_ADVISORY = "Draft failed. Please refresh and retry."


class NegotiationDesk(BaseService):
    """Entry point used by the desk UI."""

    def __init__(self, repository: DealRepository | None = None) -> None:
        super().__init__(repository)
        self.rounds = RoundStore(self.repository)
        self.deals = DealService(self.repository)
        self._busy = False

    def ledger(self, deal_id: str) -> ConsolidatedLedger:
        return self.repository.get_or_create(deal_id).ledger

    def latest_round(self, deal_id: str) -> Round | None:
        items = self.rounds.list_rounds(deal_id)
        return items[-1] if items else None

    def save_round(self, deal_id: str | None, round_data: RoundInput) -> Outcome:
        """Append a round and merge its offer and overrides into the ledger.

        A missing deal id starts a new deal.
        """
        deal_id = deal_id or new_deal_id()
        with self.repository.transaction(deal_id) as record:
            item = append_to_record(record, round_data)
            frozen = record.deal.fixed
            changed: list[str] = []
            if not frozen:
                changed = merge_into_ledger(record.ledger, item.offer, item.counter_on)
                record.deal.tags = item.tags

        context = LogContext(deal_id=deal_id, round_id=item.round_id, round_number=item.round_number)
        logger.info("round.saved", extra=build_log_event("round.saved", context, changed_fields=changed, frozen=frozen))
        if frozen:
            return Outcome.advisory(ROUND_AFTER_FIX_ADVISORY, payload=item)
        return Outcome.success(payload=item, message="Saved.")

    def draft_and_save(
        self,
        deal_id: str | None,
        raw_input: str,
        tags: DealTags,
        counter_on: Mapping[str, Any] | None,
        extractor: OfferExtractor,
        writer: DraftWriter,
        tone: str = "Balanced",
    ) -> Outcome:
        """Run the external extraction and drafting calls, then save the round."""
        if self._busy:
            return Outcome.advisory(BUSY_ADVISORY)
        if not raw_input.strip():
            return Outcome.advisory(EMPTY_INPUT_ADVISORY)

        self._busy = True
        try:
            extracted = extractor.extract(raw_input, tags, tone)
            offer = OfferPayload.from_mapping(combine_extractions(pre_extract(raw_input), extracted)).terms
            overrides = OfferPayload.from_mapping(dict(counter_on or {})).terms
            draft = DraftPayload.model_validate(writer.draft(raw_input, offer, overrides, tags, tone) or {})
        except Exception:
            logger.exception(
                "draft.collaborator_failed",
                extra={"event": "draft.collaborator_failed", "deal_id": deal_id},
            )
            return Outcome.advisory(DRAFT_FAILED_ADVISORY)
        finally:
            self._busy = False

        if not draft.has_body:
            return Outcome.advisory(EMPTY_DRAFT_ADVISORY)
        if contains_forbidden_tokens(draft.body):
            logger.warning(
                "draft.placeholder_tokens",
                extra={"event": "draft.placeholder_tokens", "deal_id": deal_id},
            )

        round_data = RoundInput(
            subject=draft.subject,
            body=draft.body,
            raw_input=raw_input,
            offer=offer,
            counter_on=overrides,
            route=tags.route,
            cargo=tags.cargo,
            size=tags.size,
            basis=tags.basis,
        )
        return self.save_round(deal_id, round_data)

    def reconcile(self, deal_id: str, offer: Mapping[str, Any] | None = None) -> list[ReconciliationRow]:
        """Compare an offer (default: the latest round's) against the ledger."""
        if offer is None:
            latest = self.latest_round(deal_id)
            terms = dict(latest.offer) if latest is not None else {}
        else:
            terms = OfferPayload.from_mapping(dict(offer)).terms
        return reconciliation.reconcile(terms, self.ledger(deal_id))

    def accept_owner_value(self, deal_id: str, field: str, offer: Mapping[str, Any] | None = None) -> Outcome:
        if field not in TERM_FIELDS:
            return Outcome.advisory(f"Unknown term field: {field}")
        if offer is None:
            latest = self.latest_round(deal_id)
            terms = dict(latest.offer) if latest is not None else {}
        else:
            terms = OfferPayload.from_mapping(dict(offer)).terms

        with self.repository.transaction(deal_id) as record:
            if record.deal.fixed:
                return Outcome.advisory(LEDGER_FROZEN_ADVISORY)
            changed = reconciliation.accept_owner_value(record.ledger, terms, field)

        logger.info(
            "reconcile.accepted_owner_value",
            extra={"event": "reconcile.accepted_owner_value", "deal_id": deal_id, "field": field, "changed": changed},
        )
        return Outcome.success(payload=record.ledger.get(field))

    def keep_ledger_value(self, deal_id: str, field: str) -> Outcome:
        if field not in TERM_FIELDS:
            return Outcome.advisory(f"Unknown term field: {field}")
        with self.repository.transaction(deal_id) as record:
            value = reconciliation.keep_ledger_value(record.ledger, field)
        logger.info(
            "reconcile.kept_ledger_value",
            extra={"event": "reconcile.kept_ledger_value", "deal_id": deal_id, "field": field},
        )
        return Outcome.success(payload=value)

    def set_ledger_field(self, deal_id: str, field: str, value: str) -> Outcome:
        """Direct edit of a term or header field while the deal is open."""
        if field not in TERM_FIELDS and field not in HEADER_FIELDS:
            return Outcome.advisory(f"Unknown ledger field: {field}")
        with self.repository.transaction(deal_id) as record:
            if record.deal.fixed:
                return Outcome.advisory(LEDGER_FROZEN_ADVISORY)
            set_ledger_field(record.ledger, field, value)
        return Outcome.success(payload=record.ledger.get(field))

    def mark_fixed(self, round_id: str) -> Outcome:
        return self.deals.mark_fixed(round_id)

    def mark_dropped(self, round_id: str) -> Outcome:
        return self.deals.mark_dropped(round_id)

    def generate_recap(self, deal_id: str) -> Outcome:
        record = self.repository.load(deal_id)
        if record is None:
            return Outcome.advisory(NOT_FIXED_ADVISORY)
        text = format_recap(record.deal, record.ledger)
        if text is None:
            return Outcome.advisory(NOT_FIXED_ADVISORY)
        return Outcome.success(payload=text)
