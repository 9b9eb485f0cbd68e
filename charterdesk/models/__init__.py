"""Domain models for deals, rounds and the consolidated ledger."""

from charterdesk.models.deal import Deal, DealTags
from charterdesk.models.enums import Classification, DealState, Provenance, RoundStatus
from charterdesk.models.ledger import ConsolidatedLedger, DealHeader, LedgerTerms
from charterdesk.models.outcome import Outcome
from charterdesk.models.reconciliation import ReconciliationRow
from charterdesk.models.record import DealRecord
from charterdesk.models.round import Round

__all__ = [
    "Classification",
    "ConsolidatedLedger",
    "Deal",
    "DealHeader",
    "DealRecord",
    "DealState",
    "DealTags",
    "LedgerTerms",
    "Outcome",
    "Provenance",
    "ReconciliationRow",
    "Round",
    "RoundStatus",
]
