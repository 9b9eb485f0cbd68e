"""Reconciliation of the owners' latest offer against the consolidated ledger."""

from __future__ import annotations

from collections.abc import Mapping

from charterdesk.models.enums import Classification, Provenance
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.reconciliation import ReconciliationRow
from charterdesk.models.terms import TERM_FIELDS, TERM_LABELS
from charterdesk.services.ledger_projector import FieldUpdate, apply_update
from charterdesk.utils.validators import normalize_for_compare, sanitize_text


def classify(owner_value: str | None, ledger_value: str | None) -> Classification:
    owner = normalize_for_compare(owner_value)
    current = normalize_for_compare(ledger_value)
    if not owner and not current:
        return Classification.MISSING
    if owner and current and owner == current:
        return Classification.AGREED
    return Classification.DISAGREEMENT


def reconcile(offer: Mapping[str, str] | None, ledger: ConsolidatedLedger) -> list[ReconciliationRow]:
    """One row per tracked term field, in display order. Pure."""
    offer = offer or {}
    rows = []
    for name in TERM_FIELDS:
        owner_value = sanitize_text(offer.get(name))
        ledger_value = sanitize_text(ledger.get(name))
        rows.append(
            ReconciliationRow(
                field_name=name,
                field_label=TERM_LABELS[name],
                owner_value=owner_value,
                ledger_value=ledger_value,
                classification=classify(owner_value, ledger_value),
            )
        )
    return rows


def summarize(rows: list[ReconciliationRow]) -> dict[str, int]:
    counts = {item.value: 0 for item in Classification}
    for row in rows:
        counts[row.classification.value] += 1
    return counts


def accept_owner_value(ledger: ConsolidatedLedger, offer: Mapping[str, str] | None, name: str) -> bool:
    """Single-field override pass with the owners' value."""
    if name not in TERM_FIELDS:
        raise KeyError(f"Unknown term field: {name}")
    value = (offer or {}).get(name, "")
    return apply_update(ledger, FieldUpdate(field=name, value=value, provenance=Provenance.MANAGER_OVERRIDE))


def keep_ledger_value(ledger: ConsolidatedLedger, name: str) -> str:
    """Explicit decision to keep the ledger value; writes back the same value."""
    if name not in TERM_FIELDS:
        raise KeyError(f"Unknown term field: {name}")
    current = ledger.get(name)
    setattr(ledger.terms, name, current)
    return current
