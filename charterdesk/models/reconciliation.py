"""Reconciliation row model (ephemeral, never persisted)."""

from __future__ import annotations

from dataclasses import dataclass

from charterdesk.models.enums import Classification


@dataclass(frozen=True)
class ReconciliationRow:
    field_name: str
    field_label: str
    owner_value: str
    ledger_value: str
    classification: Classification
