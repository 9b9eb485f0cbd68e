"""Ledger projector: merges round offers and manager overrides into the ledger.

Two rules resolve every conflict:

* an extracted value only fills a field that is still empty (first writer
  wins across rounds);
* a manager override always replaces the current value.

Header fields count the unknown placeholder (``TBN``) as empty. ``riders`` is
a standing clause and is reasserted on every merge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from charterdesk.core.config import get_config
from charterdesk.models.enums import Provenance
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.terms import HEADER_FIELDS, MERGEABLE_HEADER_FIELDS, TERM_FIELDS, is_blank
from charterdesk.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

MERGE_FIELDS: tuple[str, ...] = TERM_FIELDS + MERGEABLE_HEADER_FIELDS


@dataclass(frozen=True)
class FieldUpdate:
    field: str
    value: str
    provenance: Provenance


def _is_empty_for_fill(ledger: ConsolidatedLedger, name: str) -> bool:
    current = ledger.get(name)
    if is_blank(current):
        return True
    if name in HEADER_FIELDS:
        placeholder = get_config().UNKNOWN_PLACEHOLDER
        return current.strip().casefold() == placeholder.casefold()
    return False


def apply_update(ledger: ConsolidatedLedger, update: FieldUpdate) -> bool:
    """Apply one tagged update; returns True when the ledger changed."""
    if update.field not in TERM_FIELDS and update.field not in HEADER_FIELDS:
        raise KeyError(f"Unknown ledger field: {update.field}")
    value = sanitize_text(update.value)

    if update.provenance is not Provenance.DIRECT_EDIT:
        if not value:
            return False
        if update.provenance is Provenance.EXTRACTED and not _is_empty_for_fill(ledger, update.field):
            return False

    if ledger.get(update.field) == value:
        return False
    ledger.set(update.field, value)
    return True


def apply_updates(ledger: ConsolidatedLedger, updates: Iterable[FieldUpdate]) -> list[str]:
    """Apply updates in order and return the names of the fields that changed."""
    changed = []
    for update in updates:
        if apply_update(ledger, update):
            changed.append(update.field)
    return changed


def _tagged(source: Mapping[str, str] | None, provenance: Provenance) -> list[FieldUpdate]:
    source = source or {}
    return [
        FieldUpdate(field=name, value=source[name], provenance=provenance)
        for name in MERGE_FIELDS
        if name in source
    ]


def reassert_riders(ledger: ConsolidatedLedger) -> None:
    riders = get_config().STANDING_RIDERS
    if ledger.header.riders != riders:
        ledger.set("riders", riders)


def merge_into_ledger(
    ledger: ConsolidatedLedger,
    offer: Mapping[str, str] | None,
    overrides: Mapping[str, str] | None,
) -> list[str]:
    """Fill-if-empty pass over ``offer``, then override pass over ``overrides``.

    Both mappings must already use canonical field names. Mutates ``ledger``
    in place and returns the changed field names (duplicates collapsed).
    """
    changed = apply_updates(ledger, _tagged(offer, Provenance.EXTRACTED))
    changed += apply_updates(ledger, _tagged(overrides, Provenance.MANAGER_OVERRIDE))
    reassert_riders(ledger)
    changed = list(dict.fromkeys(changed))
    logger.debug(
        "ledger.merged",
        extra={"event": "ledger.merged", "deal_id": ledger.deal_id, "changed_fields": changed},
    )
    return changed


def set_ledger_field(ledger: ConsolidatedLedger, name: str, value: str) -> bool:
    """Direct desk edit of one term or header field; always authoritative."""
    return apply_update(ledger, FieldUpdate(field=name, value=value, provenance=Provenance.DIRECT_EDIT))
