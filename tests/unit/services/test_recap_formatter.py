from __future__ import annotations

from datetime import datetime, timezone

from charterdesk.core.config import get_config
from charterdesk.models.deal import Deal, DealTags
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.terms import TERM_LABELS
from charterdesk.services.recap_formatter import (
    PLACEHOLDER,
    RECAP_TERM_FIELDS,
    TERMINATOR,
    format_recap,
    render_recap,
)


def _fixed_deal():
    return Deal(
        deal_id="D1",
        tags=DealTags(route="ECI", cargo="Palms: RBD Palm Olein", size="12kt", basis="ex-Padang"),
        fixed=True,
        fixed_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
        fixed_round=2,
    )


def test_format_recap_refused_for_open_deal():
    deal = Deal(deal_id="D1")
    assert format_recap(deal, ConsolidatedLedger(deal_id="D1")) is None


def test_recap_layout():
    ledger = ConsolidatedLedger(deal_id="D1")
    ledger.terms.freight = "USD 32 pmt"
    ledger.terms.laycan = "1-5 Jan"
    ledger.header.vessel = "MT Golden Star"

    text = format_recap(_fixed_deal(), ledger)
    lines = text.split("\n")

    assert lines[0] == "RECAP – ECI / Palms: RBD Palm Olein / 12kt (ex-Padang)"
    assert lines[1] == "Deal: D1   Round: 2"
    assert "Vessel:\tMT Golden Star" in lines
    assert f"Owners:\t{get_config().UNKNOWN_PLACEHOLDER}" in lines
    assert "Freight\tUSD 32 pmt" in lines
    assert "Laycan\t1-5 Jan" in lines
    assert f"Demurrage\t{PLACEHOLDER}" in lines
    assert lines[-1] == TERMINATOR


def test_every_term_field_rendered_exactly_once_even_when_empty():
    text = format_recap(_fixed_deal(), ConsolidatedLedger(deal_id="D1"))
    for name in RECAP_TERM_FIELDS:
        label = TERM_LABELS[name]
        assert sum(1 for line in text.split("\n") if line.startswith(f"{label}\t")) == 1
    assert sum(1 for line in text.split("\n") if line.startswith("Others:\t")) == 1


def test_others_line_falls_back_to_riders():
    ledger = ConsolidatedLedger(deal_id="D1")
    text = format_recap(_fixed_deal(), ledger)
    assert f"Others:\t{get_config().STANDING_RIDERS}" in text

    ledger.terms.other_terms = "Owners to confirm heating coils"
    text = format_recap(_fixed_deal(), ledger)
    assert "Others:\tOwners to confirm heating coils" in text


def test_empty_header_value_uses_placeholder():
    ledger = ConsolidatedLedger(deal_id="D1")
    ledger.header.cp_form = ""
    text = render_recap(_fixed_deal(), ledger)
    assert f"CP Form:\t{PLACEHOLDER}" in text


def test_recap_is_deterministic():
    ledger = ConsolidatedLedger(deal_id="D1")
    ledger.terms.freight = "USD 32 pmt"
    deal = _fixed_deal()
    assert format_recap(deal, ledger) == format_recap(deal, ledger)
