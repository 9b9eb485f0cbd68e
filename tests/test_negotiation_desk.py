from __future__ import annotations

from charterdesk.models.deal import DealTags
from charterdesk.models.enums import Classification
from charterdesk.schemas.offers import RoundInput
from charterdesk.services.negotiation_desk import (
    BUSY_ADVISORY,
    DRAFT_FAILED_ADVISORY,
    EMPTY_DRAFT_ADVISORY,
    EMPTY_INPUT_ADVISORY,
    LEDGER_FROZEN_ADVISORY,
    ROUND_AFTER_FIX_ADVISORY,
)
from charterdesk.services.recap_formatter import NOT_FIXED_ADVISORY


class _Extractor:
    def __init__(self, terms):
        self.terms = terms
        self.calls = 0

    def extract(self, raw_text, tags, tone):
        self.calls += 1
        return self.terms


class _FailingExtractor:
    def extract(self, raw_text, tags, tone):
        raise RuntimeError("extraction service unavailable")


class _FailingWriter:
    def draft(self, raw_text, offer, counter_on, tags, tone):
        raise RuntimeError("drafting service unavailable")


class _Writer:
    def __init__(self, draft):
        self.draft_payload = draft
        self.seen_counter_on = None

    def draft(self, raw_text, offer, counter_on, tags, tone):
        self.seen_counter_on = counter_on
        return self.draft_payload


def test_two_round_scenario_to_recap(desk):
    first = desk.save_round(
        "D1",
        RoundInput(offer={"freight": "USD 30 pmt", "laycan": "1-5 Jan"}, route="ECI", size="12kt"),
    )
    assert first.ok
    assert first.payload.round_number == 1

    ledger = desk.ledger("D1")
    assert ledger.terms.freight == "USD 30 pmt"
    assert ledger.terms.laycan == "1-5 Jan"
    assert ledger.terms.payment == ""

    second = desk.save_round(
        "D1",
        RoundInput(offer={"freight": "USD 31 pmt"}, counter_on={"freight": "USD 32 pmt"}, route="ECI"),
    )
    assert second.payload.round_number == 2
    assert desk.ledger("D1").terms.freight == "USD 32 pmt"

    fixed = desk.mark_fixed(second.payload.round_id)
    assert fixed.ok
    assert fixed.payload.fixed is True
    assert fixed.payload.fixed_round == 2

    recap = desk.generate_recap("D1")
    assert recap.ok
    assert "Freight\tUSD 32 pmt" in recap.payload
    assert "Round: 2" in recap.payload


def test_recap_refused_until_fixed(desk):
    assert desk.generate_recap("never-seen").message == NOT_FIXED_ADVISORY

    saved = desk.save_round("D1", RoundInput(offer={"freight": "USD 30 pmt"}))
    refused = desk.generate_recap("D1")
    assert refused.ok is False
    assert refused.payload is None
    assert refused.message == NOT_FIXED_ADVISORY

    desk.mark_dropped(saved.payload.round_id)
    assert desk.generate_recap("D1").ok is False


def test_recap_is_byte_stable_after_fixing(desk):
    saved = desk.save_round("D1", RoundInput(offer={"freight": "USD 30 pmt"}))
    desk.mark_fixed(saved.payload.round_id)
    assert desk.generate_recap("D1").payload == desk.generate_recap("D1").payload


def test_missing_deal_id_starts_new_deal(desk):
    saved = desk.save_round(None, RoundInput(subject="RE: Counter"))
    assert saved.ok
    deal_id = saved.payload.deal_id
    assert deal_id.startswith("deal-")
    assert desk.deals.get_deal(deal_id) is not None


def test_ledger_frozen_after_fix_but_rounds_still_recorded(desk):
    saved = desk.save_round("D1", RoundInput(offer={"freight": "USD 30 pmt"}))
    desk.mark_fixed(saved.payload.round_id)

    later = desk.save_round("D1", RoundInput(offer={"laycan": "1-5 Jan"}, counter_on={"freight": "USD 40 pmt"}))
    assert later.ok is False
    assert later.message == ROUND_AFTER_FIX_ADVISORY
    assert later.payload.round_number == 2

    ledger = desk.ledger("D1")
    assert ledger.terms.freight == "USD 30 pmt"
    assert ledger.terms.laycan == ""

    edit = desk.set_ledger_field("D1", "freight", "USD 1 pmt")
    assert edit.message == LEDGER_FROZEN_ADVISORY
    accept = desk.accept_owner_value("D1", "laycan")
    assert accept.message == LEDGER_FROZEN_ADVISORY
    assert desk.ledger("D1").terms.freight == "USD 30 pmt"


def test_direct_edit_is_authoritative_while_open(desk):
    desk.save_round("D1", RoundInput(offer={"freight": "USD 30 pmt"}))
    outcome = desk.set_ledger_field("D1", "freight", "USD 29.50 pmt")
    assert outcome.ok
    assert desk.ledger("D1").terms.freight == "USD 29.50 pmt"

    assert desk.set_ledger_field("D1", "vessel", "MT Golden Star").ok
    assert desk.ledger("D1").header.vessel == "MT Golden Star"
    assert desk.set_ledger_field("D1", "bogus", "x").ok is False


def test_reconcile_against_latest_offer_and_resolve_rows(desk):
    desk.save_round("D1", RoundInput(offer={"freight": "USD 30 pmt", "laycan": "1-5 Jan"}))
    desk.save_round("D1", RoundInput(offer={"freight": "USD 31 pmt", "laycan": "1-5  jan"}))

    rows = {row.field_name: row for row in desk.reconcile("D1")}
    assert rows["freight"].classification == Classification.DISAGREEMENT
    assert rows["freight"].owner_value == "USD 31 pmt"
    assert rows["freight"].ledger_value == "USD 30 pmt"
    assert rows["laycan"].classification == Classification.AGREED
    assert rows["payment"].classification == Classification.MISSING

    kept = desk.keep_ledger_value("D1", "freight")
    assert kept.payload == "USD 30 pmt"

    accepted = desk.accept_owner_value("D1", "freight")
    assert accepted.ok
    assert accepted.payload == "USD 31 pmt"
    rows = {row.field_name: row for row in desk.reconcile("D1")}
    assert rows["freight"].classification == Classification.AGREED


def test_reconcile_normalizes_explicit_offer_keys(desk):
    desk.save_round("D1", RoundInput(offer={"discharge_ports": "Kandla"}))
    rows = {row.field_name: row for row in desk.reconcile("D1", {"disch_ports": "kandla"})}
    assert rows["discharge_ports"].classification == Classification.AGREED


def test_draft_and_save_uses_collaborators(desk):
    extractor = _Extractor({"freight": "USD 34 pmt", "qty": "12,000 mt", "subjects": "Subs stem"})
    writer = _Writer({"subject": "RE: Counter / ECI / 12kt", "body": "Please maintain USD 32 pmt."})
    raw = "Freight : USD 33.00pmt basis 1/1\nLaycan : 1-5 Jan"

    outcome = desk.draft_and_save(
        "D1",
        raw,
        DealTags(route="ECI", cargo="Palms: CPO", size="12kt", basis="ex-Padang"),
        {"freight": "USD 32 pmt", "other": "Owners to confirm coils"},
        extractor,
        writer,
    )
    assert outcome.ok
    item = outcome.payload
    assert item.subject == "RE: Counter / ECI / 12kt"
    assert item.raw_input == raw
    assert item.offer["freight"] == "USD 33.00pmt basis 1/1"
    assert item.offer["cargo_qty"] == "12,000 mt"
    assert writer.seen_counter_on == {"freight": "USD 32 pmt", "other_terms": "Owners to confirm coils"}

    ledger = desk.ledger("D1")
    assert ledger.terms.freight == "USD 32 pmt"
    assert ledger.terms.laycan == "1-5 Jan"
    assert ledger.terms.subjects_validity == "Subs stem"
    assert ledger.terms.other_terms == "Owners to confirm coils"


def test_draft_and_save_advisories(desk):
    extractor = _Extractor({})
    empty_writer = _Writer({"subject": "RE: Counter", "body": "   "})
    tags = DealTags(route="ECI")

    assert desk.draft_and_save("D1", "  ", tags, {}, extractor, empty_writer).message == EMPTY_INPUT_ADVISORY
    assert extractor.calls == 0

    outcome = desk.draft_and_save("D1", "Freight : USD 30 pmt", tags, {}, extractor, empty_writer)
    assert outcome.message == EMPTY_DRAFT_ADVISORY
    assert desk.rounds.list_rounds("D1") == []

    desk._busy = True
    assert desk.draft_and_save("D1", "text", tags, {}, extractor, empty_writer).message == BUSY_ADVISORY


def test_draft_and_save_reports_collaborator_failures(desk):
    tags = DealTags(route="ECI")
    writer = _Writer({"subject": "RE: Counter", "body": "Owners to revert"})

    outcome = desk.draft_and_save("D1", "Freight : USD 30 pmt", tags, {}, _FailingExtractor(), writer)
    assert not outcome.ok
    assert outcome.message == DRAFT_FAILED_ADVISORY
    assert desk._busy is False

    outcome = desk.draft_and_save("D1", "Freight : USD 30 pmt", tags, {}, _Extractor({}), _FailingWriter())
    assert outcome.message == DRAFT_FAILED_ADVISORY
    assert desk._busy is False

    assert desk.rounds.list_rounds("D1") == []
    assert desk.repository.list_deal_ids() == []


def test_draft_and_save_stores_long_values_verbatim(desk):
    subject = "S" * 600
    body = "B" * 25000
    raw_input = "Freight : USD 30 pmt\n" + "x" * 60000
    tags = DealTags(route="R" * 100, cargo="C" * 300, size="12kt", basis="B" * 90)
    writer = _Writer({"subject": subject, "body": body})

    outcome = desk.draft_and_save("D1", raw_input, tags, {}, _Extractor({}), writer)

    assert outcome.ok
    item = outcome.payload
    assert item.subject == subject
    assert item.body == body
    assert item.raw_input == raw_input
    assert item.tags.route == "R" * 100
    assert item.tags.cargo == "C" * 300
    assert desk._busy is False
