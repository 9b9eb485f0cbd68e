from __future__ import annotations

from charterdesk.services.offer_normalizer import (
    canonical_key,
    combine_extractions,
    normalize_offer,
    pre_extract,
)

PASTED = """Dear Sirs,
Owners counter as follows:
Laycan : 26 Jan-02 Feb
L/port : Dumai
D/port : Kandla
Freight : USD 33.00pmt basis 1/1
Additional USD 3.00pmt for 2nd load port
Laytime : 150/200 MTPH SHINC
Demurrage : USD 18,500 PDPR
Payment : 95% within 5 days BBB
"""


def test_canonical_key_maps_synonyms_case_insensitively():
    assert canonical_key("Laycan") == "laycan"
    assert canonical_key("laycan_window") == "laycan"
    assert canonical_key("disch_ports") == "discharge_ports"
    assert canonical_key("D/port") == "discharge_ports"
    assert canonical_key("premiums_2nd_load_disch") == "addl_2nd_load_disch"
    assert canonical_key("subjects") == "subjects_validity"
    assert canonical_key("other") == "other_terms"
    assert canonical_key("behavior_label") is None


def test_normalize_offer_prefers_exact_key_and_drops_unknown():
    result = normalize_offer(
        {
            "disch_ports": "Kandla",
            "discharge_ports": "Mundra",
            "Freight": None,
            "strategy_note": "ignore me",
            "premiums": ["+1.50pmt 2nd load", ""],
        }
    )
    assert result["discharge_ports"] == "Mundra"
    assert result["freight"] == ""
    assert result["addl_2nd_load_disch"] == "+1.50pmt 2nd load"
    assert "strategy_note" not in result


def test_normalize_offer_synonym_fills_when_exact_blank():
    result = normalize_offer({"subjects_validity": "", "subjects": "Subs stem, valid 30 mins"})
    assert result["subjects_validity"] == "Subs stem, valid 30 mins"


def test_pre_extract_reads_clear_terms():
    terms = pre_extract(PASTED)
    assert terms["laycan"] == "26 Jan-02 Feb"
    assert terms["load_ports"] == "Dumai"
    assert terms["discharge_ports"] == "Kandla"
    assert terms["freight"] == "USD 33.00pmt basis 1/1"
    assert terms["addl_2nd_load_disch"] == "Additional USD 3.00pmt for 2nd load port"
    assert terms["laytime"] == "150/200 MTPH SHINC"
    assert terms["demurrage"] == "USD 18,500 PDPR"
    assert terms["payment"] == "95% within 5 days BBB"
    assert terms["cargo_qty"] == ""


def test_pre_extract_bare_laycan_range():
    assert pre_extract("Can do 10-15 Mar dates")["laycan"] == "10-15 Mar"


def test_pre_extract_empty_text():
    terms = pre_extract("")
    assert all(value == "" for value in terms.values())


def test_combine_extractions_pre_wins_and_ai_fills_gaps():
    combined = combine_extractions(
        {"freight": "USD 33.00pmt", "cargo_qty": ""},
        {"freight": "USD 34 pmt", "qty": "12,000 mt", "vessel": "MT Golden Star"},
    )
    assert combined["freight"] == "USD 33.00pmt"
    assert combined["cargo_qty"] == "12,000 mt"
    assert combined["vessel"] == "MT Golden Star"
