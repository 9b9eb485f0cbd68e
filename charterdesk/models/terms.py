"""Canonical term and header field sets.

Every ledger, offer and recap in the package is keyed by these names. Field
order here is the display order used by reconciliation and the recap.
"""

from __future__ import annotations

TERM_FIELDS: tuple[str, ...] = (
    "laycan",
    "cargo_qty",
    "load_ports",
    "discharge_ports",
    "freight",
    "addl_2nd_load_disch",
    "laytime",
    "demurrage",
    "payment",
    "heating",
    "subjects_validity",
    "other_terms",
)

TERM_LABELS: dict[str, str] = {
    "laycan": "Laycan",
    "cargo_qty": "Cargo / Qty",
    "load_ports": "Load port(s)",
    "discharge_ports": "Disport(s)",
    "freight": "Freight",
    "addl_2nd_load_disch": "Add'l 2nd load/disch",
    "laytime": "Laytime",
    "demurrage": "Demurrage",
    "payment": "Payment",
    "heating": "Heating / Specs",
    "subjects_validity": "Subjects",
    "other_terms": "Other terms",
}

# Header fields that rounds may fill or override. ``riders`` is reasserted
# from configuration on every merge instead.
MERGEABLE_HEADER_FIELDS: tuple[str, ...] = ("vessel", "owners", "operator", "broker")

HEADER_FIELDS: tuple[str, ...] = MERGEABLE_HEADER_FIELDS + ("cp_form", "riders")

HEADER_LABELS: dict[str, str] = {
    "vessel": "Vessel",
    "owners": "Owners",
    "operator": "Operator",
    "broker": "Broker",
    "cp_form": "CP Form",
    "riders": "Riders",
}


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()
