"""Collaborator-boundary normalization of offer mappings.

Extraction services and pasted recaps name the same term in many ways
(``disch_ports``, ``D/port``, ``subjects``...). Everything that enters the
ledger passes through :func:`normalize_offer` once, so the merge and
reconciliation code only ever sees the canonical field names.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from charterdesk.models.terms import MERGEABLE_HEADER_FIELDS, TERM_FIELDS, is_blank
from charterdesk.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

SYNONYMS: dict[str, tuple[str, ...]] = {
    "laycan": ("laycan_window", "lay_can", "laydays", "laydays_cancelling"),
    "cargo_qty": ("cargo", "qty", "quantity", "cargo_quantity"),
    "load_ports": ("load_port", "loadport", "loading_ports", "loading_port", "l_port", "lport"),
    "discharge_ports": (
        "discharge_port",
        "disch_ports",
        "disch_port",
        "disports",
        "disport",
        "d_port",
        "dport",
    ),
    "freight": ("freight_rate", "rate"),
    "addl_2nd_load_disch": (
        "premiums_2nd_load_disch",
        "addl_2nd_load",
        "additional_2nd_load_disch",
        "premiums",
    ),
    "laytime": ("laytime_terms",),
    "demurrage": ("dem", "demurrage_rate"),
    "payment": ("payment_terms",),
    "heating": ("heating_specs", "specs"),
    "subjects_validity": ("subjects", "validity"),
    "other_terms": ("other", "others"),
    "vessel": ("vessel_name", "ship"),
    "owners": ("owner",),
    "operator": ("operators",),
    "broker": ("brokers",),
    "cp_form": ("charter_party", "cp"),
}

CANONICAL_FIELDS: tuple[str, ...] = TERM_FIELDS + MERGEABLE_HEADER_FIELDS + ("cp_form",)

_ALIASES: dict[str, str] = {name: name for name in CANONICAL_FIELDS}
for _canonical, _names in SYNONYMS.items():
    for _name in _names:
        _ALIASES[_name] = _canonical


def canonical_key(key: str) -> str | None:
    """Return the canonical field for ``key`` or None when it is not tracked."""
    slug = re.sub(r"[^a-z0-9]+", "_", str(key).strip().lower()).strip("_")
    return _ALIASES.get(slug)


def _coerce_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return " | ".join(sanitize_text(item) for item in value if not is_blank(item))
    return sanitize_text(value)


def normalize_offer(raw: Mapping[str, Any] | None) -> dict[str, str]:
    """Map a loosely keyed offer onto canonical field names.

    An exact canonical key beats its synonyms; among synonyms the first
    non-empty value wins. Unrecognized keys are dropped.
    """
    normalized: dict[str, str] = {}
    exact: set[str] = set()
    ignored: list[str] = []
    for key, value in (raw or {}).items():
        canonical = canonical_key(key)
        if canonical is None:
            ignored.append(str(key))
            continue
        text = _coerce_value(value)
        is_exact = str(key).strip().lower() == canonical
        if canonical in exact and not is_exact:
            continue
        if is_exact and text:
            normalized[canonical] = text
            exact.add(canonical)
        elif not normalized.get(canonical):
            normalized[canonical] = text
    if ignored:
        logger.debug(
            "offer.normalize.ignored_keys",
            extra={"event": "offer.normalize.ignored_keys", "keys": ignored},
        )
    return normalized


_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*"

_LAYCAN_PATTERNS = (
    re.compile(r"\bLaycan\b\s*[:\-]?\s*([^\n]+)", re.IGNORECASE),
    re.compile(rf"\b(\d{{1,2}}\s*{_MONTH}\s*[-–]\s*\d{{1,2}}\s*{_MONTH})\b", re.IGNORECASE),
    re.compile(rf"\b(\d{{1,2}}\s*[-–]\s*\d{{1,2}}\s*{_MONTH})\b", re.IGNORECASE),
)
_FREIGHT = re.compile(r"\bFreight\b\s*[:\-]?\s*(USD\s*[\d.,]+\s*pmt\b[^\n]*)", re.IGNORECASE)
_PREMIUM = re.compile(r"(?:Additional|Add'?l|\+)\s*(?:USD\s*)?[\d.,]+\s*pmt\b[^\n]*", re.IGNORECASE)
_LAYTIME = re.compile(r"\bLaytime\s*[:\-]\s*([^\n]+)", re.IGNORECASE)
_DEMURRAGE = re.compile(
    r"\bDemurrage\b\s*[:\-]?\s*(USD\s*[\d,]+(?:\.\d+)?\s*PDPR[^\n]*)", re.IGNORECASE
)
_PAYMENT = re.compile(r"\bPayment\s*[:\-]\s*([^\n]+)", re.IGNORECASE)
_LOAD_PORT = re.compile(r"\bL/port\b\s*[:\-]?\s*([^\n]+)", re.IGNORECASE)
_DISCH_PORT = re.compile(r"\bD/port\b\s*[:\-]?\s*([^\n]+)", re.IGNORECASE)


def _first_group(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def pre_extract(raw_text: str | None) -> dict[str, str]:
    """Pull the terms that are unambiguous in pasted text, without a model.

    Only fills what it can see clearly; cargo quantity and subjects are
    left for the extraction service.
    """
    text = sanitize_text(raw_text).replace("\r", "")
    extracted = {name: "" for name in TERM_FIELDS}
    if not text:
        return extracted

    for pattern in _LAYCAN_PATTERNS:
        laycan = _first_group(pattern, text)
        if laycan:
            extracted["laycan"] = laycan
            break

    extracted["freight"] = _first_group(_FREIGHT, text)
    extracted["addl_2nd_load_disch"] = " | ".join(
        match.group(0).strip() for match in _PREMIUM.finditer(text)
    )
    extracted["laytime"] = _first_group(_LAYTIME, text)
    extracted["demurrage"] = _first_group(_DEMURRAGE, text)
    extracted["payment"] = _first_group(_PAYMENT, text)
    extracted["load_ports"] = _first_group(_LOAD_PORT, text)
    extracted["discharge_ports"] = _first_group(_DISCH_PORT, text)
    return extracted


def combine_extractions(
    pre: Mapping[str, Any] | None, extracted: Mapping[str, Any] | None
) -> dict[str, str]:
    """Pre-extracted values win; the extraction service fills the gaps."""
    combined = normalize_offer(pre)
    for name, value in normalize_offer(extracted).items():
        if is_blank(combined.get(name)) and not is_blank(value):
            combined[name] = value
    return combined
