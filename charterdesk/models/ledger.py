"""Consolidated ledger model: the current best-known terms of one deal."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime

from charterdesk.core.config import get_config
from charterdesk.models.base import utcnow
from charterdesk.models.terms import HEADER_FIELDS, TERM_FIELDS


def _unknown() -> str:
    return get_config().UNKNOWN_PLACEHOLDER


def _riders() -> str:
    return get_config().STANDING_RIDERS


@dataclass
class DealHeader:
    vessel: str = field(default_factory=_unknown)
    owners: str = field(default_factory=_unknown)
    operator: str = field(default_factory=_unknown)
    broker: str = field(default_factory=_unknown)
    cp_form: str = field(default_factory=_unknown)
    riders: str = field(default_factory=_riders)


@dataclass
class LedgerTerms:
    laycan: str = ""
    cargo_qty: str = ""
    load_ports: str = ""
    discharge_ports: str = ""
    freight: str = ""
    addl_2nd_load_disch: str = ""
    laytime: str = ""
    demurrage: str = ""
    payment: str = ""
    heating: str = ""
    subjects_validity: str = ""
    other_terms: str = ""


@dataclass
class ConsolidatedLedger:
    """One per deal. Mutated only through the ledger projector."""

    deal_id: str
    header: DealHeader = field(default_factory=DealHeader)
    terms: LedgerTerms = field(default_factory=LedgerTerms)
    updated_at: datetime = field(default_factory=utcnow)

    def get(self, name: str) -> str:
        if name in TERM_FIELDS:
            return getattr(self.terms, name)
        if name in HEADER_FIELDS:
            return getattr(self.header, name)
        raise KeyError(f"Unknown ledger field: {name}")

    def set(self, name: str, value: str) -> None:
        if name in TERM_FIELDS:
            setattr(self.terms, name, value)
        elif name in HEADER_FIELDS:
            setattr(self.header, name, value)
        else:
            raise KeyError(f"Unknown ledger field: {name}")
        self.updated_at = utcnow()

    def terms_dict(self) -> dict[str, str]:
        return asdict(self.terms)

    def header_dict(self) -> dict[str, str]:
        return asdict(self.header)
