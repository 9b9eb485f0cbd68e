"""Persisted per-deal document: deal header state, rounds and ledger."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from charterdesk.models.deal import Deal, DealTags
from charterdesk.models.enums import RoundStatus
from charterdesk.models.ledger import ConsolidatedLedger, DealHeader, LedgerTerms
from charterdesk.models.record import DealRecord
from charterdesk.models.round import Round


class TagsSchema(BaseModel):
    route: str = ""
    cargo: str = ""
    size: str = ""
    basis: str = ""


class DealSchema(BaseModel):
    deal_id: str = Field(min_length=1)
    created_at: datetime
    tags: TagsSchema = Field(default_factory=TagsSchema)
    fixed: bool = False
    fixed_at: datetime | None = None
    fixed_round: int | None = Field(default=None, ge=1)


class RoundSchema(BaseModel):
    round_id: str = Field(min_length=1)
    deal_id: str = Field(min_length=1)
    round_number: int = Field(ge=1)
    created_at: datetime
    last_updated_at: datetime
    status: RoundStatus = RoundStatus.IN_PROGRESS
    subject: str = ""
    body: str = ""
    raw_input: str = ""
    offer: dict[str, str] = Field(default_factory=dict)
    counter_on: dict[str, str] = Field(default_factory=dict)
    tags: TagsSchema = Field(default_factory=TagsSchema)


class LedgerSchema(BaseModel):
    header: dict[str, str] = Field(default_factory=dict)
    terms: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime


class DealDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: int = 1
    deal: DealSchema
    rounds: list[RoundSchema] = Field(default_factory=list)
    ledger: LedgerSchema

    @classmethod
    def from_record(cls, record: DealRecord) -> "DealDocument":
        deal = record.deal
        return cls(
            deal=DealSchema(
                deal_id=deal.deal_id,
                created_at=deal.created_at,
                tags=TagsSchema(**vars(deal.tags)),
                fixed=deal.fixed,
                fixed_at=deal.fixed_at,
                fixed_round=deal.fixed_round,
            ),
            rounds=[
                RoundSchema(
                    round_id=item.round_id,
                    deal_id=item.deal_id,
                    round_number=item.round_number,
                    created_at=item.created_at,
                    last_updated_at=item.last_updated_at,
                    status=item.status,
                    subject=item.subject,
                    body=item.body,
                    raw_input=item.raw_input,
                    offer=dict(item.offer),
                    counter_on=dict(item.counter_on),
                    tags=TagsSchema(**vars(item.tags)),
                )
                for item in record.rounds
            ],
            ledger=LedgerSchema(
                header=record.ledger.header_dict(),
                terms=record.ledger.terms_dict(),
                updated_at=record.ledger.updated_at,
            ),
        )

    def to_record(self) -> DealRecord:
        deal_id = self.deal.deal_id
        deal = Deal(
            deal_id=deal_id,
            created_at=self.deal.created_at,
            tags=DealTags(**self.deal.tags.model_dump()),
            fixed=self.deal.fixed,
            fixed_at=self.deal.fixed_at,
            fixed_round=self.deal.fixed_round,
        )
        header = DealHeader()
        for name, value in self.ledger.header.items():
            if hasattr(header, name):
                setattr(header, name, value)
        terms = LedgerTerms()
        for name, value in self.ledger.terms.items():
            if hasattr(terms, name):
                setattr(terms, name, value)
        ledger = ConsolidatedLedger(
            deal_id=deal_id,
            header=header,
            terms=terms,
            updated_at=self.ledger.updated_at,
        )
        rounds = [
            Round(
                round_id=item.round_id,
                deal_id=item.deal_id,
                round_number=item.round_number,
                created_at=item.created_at,
                last_updated_at=item.last_updated_at,
                status=item.status,
                subject=item.subject,
                body=item.body,
                raw_input=item.raw_input,
                offer=dict(item.offer),
                counter_on=dict(item.counter_on),
                tags=DealTags(**item.tags.model_dump()),
            )
            for item in sorted(self.rounds, key=lambda r: r.round_number)
        ]
        return DealRecord(deal=deal, ledger=ledger, rounds=rounds)
