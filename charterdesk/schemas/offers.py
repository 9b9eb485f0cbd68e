"""Request schemas for offers, drafts and new rounds."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from charterdesk.services.offer_normalizer import normalize_offer
from charterdesk.utils.validators import sanitize_text


class OfferPayload(BaseModel):
    """Structured counterparty terms as returned by the extraction service."""

    model_config = ConfigDict(extra="ignore")

    terms: dict[str, str] = Field(default_factory=dict)

    @field_validator("terms", mode="before")
    @classmethod
    def _canonicalize(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return normalize_offer(value)

    @classmethod
    def from_mapping(cls, mapping: dict[str, Any] | None) -> "OfferPayload":
        return cls(terms=mapping or {})


class DraftPayload(BaseModel):
    """Drafted counter message from the drafting service."""

    model_config = ConfigDict(extra="ignore")

    subject: str = "RE: Counter"
    body: str = ""

    @field_validator("subject", "body", mode="before")
    @classmethod
    def _clean(cls, value: Any) -> str:
        return sanitize_text(value)

    @property
    def has_body(self) -> bool:
        return bool(self.body)


class RoundInput(BaseModel):
    """Everything the desk supplies when saving a round."""

    model_config = ConfigDict(extra="ignore")

    subject: str = ""
    body: str = ""
    raw_input: str = ""
    offer: dict[str, str] = Field(default_factory=dict)
    counter_on: dict[str, str] = Field(default_factory=dict)
    route: str = ""
    cargo: str = ""
    size: str = ""
    basis: str = ""

    @field_validator("subject", "body", "raw_input", "route", "cargo", "size", "basis", mode="before")
    @classmethod
    def _clean(cls, value: Any) -> str:
        return sanitize_text(value)

    @field_validator("offer", "counter_on", mode="before")
    @classmethod
    def _canonicalize(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return normalize_offer(value)
