"""Contracts for the external extraction and drafting services."""

from __future__ import annotations

from typing import Any, Protocol

from charterdesk.models.deal import DealTags


class OfferExtractor(Protocol):
    """Turns pasted counterparty text into a term mapping."""

    def extract(self, raw_text: str, tags: DealTags, tone: str) -> dict[str, Any]:
        ...


class DraftWriter(Protocol):
    """Drafts the counter message; returns ``{"subject": ..., "body": ...}``."""

    def draft(
        self,
        raw_text: str,
        offer: dict[str, str],
        counter_on: dict[str, str],
        tags: DealTags,
        tone: str,
    ) -> dict[str, Any]:
        ...
