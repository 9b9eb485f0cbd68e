"""Shared service base holding the injected deal repository."""

from __future__ import annotations

from charterdesk.database.deal_store import DealRepository, InMemoryDealRepository


class BaseService:
    """Base class for services that operate on a deal repository."""

    def __init__(self, repository: DealRepository | None = None) -> None:
        self.repository = repository or InMemoryDealRepository()
