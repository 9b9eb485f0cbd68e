"""Pydantic schemas for the collaborator boundary and persisted documents."""

from charterdesk.schemas.documents import DealDocument
from charterdesk.schemas.offers import DraftPayload, OfferPayload, RoundInput

__all__ = ["DealDocument", "DraftPayload", "OfferPayload", "RoundInput"]
