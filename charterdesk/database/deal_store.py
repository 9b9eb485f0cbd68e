"""Deal repositories: whole-document read-modify-write keyed by deal id."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from charterdesk.core.exceptions import DatabaseError
from charterdesk.database.db import get_session_factory
from charterdesk.database.models import DealDocumentRow
from charterdesk.models.base import utcnow
from charterdesk.models.record import DealRecord
from charterdesk.schemas.documents import DealDocument

logger = logging.getLogger(__name__)


class DealRepository(ABC):
    """Storage for per-deal documents.

    Every mutation reads the full document, changes it in memory and writes
    the full document back. There is no partial update.
    """

    @abstractmethod
    def _read(self, deal_id: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def _write(self, deal_id: str, payload: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_deal_ids(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def wipe(self) -> None:
        """Bulk clear of every stored deal."""
        raise NotImplementedError

    def load(self, deal_id: str) -> DealRecord | None:
        payload = self._read(deal_id)
        if payload is None:
            return None
        try:
            record = DealDocument.model_validate_json(payload).to_record()
        except PydanticValidationError as exc:
            logger.warning(
                "deal_store.malformed_payload",
                extra={"event": "deal_store.malformed_payload", "deal_id": deal_id, "error_count": exc.error_count()},
            )
            return None
        if record.deal_id != deal_id:
            logger.warning(
                "deal_store.mismatched_deal_id",
                extra={"event": "deal_store.mismatched_deal_id", "deal_id": deal_id, "stored_deal_id": record.deal_id},
            )
            return None
        return record

    def save(self, record: DealRecord) -> None:
        self._write(record.deal_id, DealDocument.from_record(record).model_dump_json())

    def get_or_create(self, deal_id: str) -> DealRecord:
        """Idempotent constructor: the stored record, or a fresh empty one."""
        record = self.load(deal_id)
        if record is None:
            record = DealRecord.new(deal_id)
            self.save(record)
            logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal_id})
        return record

    @contextmanager
    def transaction(self, deal_id: str) -> Iterator[DealRecord]:
        """Read-modify-write scope for one deal; nothing is written if the block raises.

        A deal that does not exist yet is only stored once the block succeeds.
        """
        record = self.load(deal_id)
        created = record is None
        if created:
            record = DealRecord.new(deal_id)
        yield record
        self.save(record)
        if created:
            logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal_id})

    def load_all(self) -> list[DealRecord]:
        records = []
        for deal_id in self.list_deal_ids():
            record = self.load(deal_id)
            if record is not None:
                records.append(record)
        return records


class InMemoryDealRepository(DealRepository):
    """Process-local store holding the same serialized payloads as the SQL store."""

    def __init__(self) -> None:
        self._payloads: dict[str, str] = {}

    def _read(self, deal_id: str) -> str | None:
        return self._payloads.get(deal_id)

    def _write(self, deal_id: str, payload: str) -> None:
        self._payloads[deal_id] = payload

    def list_deal_ids(self) -> list[str]:
        return sorted(self._payloads)

    def wipe(self) -> None:
        self._payloads.clear()


class SqlDealRepository(DealRepository):
    """SQLAlchemy-backed store with one row per deal."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or get_session_factory()()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DatabaseError(f"Failed to persist deal documents: {exc}") from exc

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "SqlDealRepository":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.db.rollback()
        self.close()

    def _read(self, deal_id: str) -> str | None:
        row = self.db.get(DealDocumentRow, deal_id)
        return row.payload if row is not None else None

    def _write(self, deal_id: str, payload: str) -> None:
        row = self.db.get(DealDocumentRow, deal_id)
        if row is None:
            self.db.add(DealDocumentRow(deal_id=deal_id, payload=payload, updated_at=utcnow()))
        else:
            row.payload = payload
            row.updated_at = utcnow()
        self.commit()

    def list_deal_ids(self) -> list[str]:
        return list(self.db.scalars(select(DealDocumentRow.deal_id).order_by(DealDocumentRow.deal_id)))

    def wipe(self) -> None:
        self.db.execute(delete(DealDocumentRow))
        self.commit()
