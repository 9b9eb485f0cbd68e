"""Key-value table holding one serialized document per deal."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from charterdesk.database.db import Base
from charterdesk.models.base import utcnow


class DealDocumentRow(Base):
    __tablename__ = "deal_documents"

    deal_id: Mapped[str] = mapped_column(String(120), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
