"""
SQLAlchemy model backing the SQL document store.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from contactforms.shared.database import Base


class DocumentRow(Base):
    """One schemaless document; ``createdAt`` lives in its own column."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_created_at", "collection", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    collection: Mapped[str] = mapped_column(String(100), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DocumentRow(id={self.id}, collection={self.collection})>"
