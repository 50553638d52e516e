"""Indexed text extracted from a document."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from docatlas.core.database import Base


class ContentRecord(Base):
    """Extracted text for a document; the primary key enforces one row per document."""

    __tablename__ = "document_contents"

    document_id = Column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    indexed_text = Column(Text, default="", nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    document = relationship("Document", back_populates="content")
