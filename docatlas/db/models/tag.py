"""Tag model with case-insensitive unique names."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from docatlas.core.database import Base


def normalize_tag_name(name: str) -> str:
    """Canonical stored form of a tag name."""
    return name.strip().lower()


class Tag(Base):
    """Shared tag vocabulary. Names are stored lower-cased."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    documents = relationship("DocumentTag", back_populates="tag", cascade="all, delete-orphan")

    __table_args__ = (UniqueConstraint("name", name="uq_tags_name"),)
