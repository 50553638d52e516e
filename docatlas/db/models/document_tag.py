"""Document-Tag association model."""
from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from docatlas.core.database import Base


class DocumentTag(Base):
    """Association between documents and tags."""

    __tablename__ = "document_tags"

    document_id = Column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id = Column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Relationships
    document = relationship("Document", back_populates="tags")
    tag = relationship("Tag", back_populates="documents")
