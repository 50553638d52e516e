"""Document model for uploaded files."""
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from docatlas.core.database import Base

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "bmp", "tiff"}


def detect_file_kind(filename: str, mime_type: str = "") -> str:
    """Classify a file as 'pdf', 'image' or 'other' from its name and MIME type."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    mime = (mime_type or "").lower()
    if "pdf" in mime or ext == "pdf":
        return "pdf"
    if ext in IMAGE_EXTENSIONS or mime.startswith("image/"):
        return "image"
    return "other"


class Document(Base):
    """Uploaded document metadata."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), index=True)  # None for anonymous uploads
    filename = Column(String(500), nullable=False)
    file_kind = Column(String(20), default="other", nullable=False)  # 'pdf', 'image' or 'other'
    size_bytes = Column(BigInteger, default=0)
    storage_path = Column(String(1000))
    uploaded_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    content = relationship(
        "ContentRecord", back_populates="document", uselist=False, cascade="all, delete-orphan"
    )
    tags = relationship("DocumentTag", back_populates="document", cascade="all, delete-orphan")

    __table_args__ = (Index("idx_documents_uploaded_at", "uploaded_at"),)
