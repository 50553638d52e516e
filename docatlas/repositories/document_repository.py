"""Document repository with content storage and text search."""
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from docatlas.db.models.content_record import ContentRecord
from docatlas.db.models.document import Document
from docatlas.db.models.document_tag import DocumentTag
from docatlas.db.models.tag import Tag
from docatlas.repositories.base_repository import BaseRepository


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document model and its indexed content."""

    def __init__(self, session: Session):
        """Initialize document repository.

        Args:
            session: Database session
        """
        super().__init__(Document, session)

    def save_content(self, document_id: int, text: str) -> ContentRecord:
        """Create or overwrite the single content record of a document.

        Args:
            document_id: Document ID
            text: Extracted text (may be empty)

        Returns:
            The stored ContentRecord
        """
        record = self.session.get(ContentRecord, document_id)
        if record is None:
            record = ContentRecord(document_id=document_id, indexed_text=text or "")
            self.session.add(record)
        else:
            record.indexed_text = text or ""
        self.session.flush()
        return record

    def get_content(self, document_id: int) -> Optional[ContentRecord]:
        return self.session.get(ContentRecord, document_id)

    def get_tag_names(self, document_id: int) -> List[str]:
        """List tag names linked to a document, alphabetically."""
        result = self.session.execute(
            select(Tag.name)
            .join(DocumentTag, DocumentTag.tag_id == Tag.id)
            .filter(DocumentTag.document_id == document_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    def list_documents(
        self, limit: int, offset: int = 0, filename_query: Optional[str] = None
    ) -> List[Document]:
        """List documents with their content and tags loaded, newest first.

        Args:
            limit: Page size
            offset: Number of documents to skip
            filename_query: Optional case-insensitive filename substring

        Returns:
            List of Document instances
        """
        stmt = (
            select(Document)
            .options(
                selectinload(Document.content),
                selectinload(Document.tags).selectinload(DocumentTag.tag),
            )
            .order_by(Document.uploaded_at.desc(), Document.id.desc())
            .offset(offset)
            .limit(limit)
        )
        if filename_query:
            stmt = stmt.filter(Document.filename.ilike(_like_pattern(filename_query), escape="\\"))
        return list(self.session.execute(stmt).scalars().all())

    def count_documents(self, filename_query: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(Document)
        if filename_query:
            stmt = stmt.filter(Document.filename.ilike(_like_pattern(filename_query), escape="\\"))
        return self.session.execute(stmt).scalar_one()

    def search_candidates(self, query: str) -> List[Tuple[Document, Optional[str]]]:
        """Find documents whose filename or indexed text contains the query.

        Matching is a case-insensitive substring match.

        Args:
            query: Search string

        Returns:
            (Document, indexed_text) pairs, most recent upload first
        """
        pattern = _like_pattern(query.lower())
        stmt = (
            select(Document, ContentRecord.indexed_text)
            .outerjoin(ContentRecord, ContentRecord.document_id == Document.id)
            .filter(
                or_(
                    Document.filename.ilike(pattern, escape="\\"),
                    ContentRecord.indexed_text.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Document.uploaded_at.desc())
        )
        result = self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
