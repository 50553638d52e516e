"""Document registration and listing."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from docatlas.core.config import settings
from docatlas.core.exceptions import DependencyError, DocumentNotFoundError, InvalidInputError
from docatlas.db.models.document import Document, detect_file_kind
from docatlas.repositories.document_repository import DocumentRepository
from docatlas.services.search_service import make_preview

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


@dataclass
class DocumentPage:
    """One page of the document listing."""

    documents: List[Dict[str, Any]]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


class DocumentService:
    """Service for document metadata, listings and tag lookups."""

    def __init__(self, documents: DocumentRepository, preview_length: Optional[int] = None):
        """Initialize document service.

        Args:
            documents: Document repository
            preview_length: Characters of indexed text in each listing preview
        """
        self.documents = documents
        self.preview_length = (
            preview_length if preview_length is not None else settings.SEARCH_PREVIEW_LENGTH
        )

    def register(
        self,
        filename: Optional[str],
        size_bytes: int = 0,
        storage_path: Optional[str] = None,
        owner_id: Optional[str] = None,
        mime_type: str = "",
    ) -> Document:
        """Record metadata for an uploaded file.

        Args:
            filename: Original file name
            size_bytes: File size
            storage_path: Location of the stored bytes
            owner_id: Uploading user, None for anonymous uploads
            mime_type: Reported MIME type, used with the extension to pick the file kind

        Returns:
            The new Document

        Raises:
            InvalidInputError: If the filename is missing or the size is negative
            DependencyError: If storage is unreachable
        """
        if filename is None or not filename.strip():
            raise InvalidInputError("filename is required")
        if size_bytes < 0:
            raise InvalidInputError("size_bytes must not be negative")

        document = Document(
            filename=filename.strip(),
            file_kind=detect_file_kind(filename, mime_type),
            size_bytes=size_bytes,
            storage_path=storage_path,
            owner_id=owner_id,
        )
        try:
            document = self.documents.create(document)
            self.documents.commit()
        except SQLAlchemyError as e:
            self.documents.session.rollback()
            logger.error(f"Failed to register {filename}: {e}")
            raise DependencyError(f"Failed to register document: {e}") from e

        logger.info(f"Registered document {document.id} ({document.file_kind}): {document.filename}")
        return document

    def list_documents(
        self, limit: int = 50, offset: int = 0, search: Optional[str] = None
    ) -> DocumentPage:
        """List documents newest first, with tags and a content preview.

        Args:
            limit: Page size, 1 to MAX_PAGE_SIZE
            offset: Number of documents to skip
            search: Optional filename substring

        Raises:
            InvalidInputError: If limit or offset is out of range
            DependencyError: If storage is unreachable
        """
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise InvalidInputError("offset must not be negative")

        filename_query = search.strip() if search and search.strip() else None
        try:
            documents = self.documents.list_documents(limit, offset, filename_query)
            total = self.documents.count_documents(filename_query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list documents: {e}")
            raise DependencyError(f"Failed to list documents: {e}") from e

        logger.info(f"Listed {len(documents)} of {total} documents")
        return DocumentPage(
            documents=[self._summarize(document) for document in documents],
            total=total,
            limit=limit,
            offset=offset,
        )

    def get_tags(self, document_id: int) -> List[str]:
        """Names of the tags linked to a document, alphabetically.

        Raises:
            DocumentNotFoundError: If the document does not exist
            DependencyError: If storage is unreachable
        """
        try:
            if self.documents.get_by_id(document_id) is None:
                raise DocumentNotFoundError(document_id)
            return self.documents.get_tag_names(document_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load tags for document {document_id}: {e}")
            raise DependencyError(f"Document store unavailable: {e}") from e

    def _summarize(self, document: Document) -> Dict[str, Any]:
        text = document.content.indexed_text if document.content else None
        return {
            "id": document.id,
            "filename": document.filename,
            "file_kind": document.file_kind,
            "size_bytes": document.size_bytes,
            "storage_path": document.storage_path,
            "owner_id": document.owner_id,
            "uploaded_at": document.uploaded_at,
            "has_content": bool(text),
            "preview": make_preview(text, self.preview_length),
            "tags": sorted(link.tag.name for link in document.tags),
        }
