"""Classification entry point: text in, persisted tags out."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from docatlas.core.exceptions import DependencyError, DocumentNotFoundError, InvalidInputError
from docatlas.repositories.document_repository import DocumentRepository
from docatlas.services.llm_tagging_service import LLMTaggingService, merge_tags
from docatlas.services.tag_extraction import TagExtractionService
from docatlas.services.tag_service import TagService

logger = logging.getLogger(__name__)


@dataclass
class ClassificationResult:
    """Tags linked to a document by one classification run."""

    document_id: int
    tags: List[str] = field(default_factory=list)

    @property
    def tag_count(self) -> int:
        return len(self.tags)


class ClassificationService:
    """Computes a document's tags and stores them as its full tag set."""

    def __init__(
        self,
        documents: DocumentRepository,
        tag_service: TagService,
        extractor: Optional[TagExtractionService] = None,
        llm_tagger: Optional[LLMTaggingService] = None,
    ):
        """Initialize classification service.

        Args:
            documents: Document repository
            tag_service: Tag reconciler
            extractor: Local tag extractor
            llm_tagger: Optional external tagger; local tags only when None
        """
        self.documents = documents
        self.tag_service = tag_service
        self.extractor = extractor or TagExtractionService()
        self.llm_tagger = llm_tagger

    def identify_tags(self, text: str) -> List[str]:
        """Local tags, merged with external tags when available."""
        tags = self.extractor.extract_tags(text)
        if self.llm_tagger is not None and self.llm_tagger.should_tag(text):
            tags = merge_tags(tags, self.llm_tagger.identify_tags(text))
        return tags

    def classify(self, document_id: Optional[int], text: Optional[str]) -> ClassificationResult:
        """Tag a document from its text.

        Args:
            document_id: Document ID
            text: Document text; empty text is valid and yields no tags

        Returns:
            ClassificationResult; zero tags is a successful outcome

        Raises:
            InvalidInputError: If document_id or text is missing
            DocumentNotFoundError: If the document does not exist
            DependencyError: If storage is unreachable
        """
        if document_id is None or text is None:
            raise InvalidInputError("document_id and text are required")

        self._require_document(document_id)
        logger.info(f"Auto-tagging document {document_id} with {len(text)} characters of text")

        tags = self.identify_tags(text)
        logger.info(f"Identified tags for document {document_id}: {', '.join(tags) or 'none'}")

        outcome = self.tag_service.reconcile(document_id, tags)
        return ClassificationResult(document_id=document_id, tags=outcome.tag_names)

    def ingest(self, document_id: Optional[int], text: Optional[str]) -> ClassificationResult:
        """Store a document's extracted text, then classify it.

        The content record is committed before tagging, so it survives a
        tagging failure.
        """
        if document_id is None or text is None:
            raise InvalidInputError("document_id and text are required")

        self._require_document(document_id)
        try:
            self.documents.save_content(document_id, text)
            self.documents.commit()
        except SQLAlchemyError as e:
            self.documents.session.rollback()
            logger.error(f"Failed to store content for document {document_id}: {e}")
            raise DependencyError(f"Failed to store content: {e}") from e

        return self.classify(document_id, text)

    def _require_document(self, document_id: int) -> None:
        try:
            document = self.documents.get_by_id(document_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load document {document_id}: {e}")
            raise DependencyError(f"Document store unavailable: {e}") from e
        if document is None:
            raise DocumentNotFoundError(document_id)
