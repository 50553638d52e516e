"""FastAPI dependencies wiring services to the request session."""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from docatlas.core.database import get_db
from docatlas.repositories import DocumentRepository, TagRepository
from docatlas.services.classification_service import ClassificationService
from docatlas.services.document_service import DocumentService
from docatlas.services.llm_tagging_service import LLMTaggingService
from docatlas.services.search_service import SearchService
from docatlas.services.tag_service import TagService


@lru_cache
def get_llm_tagger() -> LLMTaggingService:
    """One tagger, and one OpenAI client, for the whole process."""
    return LLMTaggingService()


def get_classification_service(
    session: Session = Depends(get_db),
    llm_tagger: LLMTaggingService = Depends(get_llm_tagger),
) -> ClassificationService:
    return ClassificationService(
        documents=DocumentRepository(session),
        tag_service=TagService(TagRepository(session)),
        llm_tagger=llm_tagger if llm_tagger.is_configured else None,
    )


def get_document_service(session: Session = Depends(get_db)) -> DocumentService:
    return DocumentService(DocumentRepository(session))


def get_search_service(session: Session = Depends(get_db)) -> SearchService:
    return SearchService(DocumentRepository(session))
