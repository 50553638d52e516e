"""Services package for tagging and search logic."""

from docatlas.services.classification_service import ClassificationService
from docatlas.services.document_service import DocumentService
from docatlas.services.search_service import SearchService
from docatlas.services.tag_extraction import TagExtractionService
from docatlas.services.tag_service import TagService

__all__ = [
    "ClassificationService",
    "DocumentService",
    "SearchService",
    "TagExtractionService",
    "TagService",
]
