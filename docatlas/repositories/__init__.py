"""Repository exports."""
from docatlas.repositories.document_repository import DocumentRepository
from docatlas.repositories.tag_repository import TagRepository
from docatlas.repositories.tag_store import TagStore

__all__ = [
    "DocumentRepository",
    "TagRepository",
    "TagStore",
]
