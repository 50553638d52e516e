"""Database models package."""
from docatlas.db.models.content_record import ContentRecord
from docatlas.db.models.document import Document, detect_file_kind
from docatlas.db.models.document_tag import DocumentTag
from docatlas.db.models.tag import Tag, normalize_tag_name

__all__ = [
    "Document",
    "ContentRecord",
    "Tag",
    "DocumentTag",
    "detect_file_kind",
    "normalize_tag_name",
]
