"""Document registration, content and tag endpoints."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from docatlas.api.dependencies import get_classification_service, get_document_service
from docatlas.core.exceptions import DependencyError, DocumentNotFoundError, InvalidInputError
from docatlas.services.classification_service import ClassificationService
from docatlas.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


class RegisterDocumentRequest(BaseModel):
    """Metadata of an uploaded file."""

    filename: Optional[str] = None
    size_bytes: int = 0
    storage_path: Optional[str] = None
    owner_id: Optional[str] = None
    mime_type: str = ""


class DocumentResponse(BaseModel):
    """Stored document metadata."""

    id: int
    filename: str
    file_kind: str
    size_bytes: Optional[int] = None
    storage_path: Optional[str] = None
    owner_id: Optional[str] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True


class DocumentSummary(DocumentResponse):
    """Document with its tags and a content preview."""

    has_content: bool
    preview: Optional[str] = None
    tags: List[str]


class DocumentListResponse(BaseModel):
    """A page of documents, newest first."""

    documents: List[DocumentSummary]
    total: int
    limit: int
    offset: int
    has_more: bool


class ContentRequest(BaseModel):
    """Extracted text for a document."""

    text: Optional[str] = None


class DocumentTagsResponse(BaseModel):
    """Tags currently linked to a document."""

    document_id: int
    tags: List[str]
    tag_count: int


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def register_document(
    request: RegisterDocumentRequest,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Record an uploaded file; its kind is detected from name and MIME type."""
    try:
        document = service.register(
            request.filename,
            size_bytes=request.size_bytes,
            storage_path=request.storage_path,
            owner_id=request.owner_id,
            mime_type=request.mime_type,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
def list_documents(
    limit: int = Query(50, description="Page size"),
    offset: int = Query(0, description="Documents to skip"),
    search: Optional[str] = Query(None, description="Filename substring"),
    service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List documents with their tags, newest first."""
    try:
        page = service.list_documents(limit=limit, offset=offset, search=search)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return DocumentListResponse(
        documents=[DocumentSummary(**summary) for summary in page.documents],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        has_more=page.has_more,
    )


@router.post("/{document_id}/content", response_model=DocumentTagsResponse)
def store_content(
    document_id: int,
    request: ContentRequest,
    service: ClassificationService = Depends(get_classification_service),
) -> DocumentTagsResponse:
    """Store extracted text for a document and auto-tag it."""
    try:
        result = service.ingest(document_id, request.text)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return DocumentTagsResponse(
        document_id=result.document_id, tags=result.tags, tag_count=result.tag_count
    )


@router.get("/{document_id}/tags", response_model=DocumentTagsResponse)
def get_document_tags(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
) -> DocumentTagsResponse:
    """List the tags of a document."""
    try:
        tags = service.get_tags(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return DocumentTagsResponse(document_id=document_id, tags=tags, tag_count=len(tags))
