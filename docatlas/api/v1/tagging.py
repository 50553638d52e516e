"""Auto-tagging endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from docatlas.api.dependencies import get_classification_service
from docatlas.core.exceptions import DependencyError, DocumentNotFoundError, InvalidInputError
from docatlas.services.classification_service import ClassificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tagging", tags=["tagging"])


class ClassifyRequest(BaseModel):
    """Request to tag a document from its text."""

    document_id: Optional[int] = None
    text: Optional[str] = None


class ClassifyResponse(BaseModel):
    """Tags stored for the document."""

    success: bool = True
    document_id: int
    tags: List[str]
    tag_count: int
    message: str


@router.post("/classify", response_model=ClassifyResponse)
def classify_document(
    request: ClassifyRequest,
    service: ClassificationService = Depends(get_classification_service),
) -> ClassifyResponse:
    """
    Classify document text and replace the document's tags.

    Zero tags is a successful result.
    """
    try:
        result = service.classify(request.document_id, request.text)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DependencyError as e:
        logger.error(f"Auto-tagging failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Auto-tagging failed: {e}",
        )

    if result.tag_count:
        message = f"File tagged with {result.tag_count} tags"
    else:
        message = "No relevant tags identified"

    return ClassifyResponse(
        document_id=result.document_id,
        tags=result.tags,
        tag_count=result.tag_count,
        message=message,
    )
