"""Search endpoint."""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from docatlas.api.dependencies import get_search_service
from docatlas.core.exceptions import DependencyError, InvalidInputError
from docatlas.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search")


class SearchResult(BaseModel):
    """A ranked document match."""

    id: int
    filename: str
    file_kind: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    score: int
    preview: Optional[str] = None
    has_content: bool


class SearchResponse(BaseModel):
    """Search results."""

    query: str
    results: List[SearchResult]
    total_count: int


@router.get("", response_model=SearchResponse)
def search_documents(
    q: Optional[str] = Query(None, description="Substring to look for in filenames and text"),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search documents, best matches first."""
    try:
        response = service.search(q)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DependencyError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return SearchResponse(
        query=response.query,
        results=[SearchResult(**result) for result in response.results],
        total_count=response.total_count,
    )
