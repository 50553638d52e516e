"""Relevance ranking for filename and content search."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from docatlas.core.config import settings
from docatlas.core.exceptions import DependencyError, InvalidInputError
from docatlas.repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

SCORE_NAME_AND_TEXT = 3
SCORE_NAME_ONLY = 2
SCORE_TEXT_ONLY = 1


@dataclass
class SearchCandidate:
    """A document considered for a search result."""

    id: Any
    filename: str
    text: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    file_kind: Optional[str] = None


@dataclass
class RankedResult:
    """A qualifying candidate with its relevance score."""

    candidate: SearchCandidate
    score: int

    def to_dict(self, preview_length: int) -> Dict[str, Any]:
        text = self.candidate.text
        return {
            "id": self.candidate.id,
            "filename": self.candidate.filename,
            "file_kind": self.candidate.file_kind,
            "uploaded_at": self.candidate.uploaded_at,
            "score": self.score,
            "preview": make_preview(text, preview_length),
            "has_content": bool(text),
        }


@dataclass
class SearchResponse:
    """Ordered search results for a query."""

    query: str
    results: List[Dict[str, Any]]

    @property
    def total_count(self) -> int:
        return len(self.results)


def make_preview(text: Optional[str], length: int) -> Optional[str]:
    """Leading part of the text, with an ellipsis when truncated."""
    if not text:
        return None
    if len(text) <= length:
        return text
    return text[:length] + "..."


def score_candidate(query: str, candidate: SearchCandidate) -> Optional[int]:
    """Score where the query was found.

    Returns:
        3 for filename and text, 2 for filename only, 1 for text only, or
        None when the candidate does not match at all
    """
    needle = query.lower()
    in_name = needle in (candidate.filename or "").lower()
    in_text = needle in (candidate.text or "").lower()

    if in_name and in_text:
        return SCORE_NAME_AND_TEXT
    if in_name:
        return SCORE_NAME_ONLY
    if in_text:
        return SCORE_TEXT_ONLY
    return None


def rank(
    query: str,
    candidates: Iterable[SearchCandidate],
    prefiltered: bool = False,
) -> List[RankedResult]:
    """Filter and order candidates by relevance.

    Order is score descending, then upload time descending. Undated
    candidates follow dated ones of the same score; full ties keep input
    order.

    Args:
        query: Search string
        candidates: Documents to consider
        prefiltered: Candidates already matched by the source; one that the
            substring check cannot confirm still gets the lowest score
    """
    ranked = []
    for candidate in candidates:
        score = score_candidate(query, candidate)
        if score is None and prefiltered:
            score = SCORE_TEXT_ONLY
        if score is not None:
            ranked.append(RankedResult(candidate=candidate, score=score))

    # Two stable passes: secondary key first, primary key last
    ranked.sort(
        key=lambda r: (r.candidate.uploaded_at is not None, r.candidate.uploaded_at or datetime.min),
        reverse=True,
    )
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


class SearchService:
    """Service for ranked document search."""

    def __init__(self, documents: DocumentRepository, preview_length: Optional[int] = None):
        """Initialize search service.

        Args:
            documents: Candidate source
            preview_length: Characters of indexed text in each preview
        """
        self.documents = documents
        self.preview_length = (
            preview_length if preview_length is not None else settings.SEARCH_PREVIEW_LENGTH
        )

    def search(self, query: Optional[str]) -> SearchResponse:
        """Search documents by filename and indexed text.

        Args:
            query: Search string

        Returns:
            SearchResponse with ordered results; no matches is an empty list

        Raises:
            InvalidInputError: If the query is missing or blank
            DependencyError: If the candidate source fails
        """
        if query is None or not query.strip():
            raise InvalidInputError('Search query parameter "q" is required')

        query = query.strip()
        logger.info(f"Searching for: {query!r}")

        try:
            rows = self.documents.search_candidates(query)
        except SQLAlchemyError as e:
            logger.error(f"Search failed: {e}")
            raise DependencyError(f"Search failed: {e}") from e

        candidates = [
            SearchCandidate(
                id=document.id,
                filename=document.filename,
                text=text,
                uploaded_at=document.uploaded_at,
                file_kind=document.file_kind,
            )
            for document, text in rows
        ]
        results = [r.to_dict(self.preview_length) for r in rank(query, candidates, prefiltered=True)]

        logger.info(f"Found {len(results)} results for query: {query!r}")
        return SearchResponse(query=query, results=results)
