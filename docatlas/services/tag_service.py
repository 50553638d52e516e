"""Tag reconciliation: resolve tag names and replace a document's tag links."""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from docatlas.core.exceptions import DependencyError
from docatlas.db.models.tag import normalize_tag_name
from docatlas.repositories.tag_store import TagStore

logger = logging.getLogger(__name__)


@dataclass
class TagResolution:
    """Outcome of resolving one tag name to a stored tag."""

    name: str
    tag_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.tag_id is not None


@dataclass
class ReconcileResult:
    """Batch outcome of a reconcile run."""

    document_id: int
    resolutions: List[TagResolution] = field(default_factory=list)

    @property
    def tag_ids(self) -> List[int]:
        return [r.tag_id for r in self.resolutions if r.ok]

    @property
    def tag_names(self) -> List[str]:
        return [r.name for r in self.resolutions if r.ok]

    @property
    def failures(self) -> List[TagResolution]:
        return [r for r in self.resolutions if not r.ok]

    @property
    def count(self) -> int:
        return len(self.tag_ids)


class TagService:
    """Service that makes a tag list the sole tag set of a document."""

    def __init__(self, store: TagStore):
        """Initialize tag service.

        Args:
            store: Tag storage backend
        """
        self.store = store

    def resolve(self, name: str) -> TagResolution:
        """Find or create a single tag, reporting failure instead of raising."""
        try:
            tag_id = self.store.find_tag_by_name(name)
            if tag_id is None:
                tag_id = self.store.create_tag(name)
            return TagResolution(name=name, tag_id=tag_id)
        except (SQLAlchemyError, ValueError) as e:
            logger.warning(f"Failed to ensure tag exists: {name!r}: {e}")
            return TagResolution(name=name, error=str(e))

    def reconcile(self, document_id: int, tag_names: Iterable[str]) -> ReconcileResult:
        """Replace all tag links of a document with the given tags.

        Tags are resolved one at a time; a tag that cannot be created is
        skipped. The old links are removed and the new ones inserted in one
        transaction, so a failure leaves the previous tag set in place.

        Args:
            document_id: Document ID
            tag_names: Tag names in any case; duplicates are ignored

        Returns:
            ReconcileResult with the linked tag ids and per-tag outcomes

        Raises:
            DependencyError: If the tag store cannot be used
        """
        names: List[str] = []
        for raw in tag_names:
            name = normalize_tag_name(raw)
            if name and name not in names:
                names.append(name)

        result = ReconcileResult(document_id=document_id)
        try:
            with self.store.atomic():
                for name in names:
                    result.resolutions.append(self.resolve(name))

                removed = self.store.delete_links_for_document(document_id)
                self.store.insert_links(document_id, result.tag_ids)
        except SQLAlchemyError as e:
            logger.error(f"Failed to reconcile tags for document {document_id}: {e}")
            raise DependencyError(f"Tag store unavailable: {e}") from e

        for failure in result.failures:
            logger.warning(f"Skipped tag {failure.name!r} for document {document_id}")

        logger.info(
            f"Tagged document {document_id} with {result.count} tags "
            f"(replaced {removed} links)"
        )
        return result
