"""Tag repository backing the tag reconciler."""
import contextlib
import logging
from typing import Iterator, Optional, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docatlas.db.models.document_tag import DocumentTag
from docatlas.db.models.tag import Tag, normalize_tag_name
from docatlas.repositories.base_repository import BaseRepository
from docatlas.repositories.tag_store import TagStore

logger = logging.getLogger(__name__)

MAX_TAG_NAME_LENGTH = 255


class TagRepository(BaseRepository[Tag], TagStore):
    """SQLAlchemy implementation of the tag store."""

    def __init__(self, session: Session):
        """Initialize tag repository.

        Args:
            session: Database session
        """
        super().__init__(Tag, session)

    def get_by_name(self, name: str) -> Optional[Tag]:
        """Get tag by name, ignoring case.

        Args:
            name: Tag name in any case

        Returns:
            Tag instance or None if not found
        """
        result = self.session.execute(
            select(Tag).filter(Tag.name == normalize_tag_name(name))
        )
        return result.scalar_one_or_none()

    def find_tag_by_name(self, name: str) -> Optional[int]:
        tag = self.get_by_name(name)
        return tag.id if tag else None

    def create_tag(self, name: str) -> int:
        """Insert a tag, falling back to the existing row on a unique conflict.

        The insert runs in a SAVEPOINT so a conflict leaves the surrounding
        transaction usable.

        Args:
            name: Tag name

        Returns:
            ID of the new or already existing tag

        Raises:
            ValueError: If the normalized name is empty or too long
        """
        normalized = normalize_tag_name(name)
        if not normalized or len(normalized) > MAX_TAG_NAME_LENGTH:
            raise ValueError(f"Invalid tag name: {name!r}")

        try:
            with self.session.begin_nested():
                tag = Tag(name=normalized)
                self.session.add(tag)
                self.session.flush()
        except IntegrityError:
            logger.info(f"Tag '{normalized}' created concurrently, re-reading")
            existing = self.get_by_name(normalized)
            if existing is None:
                raise
            return existing.id

        return tag.id

    def delete_links_for_document(self, document_id: int) -> int:
        result = self.session.execute(
            delete(DocumentTag)
            .where(DocumentTag.document_id == document_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def insert_links(self, document_id: int, tag_ids: Sequence[int]) -> None:
        if not tag_ids:
            return
        self.session.execute(
            insert(DocumentTag),
            [{"document_id": document_id, "tag_id": tag_id} for tag_id in tag_ids],
        )

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit on success, roll back everything on error."""
        try:
            yield
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
