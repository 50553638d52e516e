"""Storage primitives the tag reconciler is composed from."""
import contextlib
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence


class TagStore(ABC):
    """Tag storage backend.

    Implementations expose four primitives. Tag names passed in are already
    normalized (stripped, lower-cased).
    """

    @abstractmethod
    def find_tag_by_name(self, name: str) -> Optional[int]:
        """Return the id of the tag with this name, or None."""

    @abstractmethod
    def create_tag(self, name: str) -> int:
        """Create a tag and return its id.

        If a concurrent writer created the same name first, return the
        existing id instead of failing.
        """

    @abstractmethod
    def delete_links_for_document(self, document_id: int) -> int:
        """Remove every tag link of a document; return the number removed."""

    @abstractmethod
    def insert_links(self, document_id: int, tag_ids: Sequence[int]) -> None:
        """Link a document to each of the given tags."""

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        """Scope in which all primitive calls commit or roll back together.

        Backends without transactions keep this no-op default.
        """
        yield
