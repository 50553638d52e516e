"""Tests for tag reconciliation."""
from typing import List, Optional, Sequence

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from docatlas.core.exceptions import DependencyError
from docatlas.db.models import DocumentTag, Tag
from docatlas.repositories import DocumentRepository, TagRepository
from docatlas.repositories.tag_store import TagStore
from docatlas.services.tag_service import TagService


@pytest.fixture
def tag_repository(db):
    return TagRepository(db)


@pytest.fixture
def tag_service(tag_repository):
    return TagService(tag_repository)


def linked_names(db, document_id: int) -> List[str]:
    return DocumentRepository(db).get_tag_names(document_id)


class TestReconcile:
    """Test full-replacement tag reconciliation."""

    def test_links_tags(self, db, tag_service, make_document):
        """Every resolved tag is linked to the document."""
        document = make_document()
        result = tag_service.reconcile(document.id, ["invoice", "financial"])

        assert result.count == 2
        assert result.tag_names == ["invoice", "financial"]
        assert linked_names(db, document.id) == ["financial", "invoice"]

    def test_idempotent(self, db, tag_service, make_document):
        """Running twice yields the same links and count."""
        document = make_document()
        first = tag_service.reconcile(document.id, ["invoice", "financial"])
        second = tag_service.reconcile(document.id, ["invoice", "financial"])

        assert first.count == second.count == 2
        assert first.tag_ids == second.tag_ids
        assert linked_names(db, document.id) == ["financial", "invoice"]
        assert len(db.execute(select(Tag)).scalars().all()) == 2

    def test_replaces_previous_set(self, db, tag_service, make_document):
        """Stale tags from an earlier run do not survive."""
        document = make_document()
        tag_service.reconcile(document.id, ["invoice", "financial"])
        tag_service.reconcile(document.id, ["contract"])

        assert linked_names(db, document.id) == ["contract"]
        # Tags are never pruned
        assert db.execute(select(Tag).filter(Tag.name == "invoice")).scalar_one()

    def test_empty_set_clears_links(self, db, tag_service, make_document):
        """No tags is a success that leaves the document untagged."""
        document = make_document()
        tag_service.reconcile(document.id, ["invoice"])
        result = tag_service.reconcile(document.id, [])

        assert result.count == 0
        assert result.failures == []
        assert linked_names(db, document.id) == []

    def test_case_insensitive_and_deduplicated(self, db, tag_service, make_document):
        """Names differing only in case resolve to one tag."""
        document = make_document()
        result = tag_service.reconcile(document.id, ["Invoice", "invoice", " INVOICE "])

        assert result.tag_names == ["invoice"]
        assert db.execute(select(DocumentTag)).scalars().all()[0].document_id == document.id

    def test_other_documents_untouched(self, db, tag_service, make_document):
        """Reconciling one document leaves other documents' links alone."""
        first = make_document("a.pdf")
        second = make_document("b.pdf")
        tag_service.reconcile(first.id, ["invoice"])
        tag_service.reconcile(second.id, ["contract"])
        tag_service.reconcile(first.id, [])

        assert linked_names(db, second.id) == ["contract"]

    def test_failed_tag_is_skipped(self, db, tag_service, make_document):
        """A tag that cannot be created is dropped and the rest are linked."""
        document = make_document()
        result = tag_service.reconcile(document.id, ["invoice", "x" * 300, "tax"])

        assert result.tag_names == ["invoice", "tax"]
        assert len(result.failures) == 1
        assert result.failures[0].error
        assert linked_names(db, document.id) == ["invoice", "tax"]


class TestTagRepository:
    """Test tag store primitives."""

    def test_case_insensitive_lookup(self, db, tag_repository):
        """A tag created as 'Invoice' is found as 'invoice'."""
        tag_id = tag_repository.create_tag("Invoice")
        db.commit()

        assert tag_repository.find_tag_by_name("invoice") == tag_id
        assert tag_repository.get_by_id(tag_id).name == "invoice"

    def test_create_conflict_returns_existing(self, db, tag_repository):
        """Creating an existing name returns the stored row."""
        first = tag_repository.create_tag("invoice")
        second = tag_repository.create_tag("INVOICE")

        assert first == second
        assert db.query(Tag).count() == 1

    def test_invalid_name(self, tag_repository):
        """Blank names are rejected."""
        with pytest.raises(ValueError):
            tag_repository.create_tag("   ")


class FailingReplaceStore(TagStore):
    """Store whose link insert fails after links were deleted."""

    def __init__(self, inner: TagRepository):
        self.inner = inner

    def find_tag_by_name(self, name: str) -> Optional[int]:
        return self.inner.find_tag_by_name(name)

    def create_tag(self, name: str) -> int:
        return self.inner.create_tag(name)

    def delete_links_for_document(self, document_id: int) -> int:
        return self.inner.delete_links_for_document(document_id)

    def insert_links(self, document_id: int, tag_ids: Sequence[int]) -> None:
        raise OperationalError("INSERT INTO document_tags", {}, Exception("connection lost"))

    def atomic(self):
        return self.inner.atomic()


class TestTransactionalReplace:
    """Test that a failed replacement keeps the previous links."""

    def test_failure_rolls_back(self, db, tag_service, tag_repository, make_document):
        """The old tag set survives a failure between delete and insert."""
        document = make_document()
        tag_service.reconcile(document.id, ["invoice", "financial"])

        failing = TagService(FailingReplaceStore(tag_repository))
        with pytest.raises(DependencyError):
            failing.reconcile(document.id, ["contract"])

        assert linked_names(db, document.id) == ["financial", "invoice"]
        assert db.execute(select(Tag).filter(Tag.name == "contract")).scalar_one_or_none() is None
