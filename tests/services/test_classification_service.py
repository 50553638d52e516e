"""Tests for the classification entry point."""
import json

import pytest

from docatlas.core.exceptions import DocumentNotFoundError, InvalidInputError
from docatlas.repositories import DocumentRepository, TagRepository
from docatlas.services.classification_service import ClassificationService
from docatlas.services.llm_tagging_service import LLMTaggingService
from docatlas.services.tag_extraction import ClassificationMode, TagExtractionService
from docatlas.services.tag_service import TagService

INVOICE_TEXT = (
    "Invoice number 2044. Invoice total due on receipt. "
    "Payment by bank transfer. Billing contact: accounts department."
)


@pytest.fixture
def build_service(db):
    """Build a classification service, optionally with an external tagger."""

    def _build(llm_client=None, mode=ClassificationMode.WEIGHTED):
        llm_tagger = None
        if llm_client is not None:
            llm_tagger = LLMTaggingService(api_key="", client=llm_client, min_text_length=50)
        return ClassificationService(
            documents=DocumentRepository(db),
            tag_service=TagService(TagRepository(db)),
            extractor=TagExtractionService(mode=mode, max_domain_tags=5, max_keyword_tags=3, max_tags=6),
            llm_tagger=llm_tagger,
        )

    return _build


class TestClassify:
    """Test classify()."""

    def test_tags_document(self, db, build_service, make_document):
        """Local tags are stored and reported."""
        document = make_document("invoice-2044.pdf")
        result = build_service().classify(document.id, INVOICE_TEXT)

        assert result.tags[0] == "invoice"
        assert result.tag_count == len(result.tags)
        assert DocumentRepository(db).get_tag_names(document.id) == sorted(result.tags)

    def test_empty_text_is_success(self, db, build_service, make_document):
        """Empty text yields zero tags, not an error."""
        document = make_document()
        result = build_service().classify(document.id, "")

        assert result.tags == []
        assert result.tag_count == 0

    def test_missing_input(self, build_service):
        """Missing id or text is rejected before processing."""
        service = build_service()
        with pytest.raises(InvalidInputError):
            service.classify(None, "text")
        with pytest.raises(InvalidInputError):
            service.classify(1, None)

    def test_unknown_document(self, build_service):
        """Unknown documents are reported as not found."""
        with pytest.raises(DocumentNotFoundError):
            build_service().classify(999, "invoice invoice")

    def test_external_tags_merged(self, db, build_service, make_document, fake_llm_client):
        """External tags are added case-insensitively."""
        document = make_document()
        client = fake_llm_client(content=json.dumps(["Invoice", "Accounting"]))
        result = build_service(llm_client=client).classify(document.id, INVOICE_TEXT)

        assert "invoice" in result.tags
        assert "accounting" in result.tags
        assert result.tags.count("invoice") == 1

    def test_external_failure_falls_back(self, db, build_service, make_document, fake_llm_client):
        """A failing external tagger leaves the local tags."""
        document = make_document()
        local = build_service().identify_tags(INVOICE_TEXT)
        client = fake_llm_client(error=TimeoutError("timed out"))
        result = build_service(llm_client=client).classify(document.id, INVOICE_TEXT)

        assert result.tags == local

    def test_threshold_mode(self, db, build_service, make_document):
        """Threshold mode selects invoice for the invoice example."""
        document = make_document()
        result = build_service(mode=ClassificationMode.THRESHOLD).classify(
            document.id, "invoice invoice total payment billing"
        )
        assert "invoice" in result.tags


class TestIngest:
    """Test ingest()."""

    def test_stores_content_and_tags(self, db, build_service, make_document):
        """Content is stored once and tags are linked."""
        document = make_document()
        service = build_service()
        service.ingest(document.id, INVOICE_TEXT)
        service.ingest(document.id, "Court filing by the attorney for the plaintiff")

        content = DocumentRepository(db).get_content(document.id)
        assert content.indexed_text.startswith("Court filing")
        assert DocumentRepository(db).get_tag_names(document.id) == ["legal", "tax"]

    def test_empty_text_gets_content_record(self, db, build_service, make_document):
        """A document with empty text still gets a content record."""
        document = make_document()
        result = build_service().ingest(document.id, "")

        assert result.tag_count == 0
        assert DocumentRepository(db).get_content(document.id).indexed_text == ""
