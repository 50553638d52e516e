"""Service-level exceptions mapped to HTTP errors by the API layer."""


class DocAtlasError(Exception):
    """Base class for errors surfaced to callers."""


class InvalidInputError(DocAtlasError):
    """Request is missing a document identifier, text, or query."""


class DocumentNotFoundError(DocAtlasError):
    """Referenced document does not exist."""

    def __init__(self, document_id: int):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class DependencyError(DocAtlasError):
    """Tag store or candidate source could not be reached."""
