"""Tests for FastAPI dependency wiring."""
from docatlas.api.dependencies import get_llm_tagger


def test_llm_tagger_built_once():
    """The tagger and its client are shared across requests."""
    get_llm_tagger.cache_clear()
    try:
        assert get_llm_tagger() is get_llm_tagger()
    finally:
        get_llm_tagger.cache_clear()
