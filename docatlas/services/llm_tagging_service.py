"""LLM-based supplemental tagging using the OpenAI chat API."""
import json
import logging
from typing import Any, Iterable, List, Optional

from openai import OpenAI

from docatlas.core.config import settings
from docatlas.services.tag_extraction import DOMAIN_KEYWORDS

logger = logging.getLogger(__name__)


def merge_tags(local_tags: Iterable[str], external_tags: Iterable[str]) -> List[str]:
    """Case-insensitive union of two tag lists, keeping first-seen order.

    No cap is applied: external tags may push the set past the local limit.
    """
    merged: List[str] = []
    seen = set()
    for tag in list(local_tags) + list(external_tags):
        key = tag.strip().lower()
        if key and key not in seen:
            seen.add(key)
            merged.append(tag.strip())
    return merged


class LLMTaggingService:
    """Service for asking an LLM for additional document tags."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        min_text_length: Optional[int] = None,
        prompt_chars: Optional[int] = None,
    ):
        """Initialize the LLM tagging service.

        Args:
            api_key: OpenAI API key (defaults to settings.OPENAI_API_KEY)
            client: Pre-built OpenAI-compatible client; skips client construction
            model: Chat model name (defaults to settings.LLM_MODEL)
            timeout: Request timeout in seconds
            min_text_length: Texts at or below this length are not sent
            prompt_chars: Number of leading characters sent to the model
        """
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model if model is not None else settings.LLM_MODEL
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS
        self.min_text_length = (
            min_text_length if min_text_length is not None else settings.LLM_MIN_TEXT_LENGTH
        )
        self.prompt_chars = prompt_chars if prompt_chars is not None else settings.LLM_PROMPT_CHARS

        self.client = client
        if self.client is None and self.api_key:
            # No retries: a failed call falls back to local tags
            self.client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def should_tag(self, text: str) -> bool:
        return self.is_configured and len(text or "") > self.min_text_length

    def identify_tags(self, text: str) -> List[str]:
        """Ask the model for tags describing the text.

        Args:
            text: Document text content

        Returns:
            List of tag strings; empty when the service is not configured, the
            text is too short, or the call or its reply fails in any way
        """
        if not self.should_tag(text):
            return []

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._build_system_prompt()},
                    {"role": "user", "content": self._build_user_prompt(text)},
                ],
                temperature=0.3,
                max_tokens=100,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"LLM tag identification failed: {e}")
            return []

        return self.parse_tags(content)

    @staticmethod
    def parse_tags(content: Optional[str]) -> List[str]:
        """Parse a JSON array of tag strings; anything else yields no tags."""
        if not content or not content.strip():
            return []

        try:
            tags = json.loads(content.strip())
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Failed to parse LLM response: {content!r}")
            return []

        if not isinstance(tags, list):
            logger.warning(f"LLM response is not a list: {content!r}")
            return []

        return [tag.strip() for tag in tags if isinstance(tag, str) and tag.strip()]

    def _build_system_prompt(self) -> str:
        """Build the system prompt with the tag vocabulary hint."""
        vocabulary = ", ".join(DOMAIN_KEYWORDS)
        return f"""You are a document classifier. Analyze the given text and identify relevant tags/categories.
Return ONLY a JSON array of strings containing 3-7 most relevant tags.
Use simple, descriptive tags like: {vocabulary}, etc.
Example response: ["invoice", "financial", "tax"]"""

    def _build_user_prompt(self, text: str) -> str:
        """Build the user prompt with a bounded text prefix."""
        return f"""Analyze this document text and provide relevant tags:

{text[: self.prompt_chars]}"""
