"""Tag extraction service for automated document categorization."""
import enum
import logging
from collections import Counter
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from docatlas.core.config import settings
from docatlas.services.text_normalizer import build_frequency_table, normalize

logger = logging.getLogger(__name__)

# Domain keyword lists, in declaration order. Declaration order is the tie-break
# for equal weighted scores.
DOMAIN_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "invoice": (
            "invoice", "bill", "payment", "due date", "total", "subtotal", "tax",
            "amount due", "billing",
        ),
        "contract": (
            "contract", "agreement", "terms", "conditions", "signature", "party",
            "clause", "obligations",
        ),
        "receipt": (
            "receipt", "purchase", "transaction", "refund", "payment received", "store",
        ),
        "report": (
            "report", "analysis", "summary", "findings", "conclusion", "data", "statistics",
        ),
        "legal": (
            "legal", "law", "attorney", "court", "litigation", "lawsuit", "defendant",
            "plaintiff",
        ),
        "financial": (
            "financial", "budget", "revenue", "profit", "loss", "quarterly", "annual",
            "fiscal",
        ),
        "medical": (
            "medical", "health", "patient", "diagnosis", "treatment", "doctor",
            "hospital", "prescription",
        ),
        "insurance": (
            "insurance", "policy", "premium", "claim", "coverage", "deductible",
            "beneficiary",
        ),
        "tax": (
            "tax", "irs", "1099", "w2", "deduction", "withholding", "refund", "filing",
        ),
        "hr": (
            "employee", "payroll", "benefits", "vacation", "hr", "human resources",
            "personnel",
        ),
        "technology": (
            "software", "hardware", "database", "api", "server", "cloud", "network",
            "programming", "algorithm",
        ),
    }
)


class ClassificationMode(str, enum.Enum):
    """Domain classification algorithm used by a deployment."""

    WEIGHTED = "weighted"
    THRESHOLD = "threshold"


def keyword_weight(keyword: str) -> int:
    """Longer keywords are more specific and count double."""
    return 2 if len(keyword) > 4 else 1


def score_domains(
    frequencies: Counter,
    domains: Mapping[str, Tuple[str, ...]] = DOMAIN_KEYWORDS,
) -> List[Tuple[str, int]]:
    """Score every domain against a token frequency table.

    Args:
        frequencies: Token -> occurrence count
        domains: Domain -> keyword list

    Returns:
        (domain, score) pairs with score > 0, highest first. Equal scores keep
        declaration order.
    """
    scores = []
    for domain, keywords in domains.items():
        score = sum(
            frequencies[keyword] * keyword_weight(keyword)
            for keyword in keywords
            if keyword in frequencies
        )
        if score > 0:
            scores.append((domain, score))

    # sorted() is stable, so ties stay in declaration order
    return sorted(scores, key=lambda item: item[1], reverse=True)


def match_domains(
    text: str,
    domains: Mapping[str, Tuple[str, ...]] = DOMAIN_KEYWORDS,
) -> List[str]:
    """Select domains by keyword membership in the raw text.

    A domain with more than five keywords needs two substring matches, a
    shorter one needs a single match.

    Args:
        text: Raw document text
        domains: Domain -> keyword list

    Returns:
        Qualifying domains in declaration order
    """
    if not text:
        return []

    text_lower = text.lower()
    found = []
    for domain, keywords in domains.items():
        matches = sum(1 for keyword in keywords if keyword in text_lower)
        threshold = 2 if len(keywords) > 5 else 1
        if matches >= threshold:
            found.append(domain)
    return found


def extract_keywords(
    frequencies: Counter,
    exclude: Iterable[str] = (),
    limit: int = 3,
    min_count: int = 2,
    min_length: int = 4,
    max_length: int = 15,
) -> List[str]:
    """Pick frequent, mid-length tokens as supplemental tags.

    Args:
        frequencies: Token -> occurrence count, in first-occurrence order
        exclude: Tags already chosen (domain tags)
        limit: Maximum number of keywords to return
        min_count: Minimum occurrences for a token to qualify
        min_length: Minimum token length
        max_length: Maximum token length

    Returns:
        Keywords ordered by frequency, first occurrence breaking ties
    """
    excluded = set(exclude)
    candidates = [
        (token, count)
        for token, count in frequencies.items()
        if count >= min_count
        and min_length <= len(token) <= max_length
        and token not in excluded
    ]
    candidates.sort(key=lambda item: item[1], reverse=True)
    return [token for token, _ in candidates[:limit]]


class TagExtractionService:
    """Service for extracting domain and keyword tags from document text."""

    def __init__(
        self,
        mode: Optional[ClassificationMode] = None,
        max_domain_tags: Optional[int] = None,
        max_keyword_tags: Optional[int] = None,
        max_tags: Optional[int] = None,
        domains: Mapping[str, Tuple[str, ...]] = DOMAIN_KEYWORDS,
    ):
        """Initialize tag extraction service.

        Args:
            mode: Domain classification algorithm (defaults to settings.CLASSIFICATION_MODE)
            max_domain_tags: Maximum domain tags in weighted mode
            max_keyword_tags: Maximum supplemental keyword tags
            max_tags: Cap on the combined local tag set
            domains: Domain -> keyword list
        """
        self.mode = ClassificationMode(mode if mode is not None else settings.CLASSIFICATION_MODE)
        self.max_domain_tags = max_domain_tags if max_domain_tags is not None else settings.MAX_DOMAIN_TAGS
        self.max_keyword_tags = max_keyword_tags if max_keyword_tags is not None else settings.MAX_KEYWORD_TAGS
        self.max_tags = max_tags if max_tags is not None else settings.MAX_LOCAL_TAGS
        self.domains = domains

    def classify_domains(self, text: str, frequencies: Counter) -> List[str]:
        """Return domain tags for the configured mode."""
        if self.mode is ClassificationMode.THRESHOLD:
            return match_domains(text, self.domains)

        ranked = score_domains(frequencies, self.domains)
        return [domain for domain, _ in ranked[: self.max_domain_tags]]

    def extract_tags(self, text: str) -> List[str]:
        """Extract the local tag set for a document.

        Args:
            text: Document text content

        Returns:
            Domain tags followed by supplemental keyword tags, de-duplicated
            and capped at max_tags
        """
        tokens = normalize(text)
        if not tokens:
            return []

        frequencies = build_frequency_table(tokens)
        domain_tags = self.classify_domains(text, frequencies)
        keyword_tags = extract_keywords(
            frequencies, exclude=domain_tags, limit=self.max_keyword_tags
        )

        tags: List[str] = []
        for tag in domain_tags + keyword_tags:
            if tag not in tags:
                tags.append(tag)

        logger.debug(
            f"Extracted {len(domain_tags)} domain and {len(keyword_tags)} keyword tags "
            f"({self.mode.value} mode)"
        )
        return tags[: self.max_tags]
