"""Text normalization and token frequency counting."""
import re
from collections import Counter
from typing import Iterable, List, Optional

MIN_TOKEN_LENGTH = 3

# Common English articles, conjunctions, pronouns, auxiliary verbs and prepositions
STOP_WORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
        "had", "her", "was", "one", "our", "out", "has", "have", "him", "his",
        "how", "its", "may", "new", "now", "old", "see", "two", "who", "did",
        "get", "let", "say", "she", "too", "use", "this", "that", "with",
        "from", "they", "them", "their", "there", "then", "than", "these",
        "those", "what", "when", "where", "which", "while", "will", "would",
        "shall", "should", "could", "been", "being", "were", "does", "done",
        "doing", "into", "onto", "upon", "about", "above", "below", "after",
        "before", "under", "over", "also", "just", "only", "very", "such",
        "some", "each", "both", "either", "neither", "nor", "yet", "because",
        "although", "though", "unless", "until", "your", "yours", "ours",
        "mine", "hers", "theirs", "itself", "himself", "herself", "myself",
        "yourself", "themselves", "ourselves", "whom", "whose", "here",
        "must", "might", "more", "most", "other", "same", "own", "per", "via",
        "off", "why", "between", "through", "during", "against", "within",
        "without",
    }
)

_SEPARATORS = re.compile(r"[^a-z0-9]+")


def normalize(text: Optional[str]) -> List[str]:
    """Split text into lower-case alphanumeric tokens.

    Tokens shorter than three characters, purely numeric tokens and stop
    words are dropped. Empty or whitespace-only input yields an empty list.

    Args:
        text: Raw document text

    Returns:
        Tokens in document order
    """
    if not text or not text.strip():
        return []

    collapsed = _SEPARATORS.sub(" ", text.lower())
    return [
        token
        for token in collapsed.split()
        if len(token) >= MIN_TOKEN_LENGTH
        and not token.isdigit()
        and token not in STOP_WORDS
    ]


def build_frequency_table(tokens: Iterable[str]) -> Counter:
    """Count token occurrences, keyed in first-occurrence order."""
    return Counter(tokens)
