"""
Free-text matching and relevance ranking for outfit search.

Matching is an OR across fields, each with its own granularity:
- title: case-insensitive substring
- style tags: case-insensitive substring of any tag
- description: case-insensitive whole-word match

Scoring tiers (title and tag tiers are each exclusive, both can fire):
- title equals query: 100, starts with: 50, contains: 30
- a tag equals query: 40, a tag contains query: 20
- description contains query as a whole word: 5
"""

import re
from typing import Any, Iterable, List, Optional

TITLE_EXACT_SCORE = 100
TITLE_PREFIX_SCORE = 50
TITLE_SUBSTRING_SCORE = 30
TAG_EXACT_SCORE = 40
TAG_SUBSTRING_SCORE = 20
DESCRIPTION_WORD_SCORE = 5


def normalize_query(query: Optional[str]) -> str:
    """Lowercase and trim a search query. Blank queries normalize to ''."""
    return (query or "").strip().lower()


def _word_pattern(term: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def _fields(outfit: Any) -> tuple[str, str, List[str]]:
    title = (getattr(outfit, "title", None) or "").lower()
    description = getattr(outfit, "description", None) or ""
    tags = [str(tag).lower() for tag in (getattr(outfit, "style_tags", None) or [])]
    return title, description, tags


def matches_query(outfit: Any, term: str) -> bool:
    """Return True if the normalized term matches any searchable field."""
    if not term:
        return True
    title, description, tags = _fields(outfit)
    if term in title:
        return True
    if any(term in tag for tag in tags):
        return True
    return _word_pattern(term).search(description) is not None


def score_outfit(outfit: Any, term: str) -> int:
    """Relevance score of one outfit for a normalized term."""
    title, description, tags = _fields(outfit)
    score = 0

    if title == term:
        score += TITLE_EXACT_SCORE
    elif title.startswith(term):
        score += TITLE_PREFIX_SCORE
    elif term in title:
        score += TITLE_SUBSTRING_SCORE

    if any(tag == term for tag in tags):
        score += TAG_EXACT_SCORE
    elif any(term in tag for tag in tags):
        score += TAG_SUBSTRING_SCORE

    if _word_pattern(term).search(description):
        score += DESCRIPTION_WORD_SCORE

    return score


def rank_by_relevance(outfits: Iterable[Any], query: Optional[str]) -> List[Any]:
    """
    Sort outfits by descending relevance score.

    The sort is stable: equal scores keep their incoming order.
    """
    term = normalize_query(query)
    scored = [(score_outfit(outfit, term), outfit) for outfit in outfits]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [outfit for _, outfit in scored]
