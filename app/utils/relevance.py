# app/utils/relevance.py
"""
Keyword extraction and relevance scoring for knowledge base lookups
"""

import re
from typing import Iterable, List, Optional

# Common maintenance keywords
MAINTENANCE_KEYWORDS = frozenset([
    'generator', 'hvac', 'elevator', 'fire', 'safety', 'battery', 'ups', 'oil', 'filter',
    'inspection', 'maintenance', 'repair', 'replace', 'check', 'test', 'clean', 'service',
    'emergency', 'scheduled', 'preventive', 'routine', 'annual', 'monthly', 'weekly',
    'electrical', 'mechanical', 'plumbing', 'cooling', 'heating', 'ventilation',
])

TITLE_WEIGHT = 10
CONTENT_WEIGHT = 5
TAGS_WEIGHT = 3

_NON_WORD = re.compile(r"\W+")


def extract_keywords(message: str) -> List[str]:
    """Pull domain keywords out of free text.

    A token is kept when it is longer than 2 characters and is either a known
    maintenance term or longer than 4 characters. Order and duplicates are kept.
    """
    words = [word for word in _NON_WORD.split(message.lower()) if len(word) > 2]
    return [word for word in words if word in MAINTENANCE_KEYWORDS or len(word) > 4]


def relevance_score(title: str, content: str, tags: Optional[str], terms: Iterable[str]) -> int:
    """Sum the field bonuses for every term found in title, content and tags"""
    title_lower = (title or "").lower()
    content_lower = (content or "").lower()
    tags_lower = (tags or "").lower()

    score = 0
    for term in terms:
        if term in title_lower:
            score += TITLE_WEIGHT
        if term in content_lower:
            score += CONTENT_WEIGHT
        if term in tags_lower:
            score += TAGS_WEIGHT
    return score


def query_terms(query: str) -> List[str]:
    # Plain space split; empty terms from repeated spaces are kept
    return query.lower().split(" ")
