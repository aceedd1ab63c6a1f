# app/services/knowledge_search.py
"""
Knowledge base search: catalog search for the search page and the
smaller ranked lookup that feeds the chatbot
"""

import logging
from typing import List, NamedTuple, Optional, Sequence

from sqlalchemy import case, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.knowledge import KnowledgeEntry
from app.utils.errors import InvalidQuery, StoreFailure
from app.utils.relevance import relevance_score, query_terms

logger = logging.getLogger(__name__)

CATALOG_LIMIT = 20
CHAT_LIMIT = 3
MIN_QUERY_LENGTH = 2


class RankedEntry(NamedTuple):
    entry: KnowledgeEntry
    score: int


def like_pattern(value: str) -> str:
    """Substring LIKE pattern with wildcards in `value` matched literally"""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _field_matches(value: str):
    pattern = like_pattern(value)
    return [
        KnowledgeEntry.title.ilike(pattern, escape="\\"),
        KnowledgeEntry.content.ilike(pattern, escape="\\"),
        KnowledgeEntry.tags.ilike(pattern, escape="\\"),
    ]


def search(
    db: Session,
    query: Optional[str],
    category: Optional[str] = None,
    equipment_type: Optional[str] = None,
    difficulty_level: Optional[str] = None,
) -> List[RankedEntry]:
    """Catalog search ranked by relevance score, at most 20 entries"""
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        raise InvalidQuery()

    try:
        stmt = db.query(KnowledgeEntry).filter(or_(*_field_matches(query)))

        if category:
            stmt = stmt.filter(KnowledgeEntry.category == category)
        if equipment_type:
            stmt = stmt.filter(KnowledgeEntry.equipment_type == equipment_type)
        if difficulty_level:
            stmt = stmt.filter(KnowledgeEntry.difficulty_level == difficulty_level)

        entries = stmt.order_by(KnowledgeEntry.title.asc()).limit(CATALOG_LIMIT).all()
    except SQLAlchemyError as e:
        logger.error(f"Knowledge search failed for query {query!r}: {e}")
        raise StoreFailure(str(e)) from e

    terms = query_terms(query)
    ranked = [
        RankedEntry(entry, relevance_score(entry.title, entry.content, entry.tags, terms))
        for entry in entries
    ]
    # list.sort is stable, so equal scores keep the title order from the store
    ranked.sort(key=lambda item: item.score, reverse=True)
    return ranked


def search_for_chat(db: Session, message: str, keywords: Sequence[str]) -> List[RankedEntry]:
    """Top 3 entries for a chat message.

    An entry qualifies if any field contains the whole message or any keyword.
    Its rank comes from the whole message alone: title 10, content 5, tags 3, else 1.
    """
    message_pattern = like_pattern(message)
    relevance = case(
        (KnowledgeEntry.title.ilike(message_pattern, escape="\\"), 10),
        (KnowledgeEntry.content.ilike(message_pattern, escape="\\"), 5),
        (KnowledgeEntry.tags.ilike(message_pattern, escape="\\"), 3),
        else_=1,
    ).label("relevance")

    conditions = _field_matches(message)
    for keyword in keywords:
        conditions.extend(_field_matches(keyword))

    try:
        rows = (
            db.query(KnowledgeEntry, relevance)
            .filter(or_(*conditions))
            .order_by(relevance.desc(), KnowledgeEntry.id.asc())
            .limit(CHAT_LIMIT)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Chat knowledge lookup failed: {e}")
        raise StoreFailure(str(e)) from e

    return [RankedEntry(entry, rank) for entry, rank in rows]
