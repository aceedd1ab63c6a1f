# app/services/chatbot.py
"""
Scripted chatbot for the knowledge base.

Replies come from an ordered list of rules; the first rule whose predicate
holds produces the text. Rule order is part of the behaviour: a greeting
always wins over a "how to" question, which wins over equipment lookups.
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.knowledge import KnowledgeEntry
from app.services.knowledge_search import search_for_chat
from app.utils.relevance import extract_keywords

logger = logging.getLogger(__name__)

GREETING_WORDS = ("hello", "hi", "help")
HOW_TO_PHRASES = ("how to", "how do")
EQUIPMENT_WORDS = ("generator", "hvac", "elevator", "fire", "ups", "battery")
SUGGESTION_LIMIT = 2

GREETING_TEXT = (
    "Hello! I'm the Facilities Service Assistant. I can help you with maintenance procedures, "
    "equipment information, and troubleshooting. What would you like to know about?"
)
CLARIFY_TEXT = (
    "I understand you're looking for a procedure. Could you be more specific about what "
    "equipment or task you need help with?"
)
FALLBACK_TEXT = (
    "I'm not sure I understand exactly what you're looking for. Could you try asking about "
    "specific equipment (generator, HVAC, elevator, etc.) or maintenance procedures? I have "
    "information about various maintenance tasks and safety procedures."
)


class ChatContext(NamedTuple):
    message: str
    results: List[KnowledgeEntry]
    keywords: List[str]


class ChatRule(NamedTuple):
    name: str
    applies: Callable[[ChatContext], bool]
    reply: Callable[[ChatContext], str]


class ChatReply(NamedTuple):
    text: str
    suggestions: List[dict]
    rule: str


def _is_greeting(ctx: ChatContext) -> bool:
    return any(word in ctx.message for word in GREETING_WORDS)


def _greeting(ctx: ChatContext) -> str:
    return GREETING_TEXT


def _is_how_to(ctx: ChatContext) -> bool:
    return any(phrase in ctx.message for phrase in HOW_TO_PHRASES)


def _how_to(ctx: ChatContext) -> str:
    if not ctx.results:
        return CLARIFY_TEXT
    best = ctx.results[0]
    return (
        f"Here's how to handle {best.title.lower()}:\n\n{best.content[:300]}...\n\n"
        "Would you like more detailed information about this procedure?"
    )


def _equipment_match(ctx: ChatContext):
    """First equipment keyword and the first result mentioning it, if any"""
    equipment = next((keyword for keyword in ctx.keywords if keyword in EQUIPMENT_WORDS), None)
    if equipment is None:
        return None
    for result in ctx.results:
        if equipment in result.content.lower() or equipment in result.title.lower():
            return equipment, result
    return None


def _is_equipment_query(ctx: ChatContext) -> bool:
    return _equipment_match(ctx) is not None


def _equipment(ctx: ChatContext) -> str:
    equipment, best = _equipment_match(ctx)
    return (
        f"I found information about {equipment} maintenance:\n\n{best.title}\n\n"
        f"{best.content[:250]}...\n\nWould you like me to find more specific information?"
    )


def _has_results(ctx: ChatContext) -> bool:
    return bool(ctx.results)


def _general(ctx: ChatContext) -> str:
    best = ctx.results[0]
    return (
        f"I found this relevant information:\n\n{best.title}\n\n{best.content[:200]}...\n\n"
        "Is this what you were looking for, or would you like me to search for something else?"
    )


def _always(ctx: ChatContext) -> bool:
    return True


def _fallback(ctx: ChatContext) -> str:
    return FALLBACK_TEXT


CHAT_RULES: List[ChatRule] = [
    ChatRule("greeting", _is_greeting, _greeting),
    ChatRule("how_to", _is_how_to, _how_to),
    ChatRule("equipment", _is_equipment_query, _equipment),
    ChatRule("general", _has_results, _general),
    ChatRule("fallback", _always, _fallback),
]


def respond(
    message: str,
    results: Sequence[KnowledgeEntry],
    keywords: Sequence[str],
    rules: Optional[List[ChatRule]] = None,
) -> ChatReply:
    ctx = ChatContext(message.lower(), list(results), list(keywords))
    # Suggestions always come from the unfiltered results, whichever rule fires
    suggestions = [
        {"id": entry.id, "title": entry.title, "category": entry.category}
        for entry in ctx.results[:SUGGESTION_LIMIT]
    ]

    for rule in rules or CHAT_RULES:
        if rule.applies(ctx):
            return ChatReply(rule.reply(ctx), suggestions, rule.name)

    # CHAT_RULES ends with a catch-all; custom rule lists may not
    return ChatReply(FALLBACK_TEXT, suggestions, "fallback")


def chat(db: Session, message: str) -> dict:
    """Answer a chat message from the knowledge base"""
    keywords = extract_keywords(message)
    ranked = search_for_chat(db, message, keywords)
    results = [item.entry for item in ranked]

    reply = respond(message, results, keywords)
    logger.info(f"Chat reply via '{reply.rule}' rule ({len(results)} matches, keywords={keywords})")

    return {
        "response": reply.text,
        "suggestions": reply.suggestions,
        "keywords": keywords,
    }
