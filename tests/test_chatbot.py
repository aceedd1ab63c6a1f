from types import SimpleNamespace

from app.services.chatbot import (
    CHAT_RULES,
    CLARIFY_TEXT,
    FALLBACK_TEXT,
    GREETING_TEXT,
    ChatRule,
    chat,
    respond,
)


def entry(id, title, content, category="General"):
    return SimpleNamespace(id=id, title=title, content=content, category=category)


GENERATOR = entry(
    1,
    "Generator Oil Change Procedure",
    "Step-by-step procedure for changing generator oil. " * 10,
    "Generator Maintenance",
)
HVAC = entry(2, "Air Filter Selection Guide", "Proper air filter selection is crucial for HVAC efficiency.", "HVAC Maintenance")


def test_rules_are_checked_in_order():
    assert [rule.name for rule in CHAT_RULES] == ["greeting", "how_to", "equipment", "general", "fallback"]


def test_greeting_wins_over_how_to():
    reply = respond("Hello, how do I fix the generator", [GENERATOR], ["hello", "generator"])
    assert reply.rule == "greeting"
    assert reply.text == GREETING_TEXT
    assert reply.suggestions == [{"id": 1, "title": "Generator Oil Change Procedure", "category": "Generator Maintenance"}]


def test_greeting_matches_inside_words():
    # "this" contains "hi"
    reply = respond("is this covered", [], ["covered"])
    assert reply.rule == "greeting"


def test_how_to_quotes_best_result():
    reply = respond("How to change generator oil?", [GENERATOR, HVAC], ["change", "generator", "oil"])
    assert reply.rule == "how_to"
    assert reply.text == (
        "Here's how to handle generator oil change procedure:\n\n"
        f"{GENERATOR.content[:300]}...\n\n"
        "Would you like more detailed information about this procedure?"
    )


def test_how_to_without_results_asks_for_detail():
    reply = respond("how do i reset it", [], ["reset"])
    assert reply.rule == "how_to"
    assert reply.text == CLARIFY_TEXT
    assert reply.suggestions == []


def test_equipment_picks_first_result_mentioning_it():
    reply = respond("generator fuel level low", [HVAC, GENERATOR], ["generator", "level"])
    assert reply.rule == "equipment"
    assert reply.text.startswith(
        "I found information about generator maintenance:\n\nGenerator Oil Change Procedure\n\n"
    )
    assert f"{GENERATOR.content[:250]}..." in reply.text
    # suggestions still follow the result order
    assert [s["id"] for s in reply.suggestions] == [2, 1]


def test_equipment_keyword_without_matching_result_is_general():
    reply = respond("elevator stuck", [HVAC], ["elevator", "stuck"])
    assert reply.rule == "general"
    assert reply.text.startswith("I found this relevant information:\n\nAir Filter Selection Guide\n\n")


def test_fallback_without_results():
    reply = respond("zzz", [], [])
    assert reply.rule == "fallback"
    assert reply.text == FALLBACK_TEXT


def test_suggestions_capped_at_two():
    third = entry(3, "UPS Battery Maintenance", "battery checks", "Electrical Systems")
    reply = respond("replace air filter", [HVAC, GENERATOR, third], ["replace", "filter"])
    assert [s["id"] for s in reply.suggestions] == [2, 1]


def test_custom_rules_without_catch_all_fall_back():
    never = ChatRule("never", lambda ctx: False, lambda ctx: "unused")
    reply = respond("anything", [], [], rules=[never])
    assert reply.rule == "fallback"
    assert reply.text == FALLBACK_TEXT


def test_chat_against_knowledge_base(db_session, sample_knowledge):
    result = chat(db_session, "change generator oil")
    assert result["keywords"] == ["change", "generator", "oil"]
    assert result["response"].startswith(
        "I found information about generator maintenance:\n\nGenerator Oil Change Procedure"
    )
    assert result["suggestions"] == [
        {"id": sample_knowledge[0].id, "title": "Generator Oil Change Procedure", "category": "Generator Maintenance"}
    ]


def test_chat_with_no_matches(db_session, sample_knowledge):
    result = chat(db_session, "zzz")
    assert result == {"response": FALLBACK_TEXT, "suggestions": [], "keywords": []}
