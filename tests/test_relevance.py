from app.utils.relevance import extract_keywords, query_terms, relevance_score


def test_term_in_every_field_scores_eighteen():
    assert relevance_score("Generator Oil Change", "drain the oil", "generator,oil", ["oil"]) == 18


def test_term_missing_everywhere_scores_zero():
    assert relevance_score("Generator Oil Change", "drain the oil", "generator,oil", ["elevator"]) == 0


def test_field_weights_are_independent():
    assert relevance_score("Pump", "nothing", None, ["pump"]) == 10
    assert relevance_score("Nothing", "pump here", None, ["pump"]) == 5
    assert relevance_score("Nothing", "nothing", "pump", ["pump"]) == 3


def test_scores_add_up_across_terms():
    # pump: content only (5); belt: title, content and tags (18)
    score = relevance_score("Belt Replacement", "Replace the pump belt", "belt", ["pump", "belt"])
    assert score == 23


def test_matching_ignores_case():
    assert relevance_score("HVAC Filter", "", "", ["hvac"]) == 10


def test_extract_keeps_vocabulary_and_long_words():
    keywords = extract_keywords("Check the generator oil filter")
    assert keywords == ["check", "generator", "oil", "filter"]


def test_extract_drops_short_and_unlisted_words():
    # "the"/"fix" are 3 letters and not maintenance terms; "it" is too short
    assert extract_keywords("fix it on the ups") == ["ups"]


def test_extract_keeps_duplicates_in_order():
    assert extract_keywords("Oil, OIL and more oil!") == ["oil", "oil", "oil"]


def test_extract_splits_on_punctuation():
    assert extract_keywords("hvac/cooling-tower") == ["hvac", "cooling", "tower"]


def test_query_terms_split_on_single_spaces():
    assert query_terms("Pump  Belt") == ["pump", "", "belt"]
