"""Tests for the markdown-to-card parser."""

import pytest

from flashplay.models import CardType, Severity
from flashplay.parser import Parser, parse


def test_simple_card(parser):
    (card,) = parser.parse("Capital of France? :: Paris")
    assert card.front == "Capital of France?"
    assert card.back == "Paris"
    assert card.type is CardType.SIMPLE
    assert card.id == "card-1"
    assert card.line == 1


@pytest.mark.parametrize("answer", ["true", "False", "TRUE"])
def test_true_false_card(parser, answer):
    (card,) = parser.parse(f"The sky is blue :: {answer}")
    assert card.type is CardType.TRUE_FALSE
    assert card.back == answer


@pytest.mark.parametrize("question,answer", [
    ("What is 2+2?", "4"),
    ("Hund", "dog"),
    ("**Bold** prompt", "`code` answer"),
    ("It is raining", "true"),
    ("Truth", "truer"),
])
def test_round_trip_simple(question, answer):
    (card,) = Parser().parse(f"{question} :: {answer}")
    assert (card.front, card.back) == (question, answer)
    expected = CardType.TRUE_FALSE if answer.lower() in ("true", "false") else CardType.SIMPLE
    assert card.type is expected


def test_dash_prefix_optional(parser):
    cards = parser.parse("- Q1 :: A1\nQ2 :: A2")
    assert [(c.front, c.back) for c in cards] == [("Q1", "A1"), ("Q2", "A2")]


def test_only_first_separator_is_honored(parser):
    (card,) = parser.parse("a :: b :: c")
    assert (card.front, card.back) == ("a", "b :: c")


def test_category_scoping(parser):
    cards = parser.parse("## Cat\nA :: B\n## Cat2\nC :: D")
    assert [c.category for c in cards] == ["Cat", "Cat2"]


def test_title_is_not_a_category(parser):
    result = parser.parse_document("# Deck\nA :: B\n## Cat\nC :: D")
    assert result.title == "Deck"
    assert [c.category for c in result.cards] == [None, "Cat"]
    assert result.categories == ["Cat"]


def test_hash_headers_as_categories_when_no_subheaders(parser):
    result = parser.parse_document("# Rocks\nA :: B\n# Plates\nC :: D")
    assert result.title == "Rocks"
    assert [c.category for c in result.cards] == ["Rocks", "Plates"]


def test_multiple_choice_extraction(parser):
    markdown = "- What is 2+2?\n  - 3\n  - 4\n  - 5\n> 4"
    (card,) = parser.parse(markdown)
    assert card.type is CardType.MULTIPLE_CHOICE
    assert card.front == "What is 2+2?"
    assert [o.text for o in card.options] == ["3", "4", "5"]
    assert [o.is_correct for o in card.options] == [False, True, False]
    assert card.back == "4"


def test_multiple_choice_followed_by_cards(parser):
    markdown = "- Pick one\n  - a\n  - b\n  > a\nX :: Y"
    cards = parser.parse(markdown)
    assert [c.type for c in cards] == [CardType.MULTIPLE_CHOICE, CardType.SIMPLE]


def test_multiple_choice_match_is_case_sensitive(parser):
    result = parser.parse_document("- Q\n  - Four\n  - Five\n  > four")
    (card,) = result.cards
    assert [(o.text, o.is_correct) for o in card.options] == [
        ("Four", False), ("Five", False), ("four", True),
    ]
    assert card.back == "four"
    (warning,) = [d for d in result.diagnostics if d.severity is Severity.WARNING]
    assert "only in case or spacing" in warning.message
    assert warning.line == 4


def test_multiple_choice_after_title_and_card(parser):
    markdown = "# Quiz\nQ :: A\n- What is 2+2?\n  - 3\n  - 4\n  > 4"
    result = parser.parse_document(markdown)
    assert [c.type for c in result.cards] == [CardType.SIMPLE, CardType.MULTIPLE_CHOICE]
    assert result.cards[1].back == "4"
    assert result.definitions == 2
    assert result.diagnostics == []


def test_indented_card_outside_block(parser):
    result = parser.parse_document("# D\n## Cat\n  - Q :: A")
    (card,) = result.cards
    assert (card.front, card.back, card.category) == ("Q", "A", "Cat")
    assert result.diagnostics == []


def test_multiple_choice_unmatched_answer_added(parser):
    result = parser.parse_document("- Q\n  - a\n  - b\n  > c")
    (card,) = result.cards
    assert [o.text for o in card.options] == ["a", "b", "c"]
    assert card.correct_option.text == "c"
    assert any(d.severity is Severity.WARNING and "does not match" in d.message
               for d in result.diagnostics)


def test_multiple_choice_without_answer_is_dropped(parser):
    assert parser.parse("- Q\n  - a\n  - b") == []


def test_multiple_choice_with_one_option_is_dropped(parser):
    assert parser.parse("- Q\n  - a\n  > a") == []


def test_blank_line_ends_option_scan(parser):
    assert parser.parse("- Q\n  - a\n\n  - b\n  > b") == []


def test_metadata_comments(parser):
    markdown = ("Q :: A\n<!-- Hint: starts with A -->\n<!-- Difficulty: Hard -->\n"
                "<!-- Tags: x, y -->\n<!-- Explanation: because -->")
    (card,) = parser.parse(markdown)
    assert card.metadata.hint == "starts with A"
    assert card.metadata.difficulty == "hard"
    assert card.metadata.tags == ["x", "y"]
    assert card.metadata.explanation == "because"


def test_comment_after_blank_line_not_attached(parser):
    (card,) = parser.parse("Q :: A\n\n<!-- Hint: nope -->")
    assert card.metadata.hint is None


def test_frontmatter_skipped(parser):
    cards = parser.parse("---\ntitle: Deck\nnote: a :: b\n---\nQ :: A")
    assert [(c.front, c.line) for c in cards] == [("Q", 5)]


def test_permissive_on_garbage(parser):
    assert parser.parse("random prose\n   indented\n  - orphan\n> nothing") == []


def test_empty_input():
    assert parse("") == []
    assert parse("   \n\n") == []


def test_document_order_and_lines(parser, sample_markdown):
    cards = parser.parse(sample_markdown)
    assert [c.front for c in cards] == [
        "What is H2O?", "Gold symbol", "Water boils at 100C at sea level", "What is 2+2?",
    ]
    assert [c.line for c in cards] == [4, 5, 6, 9]
    assert cards[2].type is CardType.TRUE_FALSE
    assert cards[3].category == "Math"
    assert cards[3].metadata.hint == "count on your fingers"


def test_idempotent_structure(sample_markdown):
    def shape(cards):
        return [(c.front, c.back, c.type, c.category,
                 [(o.text, o.is_correct) for o in c.options or []]) for c in cards]
    assert shape(Parser().parse(sample_markdown)) == shape(Parser().parse(sample_markdown))


def test_default_ids_are_unique(sample_markdown):
    cards = Parser().parse(sample_markdown)
    assert len({c.id for c in cards}) == len(cards)


def test_diagnostics_line_numbers(parser):
    result = parser.parse_document("Q ::\n:: A\n  - orphan")
    by_line = {(d.line, d.message) for d in result.diagnostics}
    assert (1, "Answer cannot be empty") in by_line
    assert (2, "Question cannot be empty") in by_line
    assert (3, "Option line without a question above it") in by_line
    assert result.cards == []
    assert result.definitions == 2
