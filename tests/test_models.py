"""Tests for flashplay.models dataclasses."""

from datetime import datetime, timezone

from flashplay.models import (
    Card, CardOption, CardReview, CardType, Diagnostic, Severity, ValidationResult,
)


def test_card_defaults():
    c = Card(id="c1", front="Q", back="A")
    assert c.type is CardType.SIMPLE
    assert c.category is None
    assert c.options is None
    assert c.metadata.tags == []
    assert c.correct_option is None


def test_correct_option():
    c = Card(id="c1", front="Q", back="B", type=CardType.MULTIPLE_CHOICE,
             options=[CardOption("A"), CardOption("B", is_correct=True)])
    assert c.correct_option.text == "B"


def test_card_type_values():
    assert CardType("multiple-choice") is CardType.MULTIPLE_CHOICE
    assert CardType.TRUE_FALSE.value == "true-false"


def test_diagnostic_str():
    assert str(Diagnostic(Severity.ERROR, "bad", 3)) == "error: bad (line 3)"
    assert str(Diagnostic(Severity.INFO, "ok")) == "info: ok"


def test_validation_result_add_error_invalidates():
    result = ValidationResult()
    result.add(Severity.WARNING, "hmm")
    assert result.is_valid
    result.add(Severity.ERROR, "broken", line=2)
    assert not result.is_valid
    assert result.errors[-1].line == 2


def test_card_review_defaults():
    t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    r = CardReview(card_id="c1", last_review=t, next_review=t)
    assert r.interval == 1
    assert r.repetitions == 0
    assert r.ease_factor == 2.5
    assert r.lapses == 0
