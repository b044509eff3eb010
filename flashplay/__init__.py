"""flashplay: markdown flashcard decks with spaced-repetition scheduling."""

__version__ = "0.1.0"

from flashplay.models import (
    Card, CardMetadata, CardOption, CardReview, CardType, Deck, DeckSettings,
    Diagnostic, ParseResult, RetentionStats, ReviewPerformance, Severity,
    ValidationResult,
)
from flashplay.content import ContentPart, PartType, parse_content, render_html
from flashplay.parser import Parser
from flashplay.validator import validate
from flashplay.scheduler import (
    Scheduler, calculate_next_review, calculate_retention, get_due_cards,
    get_review_schedule, initialize_card,
)

__all__ = [
    "Card", "CardMetadata", "CardOption", "CardReview", "CardType", "ContentPart",
    "Deck", "DeckSettings", "Diagnostic", "ParseResult", "Parser", "PartType",
    "RetentionStats", "ReviewPerformance", "Scheduler", "Severity",
    "ValidationResult", "calculate_next_review", "calculate_retention",
    "get_due_cards", "get_review_schedule", "initialize_card", "parse_content",
    "render_html", "validate",
]
