"""Shared data classes used across the parser, validator, and scheduler."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class CardType(str, Enum):
    SIMPLE = "simple"
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class CardOption:
    text: str
    is_correct: bool = False


@dataclass
class CardMetadata:
    hint: str | None = None
    explanation: str | None = None
    difficulty: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Card:
    id: str
    front: str
    back: str
    type: CardType = CardType.SIMPLE
    category: str | None = None
    options: list[CardOption] | None = None
    metadata: CardMetadata = field(default_factory=CardMetadata)
    line: int = 1

    @property
    def correct_option(self) -> CardOption | None:
        for option in self.options or []:
            if option.is_correct:
                return option
        return None


@dataclass
class DeckSettings:
    shuffle_cards: bool = False
    repeat_incorrect: bool = True
    study_mode: str = "sequential"


@dataclass
class Deck:
    id: str
    name: str
    cards: list[Card] = field(default_factory=list)
    description: str = ""
    emoji: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    modified_at: datetime | None = None
    settings: DeckSettings = field(default_factory=DeckSettings)
    source: str = ""


@dataclass
class Diagnostic:
    severity: Severity
    message: str
    line: int | None = None

    def __str__(self):
        if self.line is None:
            return f"{self.severity.value}: {self.message}"
        return f"{self.severity.value}: {self.message} (line {self.line})"


@dataclass
class ParseResult:
    """Everything a single grammar pass learns about a document.

    ``definitions`` counts card-defining lines (``::`` lines and stems),
    whether or not they produced a card.
    """
    cards: list[Card] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    title: str | None = None
    categories: list[str] = field(default_factory=list)
    definitions: int = 0


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: list[Diagnostic] = field(default_factory=list)
    card_count: int = 0
    category_count: int = 0

    def add(self, severity: Severity, message: str, line: int | None = None):
        self.errors.append(Diagnostic(severity, message, line))
        if severity is Severity.ERROR:
            self.is_valid = False


@dataclass
class CardReview:
    card_id: str
    last_review: datetime
    next_review: datetime
    interval: int = 1
    repetitions: int = 0
    ease_factor: float = 2.5
    lapses: int = 0


@dataclass
class ReviewPerformance:
    quality: int
    time_spent: float
    hints_used: bool = False


@dataclass
class RetentionStats:
    average_ease_factor: float
    average_interval: float
    mastered_cards: int
    struggling_cards: int
    retention_rate: float
