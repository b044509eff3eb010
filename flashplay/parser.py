"""Markdown-to-card parser.

The parser is permissive: malformed lines never raise, they only yield fewer
cards. Problems found along the way are recorded as diagnostics on the
ParseResult so the validator can report them without a second grammar.
"""

import uuid
from typing import Callable

from flashplay.config import DEFAULT_SETTINGS
from flashplay.grammar import ChoiceBlock, Line, LineKind, read_blocks, tokenize
from flashplay.models import (
    Card, CardMetadata, CardOption, CardType, Diagnostic, ParseResult, Severity,
)

EXPECTED_CHOICE_SYNTAX = (
    "Expected format:\n"
    "- Question\n"
    "  - Option A\n"
    "  - Option B\n"
    "  > Option B"
)

_DIFFICULTIES = ("easy", "medium", "hard")


def _new_id() -> str:
    return str(uuid.uuid4())


class Parser:
    def __init__(self, settings: dict | None = None,
                 id_factory: Callable[[], str] | None = None):
        self.settings = dict(DEFAULT_SETTINGS)
        if settings:
            self.settings.update(settings)
        self.id_factory = id_factory or _new_id

    def parse(self, markdown: str) -> list[Card]:
        """Parse deck markdown into cards, in document order."""
        return self.parse_document(markdown).cards

    def parse_document(self, markdown: str) -> ParseResult:
        result = ParseResult()
        if not markdown or not markdown.strip():
            return result

        lines = tokenize(markdown)
        # Documents without "##" headers but with several "#" headers use
        # "#" for sections; the first one still names the deck.
        kinds = [line.kind for line in lines]
        hash_categories = (LineKind.CATEGORY not in kinds
                           and kinds.count(LineKind.TITLE) >= 2)

        category: str | None = None
        last_card: Card | None = None

        for item in read_blocks(lines):
            if isinstance(item, ChoiceBlock):
                result.definitions += 1
                last_card = self._choice_card(item, category, result)
                if last_card is not None:
                    result.cards.append(last_card)
                continue

            line = item
            if line.kind is LineKind.COMMENT:
                if last_card is not None and not self._apply_comment(last_card, line.text):
                    last_card = None
                continue
            last_card = None

            if line.kind is LineKind.TITLE:
                if not line.text:
                    self._error(result, "Title cannot be empty", line)
                    continue
                if result.title is None:
                    result.title = line.text
                if hash_categories:
                    category = line.text
                    self._add_category(result, category)
            elif line.kind is LineKind.CATEGORY:
                if not line.text:
                    self._error(result, "Category name cannot be empty", line)
                    continue
                category = line.text
                self._add_category(result, category)
            elif line.kind is LineKind.QUESTION_ANSWER:
                result.definitions += 1
                last_card = self._question_answer_card(line, category, result)
                if last_card is not None:
                    result.cards.append(last_card)
            elif line.kind is LineKind.STEM:
                # a stem that opened no block still counts as a definition
                result.definitions += 1
            elif line.kind is LineKind.OPTION:
                self._error(result, "Option line without a question above it", line)
            elif line.kind is LineKind.ANSWER:
                self._error(result, "Correct answer line without a question above it", line)
            elif line.kind is LineKind.INDENTED:
                self._warn(result, f"Unrecognized indented line: '{line.text}'", line)
            elif line.kind is LineKind.TEXT:
                self._warn(result, f"Unrecognized line format: '{line.text}'", line)

        return result

    def _question_answer_card(self, line: Line, category: str | None,
                              result: ParseResult) -> Card | None:
        limit = self.settings["max_text_length"]
        if line.separators > 1:
            self._warn(result, "Multiple '::' separators found; only the first one is used", line)
        if not line.question:
            self._error(result, "Question cannot be empty", line)
        elif len(line.question) > limit:
            self._warn(result, f"Question is longer than {limit} characters", line)
        if not line.answer:
            self._error(result, "Answer cannot be empty", line)
        elif len(line.answer) > limit:
            self._warn(result, f"Answer is longer than {limit} characters", line)
        if not line.question or not line.answer:
            return None

        is_true_false = line.answer.lower() in ("true", "false")
        return Card(
            id=self.id_factory(),
            front=line.question,
            back=line.answer,
            type=CardType.TRUE_FALSE if is_true_false else CardType.SIMPLE,
            category=category,
            metadata=CardMetadata(difficulty="easy"),
            line=line.number,
        )

    def _choice_card(self, block: ChoiceBlock, category: str | None,
                     result: ParseResult) -> Card | None:
        stem = block.stem
        if not stem.text:
            self._error(result, "Card content cannot be empty", stem)
            return None
        if not block.options:
            self._error(result, f"Invalid card format: '{stem.text}' has no options", stem)
            result.diagnostics.append(Diagnostic(Severity.INFO, EXPECTED_CHOICE_SYNTAX, stem.number))
            return None

        options = []
        for line in block.options:
            if line.text:
                options.append(CardOption(line.text))
            else:
                self._warn(result, "Empty option ignored", line)

        if block.answer is None or not block.answer.text:
            self._error(result, "Multiple choice question is missing a correct answer "
                                "(add a line like '  > Option')", stem)
        min_options = self.settings["min_options"]
        max_options = self.settings["max_options"]
        if len(options) < min_options:
            self._error(result, f"Multiple choice questions need at least {min_options} options", stem)
        elif len(options) > max_options:
            self._warn(result, f"Multiple choice question has more than {max_options} options", stem)
        if block.answer is None or not block.answer.text or len(options) < 2:
            return None

        correct = block.answer.text
        match = next((o for o in options if o.text == correct), None)
        if match is None:
            folded = correct.strip().lower()
            near = next((o for o in options if o.text.strip().lower() == folded), None)
            if near is not None:
                self._warn(result, f"Correct answer '{correct}' differs from option "
                                   f"'{near.text}' only in case or spacing", block.answer)
            else:
                self._warn(result, f"Correct answer '{correct}' does not match any option",
                           block.answer)
            match = CardOption(correct)
            options.append(match)
        match.is_correct = True

        return Card(
            id=self.id_factory(),
            front=stem.text,
            back=match.text,
            type=CardType.MULTIPLE_CHOICE,
            category=category,
            options=options,
            metadata=CardMetadata(difficulty="medium"),
            line=stem.number,
        )

    @staticmethod
    def _apply_comment(card: Card, comment: str) -> bool:
        """Attach a ``Key: value`` comment to the card. False if not metadata."""
        key, sep, value = comment.partition(":")
        if not sep:
            return False
        key = key.strip().lower()
        value = value.strip()
        if key == "hint":
            card.metadata.hint = value
        elif key == "explanation":
            card.metadata.explanation = value
        elif key == "difficulty":
            if value.lower() in _DIFFICULTIES:
                card.metadata.difficulty = value.lower()
        elif key == "tags":
            card.metadata.tags = [t.strip() for t in value.split(",") if t.strip()]
        else:
            return False
        return True

    @staticmethod
    def _add_category(result: ParseResult, category: str):
        if category not in result.categories:
            result.categories.append(category)

    @staticmethod
    def _error(result: ParseResult, message: str, line: Line):
        result.diagnostics.append(Diagnostic(Severity.ERROR, message, line.number))

    @staticmethod
    def _warn(result: ParseResult, message: str, line: Line):
        result.diagnostics.append(Diagnostic(Severity.WARNING, message, line.number))


def parse(markdown: str) -> list[Card]:
    return Parser().parse(markdown)
