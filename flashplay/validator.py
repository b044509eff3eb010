"""Deck markdown validation: line-numbered diagnostics used to gate saves."""

from flashplay.config import parse_frontmatter
from flashplay.models import Severity, ValidationResult
from flashplay.parser import Parser


def validate(markdown: str, parser: Parser | None = None) -> ValidationResult:
    """Check a deck document and report every problem found in one pass.

    Line-level diagnostics come from the parser's grammar pass. The number of
    card definitions it saw is then checked against the cards ``parse()``
    actually returns, so a card that silently fails to materialize is still
    reported.
    """
    parser = parser or Parser()
    result = ValidationResult()

    if not markdown or not markdown.strip():
        result.add(Severity.ERROR, "Markdown content is empty")
        return result

    document = parser.parse_document(markdown)
    result.errors.extend(document.diagnostics)
    if any(d.severity is Severity.ERROR for d in document.diagnostics):
        result.is_valid = False
    result.category_count = len(document.categories)

    meta, _body = parse_frontmatter(markdown)
    if document.title is None and not meta.get("title"):
        result.add(Severity.WARNING, 'Consider adding a title with "# Title" format')

    if document.definitions == 0:
        result.add(Severity.ERROR,
                   'No flashcards found. Add cards using "Question :: Answer" format')

    cards = parser.parse(markdown)
    result.card_count = len(cards)
    if document.definitions:
        if not cards:
            result.add(Severity.ERROR, "Parser could not extract any valid cards from the markdown")
        elif len(cards) != document.definitions:
            result.add(Severity.WARNING,
                       f"Expected {document.definitions} cards but parser found {len(cards)}. "
                       "Some cards may have issues.")

    if result.is_valid and not result.errors:
        summary = f"Valid markdown with {result.card_count} cards"
        if result.category_count:
            summary += f" in {result.category_count} categories"
        result.add(Severity.INFO, summary)
    return result
