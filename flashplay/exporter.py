"""Export cards back to deck markdown, Anki TSV, or CSV."""

import csv
import html
import io

from flashplay.models import Card, CardType

FORMATS = ("simple", "full", "anki", "csv")


def export_cards(cards: list[Card], format: str = "simple", title: str | None = None,
                 include_comments: bool = False, line_ending: str = "\n") -> str:
    """Serialize cards. Unknown formats fall back to ``simple``."""
    if format == "anki":
        return line_ending.join(_anki_row(card) for card in cards)
    if format == "csv":
        return _export_csv(cards, line_ending)
    return _export_markdown(cards, title, include_comments or format == "full", line_ending)


def card_to_markdown(card: Card) -> str:
    if card.type is CardType.MULTIPLE_CHOICE and card.options:
        lines = [f"- {card.front}"]
        lines.extend(f"  - {option.text}" for option in card.options)
        correct = card.correct_option
        lines.append(f"  > {correct.text if correct else card.back}")
        return "\n".join(lines)
    return f"{card.front} :: {card.back}"


def _export_markdown(cards: list[Card], title: str | None, with_metadata: bool,
                     line_ending: str) -> str:
    lines = []
    if title:
        lines.extend([f"# {title}", ""])
    for category, group in _group_by_category(cards).items():
        if not group:
            continue
        if category:
            lines.extend([f"## {category}", ""])
        for card in group:
            lines.append(card_to_markdown(card))
            if with_metadata:
                lines.extend(_metadata_comments(card))
            lines.append("")
    return line_ending.join(line for text in lines for line in text.split("\n")).strip()


def _metadata_comments(card: Card) -> list[str]:
    meta = card.metadata
    comments = []
    if meta.hint:
        comments.append(f"<!-- Hint: {meta.hint} -->")
    if meta.explanation:
        comments.append(f"<!-- Explanation: {meta.explanation} -->")
    if meta.difficulty and meta.difficulty != "easy":
        comments.append(f"<!-- Difficulty: {meta.difficulty} -->")
    if meta.tags:
        comments.append(f"<!-- Tags: {', '.join(meta.tags)} -->")
    return comments


def _group_by_category(cards: list[Card]) -> dict[str, list[Card]]:
    """Group cards by category. Uncategorized cards come first, before any header."""
    grouped: dict[str, list[Card]] = {"": []}
    for card in cards:
        grouped.setdefault(card.category or "", []).append(card)
    return grouped


def _full_answer(card: Card) -> str:
    correct = card.correct_option
    return correct.text if correct else card.back


def _anki_escape(text: str) -> str:
    return html.escape(text).replace("\t", " ").replace("\n", "<br>")


def _anki_row(card: Card) -> str:
    tags = " ".join(card.metadata.tags)
    return f"{_anki_escape(card.front)}\t{_anki_escape(_full_answer(card))}\t{tags}"


def _export_csv(cards: list[Card], line_ending: str) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator=line_ending)
    writer.writerow(["Front", "Back", "Type", "Category", "Difficulty", "Tags"])
    for card in cards:
        writer.writerow([
            card.front, _full_answer(card), card.type.value, card.category or "",
            card.metadata.difficulty or "", ";".join(card.metadata.tags),
        ])
    return buf.getvalue().rstrip(line_ending)
