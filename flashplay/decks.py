"""Decks: assemble Deck objects from markdown and summarize them by category."""

import uuid
from datetime import datetime, timezone

from flashplay.config import parse_frontmatter
from flashplay.models import CardReview, Deck, DeckSettings
from flashplay.parser import Parser
from flashplay.scheduler import _aware

DEFAULT_DECK_NAME = "Untitled Deck"
STUDY_MODES = ("sequential", "random", "spaced")


def build_deck(markdown: str, name: str | None = None, parser: Parser | None = None,
               now: datetime | None = None, deck_id: str | None = None) -> Deck:
    """Build a deck from its markdown source.

    The name comes from ``name``, the frontmatter ``title``, the document's
    ``# Title`` line, then DEFAULT_DECK_NAME, in that order.
    """
    parser = parser or Parser()
    now = now or datetime.now(timezone.utc)
    meta, _body = parse_frontmatter(markdown)
    document = parser.parse_document(markdown)

    tags = meta.get("tags", [])
    if isinstance(tags, str):
        tags = [t.strip() for t in tags.split(",") if t.strip()]

    return Deck(
        id=deck_id or str(uuid.uuid4()),
        name=name or meta.get("title") or document.title or DEFAULT_DECK_NAME,
        cards=document.cards,
        description=str(meta.get("description", "")),
        emoji=str(meta.get("emoji", "")),
        tags=list(tags),
        created_at=now,
        modified_at=now,
        settings=_deck_settings(meta),
        source=markdown,
    )


def _deck_settings(meta: dict) -> DeckSettings:
    settings = DeckSettings()
    if "shuffle" in meta:
        settings.shuffle_cards = bool(meta["shuffle"])
    if "repeat_incorrect" in meta:
        settings.repeat_incorrect = bool(meta["repeat_incorrect"])
    if meta.get("study_mode") in STUDY_MODES:
        settings.study_mode = meta["study_mode"]
    return settings


def update_deck(deck: Deck, markdown: str, parser: Parser | None = None,
                now: datetime | None = None) -> Deck:
    """Replace a deck's cards by re-parsing edited markdown. Name and id are kept."""
    rebuilt = build_deck(markdown, name=deck.name, parser=parser, now=now, deck_id=deck.id)
    rebuilt.created_at = deck.created_at
    return rebuilt


def summarize_deck(deck: Deck, reviews: dict[str, CardReview],
                   now: datetime | None = None) -> list[dict]:
    """Per-category counts of total, never-reviewed and due cards.

    Uncategorized cards are grouped under the empty name.
    """
    now = _aware(now or datetime.now(timezone.utc))
    stats: dict[str, dict] = {}
    for card in deck.cards:
        name = card.category or ""
        if name not in stats:
            stats[name] = {"name": name, "total": 0, "new": 0, "due": 0}
        stats[name]["total"] += 1
        review = reviews.get(card.id)
        if review is None:
            stats[name]["new"] += 1
        elif _aware(review.next_review) <= now:
            stats[name]["due"] += 1
    return [stats[k] for k in sorted(stats)]
