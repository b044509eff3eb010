"""Review carry-over: keep review history for cards that survive a re-parse.

Every parse assigns fresh card ids, so review records keyed by the old ids
would be orphaned by any edit. Cards are matched across parses by a hash of
their content; matched cards keep their history under the new id, edited or
new cards start fresh, and records of removed cards are dropped.
"""

import dataclasses
import hashlib
import json

from flashplay.models import Card, CardReview


def content_hash(content: dict) -> str:
    return hashlib.sha256(json.dumps(content, sort_keys=True).encode()).hexdigest()


def card_fingerprint(card: Card) -> str:
    """Hash of what the learner is quizzed on. Category and metadata are ignored."""
    return content_hash({
        "front": card.front,
        "back": card.back,
        "type": card.type.value,
        "options": [[o.text, o.is_correct] for o in card.options or []],
    })


def carry_over_reviews(old_cards: list[Card], new_cards: list[Card],
                       reviews: dict[str, CardReview]
                       ) -> tuple[dict[str, CardReview], dict]:
    """Re-key reviews from ``old_cards`` ids to matching ``new_cards`` ids.

    Returns (reviews keyed by new card id, stats). Identical cards are paired
    in document order.
    """
    stats = {"new": 0, "unchanged": 0, "deleted": 0}

    old_by_hash: dict[str, list[str]] = {}
    for card in old_cards:
        old_by_hash.setdefault(card_fingerprint(card), []).append(card.id)

    carried: dict[str, CardReview] = {}
    for card in new_cards:
        candidates = old_by_hash.get(card_fingerprint(card))
        if candidates:
            old_id = candidates.pop(0)
            stats["unchanged"] += 1
            if old_id in reviews:
                carried[card.id] = dataclasses.replace(reviews[old_id], card_id=card.id)
        else:
            stats["new"] += 1

    stats["deleted"] = sum(len(ids) for ids in old_by_hash.values())
    return carried, stats
