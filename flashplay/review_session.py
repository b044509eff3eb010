"""ReviewSession: drives one study pass over a deck, independent of any UI."""

import random
import time
import uuid
from datetime import datetime, timezone

from flashplay.content import render_html
from flashplay.models import Card, CardReview, Deck, ReviewPerformance
from flashplay.scheduler import Scheduler, _aware


class ReviewSession:
    """Serves due cards, times each answer and feeds grades to the scheduler.

    ``reviews`` maps card id to CardReview and is updated in place, so the
    caller can persist it after (or during) the session. Cards that were
    reviewed before and are due come first, oldest due date first; cards
    never reviewed follow in deck order (shuffled when the deck asks for it).
    Each grade is also appended to ``review_log`` with the seconds spent on the
    front (None if the card was never flipped) and on the whole card.
    """

    def __init__(self, deck: Deck, reviews: dict[str, CardReview] | None = None,
                 scheduler: Scheduler | None = None, clock=None, seed=None):
        self.deck = deck
        self.reviews = reviews if reviews is not None else {}
        self.scheduler = scheduler or Scheduler()
        self._clock = clock or time.time
        self.session_id = str(uuid.uuid4())
        self.current_card: Card | None = None
        self.undo_stack: list[dict] = []  # stack of {card, previous}
        self.review_log: list[dict] = []
        self.flip_time = None
        self.serve_time = None
        self.reviewed = 0
        self.reviewed_ids: set[str] = set()
        self._new_order = [card.id for card in deck.cards]
        if deck.settings.shuffle_cards:
            random.Random(seed).shuffle(self._new_order)

    def _pending(self, now: datetime | None) -> list[Card]:
        now = _aware(now or datetime.now(timezone.utc))
        by_id = {card.id: card for card in self.deck.cards}
        due = []
        new = []
        for card_id in self._new_order:
            if card_id in self.reviewed_ids:
                continue
            review = self.reviews.get(card_id)
            if review is None:
                new.append(by_id[card_id])
            elif _aware(review.next_review) <= now:
                due.append((_aware(review.next_review), by_id[card_id]))
        due.sort(key=lambda pair: pair[0])
        return [card for _, card in due] + new

    def get_next_card(self, now: datetime | None = None) -> Card | None:
        pending = self._pending(now)
        if not pending:
            self.current_card = None
            return None
        self.current_card = pending[0]
        self.serve_time = self._clock()
        self.flip_time = None
        return self.current_card

    def render_front(self, card: Card) -> str:
        return f"<div>{render_html(card.front)}</div>"

    def flip(self) -> str:
        if not self.current_card:
            raise ValueError("No current card")
        self.flip_time = self._clock()
        return f"<div>{render_html(self.current_card.back)}</div>"

    def grade_current(self, quality: int, hints_used: bool = False,
                      now: datetime | None = None) -> CardReview:
        """Record a 0-5 grade for the current card and return its new review."""
        if not self.current_card:
            raise ValueError("No current card")
        card_id = self.current_card.id
        time_on_front = self.flip_time - self.serve_time if self.flip_time else None
        time_spent = self._clock() - self.serve_time if self.serve_time else 0

        previous = self.reviews.get(card_id)
        current = previous or self.scheduler.initialize_card(card_id, now)
        performance = ReviewPerformance(quality=quality, time_spent=time_spent,
                                        hints_used=hints_used)
        updated = self.scheduler.calculate_next_review(current, performance, now)
        self.reviews[card_id] = updated
        self.review_log.append({
            "card_id": card_id,
            "session_id": self.session_id,
            "grade": quality,
            "time_on_front": time_on_front,
            "time_on_card": time_spent,
        })

        self.reviewed_ids.add(card_id)
        self.undo_stack.append({"card": self.current_card, "previous": previous})
        self.reviewed += 1
        self.current_card = None
        return updated

    def undo(self) -> Card | None:
        """Revert the last grade and make that card current again."""
        if not self.undo_stack:
            return None
        entry = self.undo_stack.pop()
        self.review_log.pop()
        card = entry["card"]
        if entry["previous"] is None:
            self.reviews.pop(card.id, None)
        else:
            self.reviews[card.id] = entry["previous"]
        self.reviewed_ids.discard(card.id)
        self.reviewed -= 1
        self.current_card = card
        self.serve_time = self._clock()
        self.flip_time = None
        return card

    def remaining_count(self, now: datetime | None = None) -> int:
        return len(self._pending(now))
