"""SM-2 Scheduler: SuperMemo 2 variant with a time-on-card adjustment.

Per-card state lives in CardReview records owned by the caller; every
operation here is a pure function of its inputs and ``now``.

    quality < 3   lapse: interval 1, repetitions 0, ease -0.2, lapses +1
    quality >= 3  ease += 0.1 - (5-q) * (0.08 + (5-q) * 0.02)
                  interval 1, then 6, then round(interval * ease)
                  answered in < 5s: interval * 0.8; in > 30s: interval * 1.2
"""

import dataclasses
import math
from datetime import datetime, timedelta, timezone

from flashplay.config import DEFAULT_SETTINGS
from flashplay.models import CardReview, RetentionStats, ReviewPerformance


def _clamp_quality(quality) -> int:
    """Clamp a grade to 0..5. NaN counts as 0 and infinities as the nearest bound."""
    if math.isnan(quality):
        return 0
    if math.isinf(quality):
        return 5 if quality > 0 else 0
    return max(0, min(5, int(quality)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def _round(value: float) -> int:
    """Round half up, so 7.5 -> 8 and 2.5 -> 3."""
    return math.floor(value + 0.5)


class Scheduler:
    scheduler_id = "sm2"

    def __init__(self, settings: dict | None = None):
        s = dict(DEFAULT_SETTINGS)
        if settings:
            s.update(settings)
        self.min_ease_factor = float(s["min_ease_factor"])
        self.default_ease_factor = float(s["default_ease_factor"])
        self.lapse_ease_penalty = float(s["lapse_ease_penalty"])
        self.fast_answer_seconds = float(s["fast_answer_seconds"])
        self.slow_answer_seconds = float(s["slow_answer_seconds"])
        self.fast_answer_scale = float(s["fast_answer_scale"])
        self.slow_answer_scale = float(s["slow_answer_scale"])
        self.mastered_interval_days = int(s["mastered_interval_days"])
        self.struggling_ease_factor = float(s["struggling_ease_factor"])
        self.schedule_window_days = int(s["schedule_window_days"])

    def initialize_card(self, card_id: str, now: datetime | None = None) -> CardReview:
        """Fresh review record for a card that has never been reviewed."""
        now = now or _utcnow()
        return CardReview(
            card_id=card_id,
            last_review=now,
            next_review=now + timedelta(days=1),
            interval=1,
            repetitions=0,
            ease_factor=self.default_ease_factor,
            lapses=0,
        )

    def calculate_next_review(self, current: CardReview, performance: ReviewPerformance,
                              now: datetime | None = None) -> CardReview:
        """Return the updated review record after one graded attempt."""
        now = now or _utcnow()
        quality = _clamp_quality(performance.quality)

        if quality < 3:
            return dataclasses.replace(
                current,
                interval=1,
                repetitions=0,
                ease_factor=max(self.min_ease_factor,
                                current.ease_factor - self.lapse_ease_penalty),
                lapses=current.lapses + 1,
                last_review=now,
                next_review=now + timedelta(days=1),
            )

        ease = self._next_ease_factor(current.ease_factor, quality)
        if current.repetitions == 0:
            interval = 1
        elif current.repetitions == 1:
            interval = 6
        else:
            interval = _round(current.interval * ease)

        # Fast answers shorten the gap and slow answers lengthen it.
        if performance.time_spent < self.fast_answer_seconds:
            interval = max(1, _round(interval * self.fast_answer_scale))
        elif performance.time_spent > self.slow_answer_seconds:
            interval = max(1, _round(interval * self.slow_answer_scale))

        return dataclasses.replace(
            current,
            interval=interval,
            repetitions=current.repetitions + 1,
            ease_factor=ease,
            last_review=now,
            next_review=now + timedelta(days=interval),
        )

    def _next_ease_factor(self, ease: float, quality: int) -> float:
        miss = 5 - quality
        return max(self.min_ease_factor, ease + (0.1 - miss * (0.08 + miss * 0.02)))

    def get_due_cards(self, reviews: list[CardReview],
                      now: datetime | None = None) -> list[CardReview]:
        now = _aware(now or _utcnow())
        return [r for r in reviews if _aware(r.next_review) <= now]

    def calculate_retention(self, reviews: list[CardReview]) -> RetentionStats:
        if not reviews:
            return RetentionStats(
                average_ease_factor=self.default_ease_factor,
                average_interval=0,
                mastered_cards=0,
                struggling_cards=0,
                retention_rate=0,
            )
        successful = sum(r.repetitions for r in reviews)
        attempts = successful + sum(r.lapses for r in reviews)
        return RetentionStats(
            average_ease_factor=sum(r.ease_factor for r in reviews) / len(reviews),
            average_interval=sum(r.interval for r in reviews) / len(reviews),
            mastered_cards=sum(1 for r in reviews if r.interval > self.mastered_interval_days),
            struggling_cards=sum(1 for r in reviews if r.ease_factor < self.struggling_ease_factor),
            retention_rate=(successful / attempts) * 100 if attempts else 0,
        )

    def get_review_schedule(self, reviews: list[CardReview], days: int | None = None,
                            now: datetime | None = None) -> dict[str, int]:
        """Reviews falling due on each of the next ``days`` days (UTC), zero-filled."""
        if days is None:
            days = self.schedule_window_days
        today = _aware(now or _utcnow()).astimezone(timezone.utc).date()
        schedule = {(today + timedelta(days=i)).isoformat(): 0 for i in range(days)}
        for review in reviews:
            day = _aware(review.next_review).astimezone(timezone.utc).date().isoformat()
            if day in schedule:
                schedule[day] += 1
        return schedule


_default = Scheduler()


def initialize_card(card_id: str, now: datetime | None = None) -> CardReview:
    return _default.initialize_card(card_id, now)


def calculate_next_review(current: CardReview, performance: ReviewPerformance,
                          now: datetime | None = None) -> CardReview:
    return _default.calculate_next_review(current, performance, now)


def get_due_cards(reviews: list[CardReview], now: datetime | None = None) -> list[CardReview]:
    return _default.get_due_cards(reviews, now)


def calculate_retention(reviews: list[CardReview]) -> RetentionStats:
    return _default.calculate_retention(reviews)


def get_review_schedule(reviews: list[CardReview], days: int | None = None,
                        now: datetime | None = None) -> dict[str, int]:
    return _default.get_review_schedule(reviews, days, now)
