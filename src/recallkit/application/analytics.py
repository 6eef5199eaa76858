"""
Read-only queries over collections of cards.

Pure computation with no I/O. Any object exposing a `schedule_info`
attribute (ScheduleInfo or None) is accepted as a card.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar

from recallkit.application.utils.dates import add_days, ensure_aware, round_half_up, utc_now
from recallkit.domain.constants import MATURE_INTERVAL_DAYS
from recallkit.domain.scheduling.models import CardStatistics, ScheduleInfo


class Schedulable(Protocol):
    schedule_info: ScheduleInfo | None


CardT = TypeVar("CardT", bound=Schedulable)


def _is_due_by(card: Schedulable, cutoff: datetime) -> bool:
    # New cards are always due.
    if card.schedule_info is None:
        return True
    return ensure_aware(card.schedule_info.due_date) <= cutoff


def cards_for_review(cards: Iterable[CardT], now: datetime | None = None) -> list[CardT]:
    """Cards due at `now`, in their original order."""
    cutoff = ensure_aware(now or utc_now())
    return [card for card in cards if _is_due_by(card, cutoff)]


def cards_due_in_days(
    cards: Iterable[Schedulable], days: float, now: datetime | None = None
) -> int:
    """Number of cards that will be due within `days` (new cards always count)."""
    cutoff = add_days(ensure_aware(now or utc_now()), days)
    return sum(1 for card in cards if _is_due_by(card, cutoff))


def due_forecast(
    cards: Sequence[Schedulable], days: int, now: datetime | None = None
) -> list[int]:
    """Cumulative due counts for 0, 1, ..., `days` days ahead."""
    now = ensure_aware(now or utc_now())
    return [cards_due_in_days(cards, day, now=now) for day in range(days + 1)]


def new_cards(cards: Iterable[CardT]) -> list[CardT]:
    return [
        card
        for card in cards
        if card.schedule_info is None or card.schedule_info.review_count == 0
    ]


def learning_cards(cards: Iterable[CardT]) -> list[CardT]:
    return [
        card
        for card in cards
        if card.schedule_info is not None
        and card.schedule_info.review_count > 0
        and card.schedule_info.interval < MATURE_INTERVAL_DAYS
    ]


def mature_cards(cards: Iterable[CardT]) -> list[CardT]:
    return [
        card
        for card in cards
        if card.schedule_info is not None
        and card.schedule_info.interval >= MATURE_INTERVAL_DAYS
    ]


def statistics(cards: Iterable[Schedulable]) -> CardStatistics:
    """
    Partition cards into new / learning / mature and average the scheduled ones.

    Learning and mature are split purely on interval here (< 21 days vs.
    >= 21 days); averages are 0 when nothing has been scheduled yet.
    """
    total = new = learning = mature = 0
    ease_sum = interval_sum = 0

    for card in cards:
        total += 1
        info = card.schedule_info
        if info is None:
            new += 1
            continue

        ease_sum += info.ease
        interval_sum += info.interval
        if info.interval < MATURE_INTERVAL_DAYS:
            learning += 1
        else:
            mature += 1

    scheduled = learning + mature
    return CardStatistics(
        total=total,
        new=new,
        learning=learning,
        mature=mature,
        average_ease=round_half_up(ease_sum / scheduled) if scheduled else 0,
        average_interval=round_half_up(interval_sum / scheduled) if scheduled else 0,
    )
