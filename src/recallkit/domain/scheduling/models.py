"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from recallkit.domain.constants import (
    DEFAULT_BASE_EASE,
    DEFAULT_EASY_BONUS,
    DEFAULT_HARD_PENALTY,
    DEFAULT_INITIAL_INTERVAL,
    DEFAULT_LOAD_BALANCE,
    DEFAULT_MAX_FUZZING_DAYS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_EASE,
)


class ReviewResponse(str, Enum):
    """The three answer buttons a learner can press. There is no 'again'."""

    EASY = "easy"
    GOOD = "good"
    HARD = "hard"


@dataclass(frozen=True)
class SchedulerSettings:
    """
    Algorithm tuning knobs.

    Attributes:
        base_ease: Ease given to brand-new cards (percent, 250 = 250%).
        easy_bonus: Extra growth multiplier on an Easy response.
        hard_penalty: Shrink multiplier on a Hard response.
        minimum_ease: Floor for ease (percent).
        maximum_interval: Cap on any computed interval (days).
        initial_interval: Interval forced on a card's first review (days).
        load_balance: Whether due dates are nudged toward quiet days.
        max_fuzzing_days: Hard cap on how far load balancing may move a date.
    """

    base_ease: int = DEFAULT_BASE_EASE
    easy_bonus: float = DEFAULT_EASY_BONUS
    hard_penalty: float = DEFAULT_HARD_PENALTY
    minimum_ease: int = DEFAULT_MINIMUM_EASE
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    initial_interval: int = DEFAULT_INITIAL_INTERVAL
    load_balance: bool = DEFAULT_LOAD_BALANCE
    max_fuzzing_days: int = DEFAULT_MAX_FUZZING_DAYS

    def __post_init__(self):
        if self.easy_bonus < 1:
            raise ValueError(f"easy_bonus must be >= 1, got {self.easy_bonus}")
        if not 0 < self.hard_penalty <= 1:
            raise ValueError(f"hard_penalty must be in (0, 1], got {self.hard_penalty}")
        if self.minimum_ease < 1:
            raise ValueError(f"minimum_ease must be >= 1, got {self.minimum_ease}")
        if self.base_ease < self.minimum_ease:
            raise ValueError(
                f"base_ease ({self.base_ease}) must not be below minimum_ease ({self.minimum_ease})"
            )
        if not 1 <= self.initial_interval <= self.maximum_interval:
            raise ValueError(
                f"initial_interval ({self.initial_interval}) must be between 1 and "
                f"maximum_interval ({self.maximum_interval})"
            )
        if self.max_fuzzing_days < 0:
            raise ValueError(f"max_fuzzing_days must be >= 0, got {self.max_fuzzing_days}")


@dataclass(frozen=True)
class ScheduleInfo:
    """
    Persisted schedule state of a single card.

    Attributes:
        due_date: When the card is next due (timezone-aware).
        interval: Days between the last review and due_date. 0 = never scheduled.
        ease: Ease factor in percent.
        review_count: Total reviews so far.
        lapse_count: Number of Hard responses so far.
        delayed_days: Whole days the last review was overdue (informational).
    """

    due_date: datetime
    interval: int
    ease: int
    review_count: int = 0
    lapse_count: int = 0
    delayed_days: int = 0

    @classmethod
    def new(cls, now: datetime, settings: SchedulerSettings) -> "ScheduleInfo":
        """State equivalent to a card that has never been scheduled."""
        return cls(due_date=now, interval=0, ease=settings.base_ease)

    def to_dict(self) -> dict[str, Any]:
        return {
            "due_date": self.due_date.isoformat(),
            "interval": self.interval,
            "ease": self.ease,
            "review_count": self.review_count,
            "lapse_count": self.lapse_count,
            "delayed_days": self.delayed_days,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleInfo":
        due = data["due_date"]
        if not isinstance(due, datetime):
            due = datetime.fromisoformat(str(due))
        return cls(
            due_date=due,
            interval=int(data["interval"]),
            ease=int(data["ease"]),
            review_count=int(data.get("review_count", 0)),
            lapse_count=int(data.get("lapse_count", 0)),
            delayed_days=int(data.get("delayed_days", 0)),
        )


@dataclass(frozen=True)
class ReviewOutcome:
    """
    Result of scheduling one review.

    Deliberately carries no review/lapse counters: the caller owns those
    and merges them when persisting (see review_session.apply_outcome).
    """

    interval: int
    ease: int
    due_date: datetime
    delayed_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "interval": self.interval,
            "ease": self.ease,
            "due_date": self.due_date.isoformat(),
            "delayed_days": self.delayed_days,
        }


@dataclass
class Card:
    """A flashcard as seen by the scheduler. schedule_info is None for new cards."""

    card_id: str
    front: str | None = None
    schedule_info: ScheduleInfo | None = None


@dataclass(frozen=True)
class CardStatistics:
    """Aggregate view over a collection of cards."""

    total: int
    new: int
    learning: int
    mature: int
    average_ease: int
    average_interval: int
