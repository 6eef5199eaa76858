"""
Spaced-repetition scheduler.

Turns a learner's response plus the card's prior schedule state into the
next interval, ease and due date. The only state it keeps is the due-date
histogram used for load balancing.
"""

import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime

from recallkit.application.load_balancing import balance_interval
from recallkit.application.utils.dates import (
    add_days,
    day_key,
    ensure_aware,
    round_half_up,
    utc_now,
    whole_days_between,
)
from recallkit.domain.constants import EASE_STEP, MAXIMUM_EASE, SECOND_REVIEW_INTERVAL
from recallkit.domain.scheduling.histogram import DueDateHistogram
from recallkit.domain.scheduling.models import (
    ReviewOutcome,
    ReviewResponse,
    ScheduleInfo,
    SchedulerSettings,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class Scheduler:
    """
    Computes review schedules.

    Not thread-safe: concurrent sessions sharing one instance must serialize
    their calls so histogram reads and writes stay consistent.
    """

    def __init__(
        self,
        settings: SchedulerSettings | None = None,
        clock: Clock | None = None,
    ):
        """
        Args:
            settings: Algorithm tuning; defaults are used if not provided.
            clock: Zero-argument callable returning the current aware datetime.
        """
        self._settings = settings or SchedulerSettings()
        self._clock = clock or utc_now
        self._histogram = DueDateHistogram()

    @property
    def settings(self) -> SchedulerSettings:
        return self._settings

    @property
    def histogram(self) -> DueDateHistogram:
        return self._histogram

    def update_settings(self, **changes) -> SchedulerSettings:
        """
        Replace the settings with a copy carrying `changes`. The histogram is kept.

        Raises:
            TypeError: If a change names an unknown setting.
            ValueError: If the resulting settings are out of range; the
                current settings stay in place.
        """
        self._settings = dataclasses.replace(self._settings, **changes)
        logger.debug(f"Scheduler settings updated: {changes}")
        return self._settings

    def clear_histogram(self) -> None:
        self._histogram.clear()

    def schedule(
        self,
        response: ReviewResponse,
        current: ScheduleInfo | None = None,
    ) -> ReviewOutcome:
        """
        Compute the next schedule for a card.

        Args:
            response: The learner's answer.
            current: The card's stored schedule, or None for a new card.

        Returns:
            ReviewOutcome with rounded interval/ease and the exact due date.
        """
        response = ReviewResponse(response)
        now = ensure_aware(self._clock())
        settings = self._settings
        if current is None:
            current = ScheduleInfo.new(now, settings)

        delayed_days = max(0, whole_days_between(current.due_date, now))
        ease, interval = self._grow(response, current, delayed_days)

        # Fixed onboarding curve before the ease formula takes over.
        if current.review_count == 0:
            interval = settings.initial_interval
        elif current.review_count == 1 and response is not ReviewResponse.HARD:
            interval = SECOND_REVIEW_INTERVAL

        interval = min(interval, settings.maximum_interval)
        planned = interval

        if settings.load_balance:
            interval = balance_interval(
                interval,
                self._histogram,
                now,
                settings.max_fuzzing_days,
                maximum=settings.maximum_interval,
            )

        due_date = add_days(now, interval)
        self._histogram.increment(day_key(due_date))

        logger.debug(
            f"Scheduled {response.value}: interval {current.interval} -> {interval:.2f} "
            f"(planned {planned:.2f}, delayed {delayed_days}d), ease {current.ease} -> {ease}, "
            f"due {due_date.isoformat()}"
        )

        return ReviewOutcome(
            interval=round_half_up(interval),
            ease=round_half_up(ease),
            due_date=due_date,
            delayed_days=delayed_days,
        )

    def _grow(
        self, response: ReviewResponse, current: ScheduleInfo, delayed_days: int
    ) -> tuple[float, float]:
        """Ease and raw interval for a response, before overrides and caps."""
        settings = self._settings
        if response is ReviewResponse.EASY:
            ease = min(MAXIMUM_EASE, current.ease + EASE_STEP)
            interval = (current.interval + delayed_days) * ease * settings.easy_bonus / 100
        elif response is ReviewResponse.GOOD:
            ease = current.ease
            interval = (current.interval + delayed_days / 2) * ease / 100
        else:
            ease = max(settings.minimum_ease, current.ease - EASE_STEP)
            interval = (current.interval + delayed_days / 4) * settings.hard_penalty
        return ease, max(1.0, interval)
