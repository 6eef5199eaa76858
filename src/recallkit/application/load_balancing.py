"""
Histogram-guided fuzzing of review intervals.

Instead of random jitter, each interval is nudged within a small window
toward the day that currently has the fewest cards scheduled on it.
"""

import math
from datetime import datetime

from recallkit.application.utils.dates import add_days, day_key
from recallkit.domain.constants import (
    LONG_FUZZ_FACTOR,
    MEDIUM_FUZZ_FACTOR,
    MEDIUM_INTERVAL_DAYS,
    SHORT_INTERVAL_DAYS,
)
from recallkit.domain.scheduling.histogram import DueDateHistogram


def fuzz_range(interval: float, max_fuzzing_days: float) -> float:
    """
    How many days either side of `interval` may be considered.

    <= 21 days -> 1 day; <= 180 days -> 5%; longer -> 2.5% (never below 1),
    always capped at max_fuzzing_days.
    """
    if interval <= SHORT_INTERVAL_DAYS:
        spread = 1.0
    elif interval <= MEDIUM_INTERVAL_DAYS:
        spread = max(1.0, interval * MEDIUM_FUZZ_FACTOR)
    else:
        spread = max(1.0, interval * LONG_FUZZ_FACTOR)
    return min(spread, max_fuzzing_days)


def balance_interval(
    interval: float,
    histogram: DueDateHistogram,
    now: datetime,
    max_fuzzing_days: float,
    maximum: float = math.inf,
) -> float:
    """
    Return the candidate interval whose due day is least loaded.

    Offsets are scanned from -range to +range in steps of one day and only a
    strictly smaller count replaces the current best, so ties go to the
    shorter interval. Candidates outside [1, maximum] are never chosen.
    """
    spread = fuzz_range(interval, max_fuzzing_days)

    best = interval
    fewest = math.inf
    offset = -spread
    while offset <= spread:
        candidate = interval + offset
        offset += 1
        if candidate < 1 or candidate > maximum:
            continue

        load = histogram.count(day_key(add_days(now, candidate)))
        if load < fewest:
            fewest = load
            best = candidate

    return best
