"""Per-scheduler count of cards already assigned to each calendar day."""

from collections import Counter
from collections.abc import Iterator
from datetime import date


class DueDateHistogram:
    """
    Mapping of calendar date -> number of cards scheduled onto it.

    Lives as long as the owning Scheduler and is never persisted. Not
    thread-safe: one scheduling call must finish (including its increment)
    before the next starts.
    """

    def __init__(self) -> None:
        self._counts: Counter[date] = Counter()

    def count(self, day: date) -> int:
        return self._counts.get(day, 0)

    def increment(self, day: date) -> int:
        self._counts[day] += 1
        return self._counts[day]

    def clear(self) -> None:
        self._counts.clear()

    def items(self) -> Iterator[tuple[date, int]]:
        return iter(sorted(self._counts.items()))

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, day: object) -> bool:
        return day in self._counts
