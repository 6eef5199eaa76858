from datetime import date

from recallkit.domain.scheduling.histogram import DueDateHistogram


def test_missing_day_counts_zero():
    histogram = DueDateHistogram()
    assert histogram.count(date(2026, 1, 1)) == 0
    assert len(histogram) == 0
    assert date(2026, 1, 1) not in histogram


def test_increment_and_clear():
    histogram = DueDateHistogram()
    day = date(2026, 1, 2)

    assert histogram.increment(day) == 1
    assert histogram.increment(day) == 2
    histogram.increment(date(2026, 1, 1))

    assert histogram.count(day) == 2
    assert list(histogram.items()) == [(date(2026, 1, 1), 1), (day, 2)]

    histogram.clear()
    assert len(histogram) == 0
    assert histogram.count(day) == 0
