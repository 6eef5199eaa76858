import os
from datetime import UTC, datetime, timedelta

import pytest

from recallkit.domain.scheduling.models import Card, ScheduleInfo

NOW = datetime(2026, 1, 15, 9, 0, tzinfo=UTC)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Frozen clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def make_card():
    """Builds a Card; pass due_in (days from NOW) to give it a schedule."""

    def _make(card_id, due_in=None, interval=1, ease=250, review_count=1, lapse_count=0):
        info = None
        if due_in is not None:
            info = ScheduleInfo(
                due_date=NOW + timedelta(days=due_in),
                interval=interval,
                ease=ease,
                review_count=review_count,
                lapse_count=lapse_count,
            )
        return Card(card_id=card_id, front=card_id, schedule_info=info)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears RECALLKIT_* env vars."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("RECALLKIT_"):
            monkeypatch.delenv(key)
    return home
