from datetime import timedelta

import pytest

from recallkit.application.review_session import (
    ReviewSessionService,
    apply_outcome,
    generate_session_id,
)
from recallkit.application.scheduler import Scheduler
from recallkit.domain.errors import CardNotInSessionError, NoActiveSessionError, RecallkitError
from recallkit.domain.scheduling.models import (
    ReviewOutcome,
    ReviewResponse,
    ScheduleInfo,
    SchedulerSettings,
)


@pytest.fixture
def service(clock):
    return ReviewSessionService(Scheduler(SchedulerSettings(load_balance=False), clock=clock))


@pytest.fixture
def outcome(now):
    return ReviewOutcome(interval=6, ease=250, due_date=now + timedelta(days=6), delayed_days=2)


# --- apply_outcome ---


def test_apply_outcome_to_new_card(outcome):
    info = apply_outcome(None, outcome, ReviewResponse.GOOD)
    assert info.review_count == 1
    assert info.lapse_count == 0
    assert info.interval == 6
    assert info.ease == 250
    assert info.due_date == outcome.due_date
    assert info.delayed_days == 2


def test_apply_outcome_counts_hard_as_lapse(outcome, now):
    current = ScheduleInfo(due_date=now, interval=3, ease=250, review_count=4, lapse_count=1)
    info = apply_outcome(current, outcome, ReviewResponse.HARD)
    assert info.review_count == 5
    assert info.lapse_count == 2


def test_generate_session_id_is_unique():
    first, second = generate_session_id(), generate_session_id()
    assert first.startswith("review_")
    assert first != second


# --- ReviewSessionService ---


def test_start_limits_cards(service, make_card):
    session = service.start([make_card("a"), make_card("b"), make_card("c")], max_cards=2)
    assert [c.card_id for c in session.cards] == ["a", "b"]
    assert session.current_card.card_id == "a"
    assert session.progress == 0
    assert service.current_session is session


def test_process_review_without_session(service, make_card):
    with pytest.raises(NoActiveSessionError):
        service.process_review(make_card("a"), ReviewResponse.GOOD)


def test_process_review_wrong_card(service, make_card):
    service.start([make_card("a"), make_card("b")])
    with pytest.raises(CardNotInSessionError) as exc_info:
        service.process_review(make_card("b"), ReviewResponse.GOOD)
    assert exc_info.value.expected == "a"
    assert isinstance(exc_info.value, RecallkitError)


def test_full_session(service, make_card, now):
    a, b = make_card("a"), make_card("b", due_in=-1, interval=10, review_count=3)
    service.start([a, b])

    step = service.process_review(a, ReviewResponse.EASY)
    assert step.updated_card.card_id == "a"
    assert step.updated_card.schedule_info.review_count == 1
    assert step.updated_card.schedule_info.interval == 1
    assert step.next_card is b
    assert not step.session_complete
    assert service.current_session.progress == 50
    assert a.schedule_info is None  # input card untouched

    step = service.process_review(b, ReviewResponse.HARD)
    info = step.updated_card.schedule_info
    assert info.review_count == 4
    assert info.lapse_count == 1
    assert info.delayed_days == 1
    assert info.interval == 5  # (10 + 0.25) * 0.5 = 5.125
    assert step.next_card is None
    assert step.session_complete
    assert service.current_session is None


def test_end_returns_session(service, make_card):
    session = service.start([make_card("a")])
    assert service.end() is session
    assert service.end() is None


def test_empty_session_is_complete(service):
    session = service.start([])
    assert session.is_complete
    assert session.progress == 100
    assert session.remaining == []


def test_set_card_difficulty_outside_session(service, make_card):
    card = make_card("a", due_in=0, interval=10, review_count=3, lapse_count=1)

    updated = service.set_card_difficulty(card, ReviewResponse.HARD)

    assert updated.card_id == "a"
    assert updated.schedule_info.interval == 5
    assert updated.schedule_info.review_count == 4
    assert updated.schedule_info.lapse_count == 2
    assert card.schedule_info.review_count == 3
    assert service.current_session is None


def test_set_card_difficulty_keeps_session_position(service, make_card):
    a, b = make_card("a"), make_card("b")
    session = service.start([a])

    service.set_card_difficulty(b, ReviewResponse.GOOD)

    assert session.position == 0
    assert session.current_card is a


def test_reset_card(service, make_card):
    card = make_card("a", due_in=3, interval=30, review_count=7)

    reset = service.reset_card(card)

    assert reset.schedule_info is None
    assert reset.front == card.front
    assert card.schedule_info is not None
    assert service.set_card_difficulty(reset, ReviewResponse.GOOD).schedule_info.interval == 1
