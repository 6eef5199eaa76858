"""
Review sessions: walk a learner through due cards and merge each outcome
back into the card's stored schedule.

The scheduler only returns interval, ease and due date. Counting reviews
and lapses is the caller's job, and this module is that caller.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime

from ulid import ULID

from recallkit.application.scheduler import Scheduler
from recallkit.application.utils.dates import utc_now
from recallkit.domain.errors import CardNotInSessionError, NoActiveSessionError
from recallkit.domain.scheduling.models import (
    Card,
    ReviewOutcome,
    ReviewResponse,
    ScheduleInfo,
)

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return f"review_{ULID()}"


def apply_outcome(
    current: ScheduleInfo | None,
    outcome: ReviewOutcome,
    response: ReviewResponse,
) -> ScheduleInfo:
    """
    Merge a scheduler outcome into the stored schedule.

    Every review bumps review_count; a Hard response also counts as a lapse.
    """
    review_count = current.review_count if current else 0
    lapse_count = current.lapse_count if current else 0
    if ReviewResponse(response) is ReviewResponse.HARD:
        lapse_count += 1

    return ScheduleInfo(
        due_date=outcome.due_date,
        interval=outcome.interval,
        ease=outcome.ease,
        review_count=review_count + 1,
        lapse_count=lapse_count,
        delayed_days=outcome.delayed_days,
    )


@dataclass
class ReviewSession:
    """State of one pass through a list of cards."""

    session_id: str
    started_at: datetime
    cards: list[Card]
    completed: list[Card] = field(default_factory=list)
    position: int = 0

    @property
    def current_card(self) -> Card | None:
        if self.position >= len(self.cards):
            return None
        return self.cards[self.position]

    @property
    def remaining(self) -> list[Card]:
        return self.cards[self.position :]

    @property
    def is_complete(self) -> bool:
        return self.position >= len(self.cards)

    @property
    def progress(self) -> int:
        """Percent of cards reviewed (100 for an empty session)."""
        if not self.cards:
            return 100
        return round(self.position / len(self.cards) * 100)


@dataclass
class ReviewStep:
    """Result of processing one review inside a session."""

    updated_card: Card
    next_card: Card | None
    session_complete: bool


class ReviewSessionService:
    """
    Application service driving review sessions.

    Holds at most one active session; every review goes through the shared
    Scheduler so load balancing sees the whole session.
    """

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._session: ReviewSession | None = None

    @property
    def current_session(self) -> ReviewSession | None:
        return self._session

    def start(self, due_cards: list[Card], max_cards: int | None = None) -> ReviewSession:
        """
        Start a new session, replacing any active one.

        Args:
            due_cards: Cards to review, in order (see analytics.cards_for_review).
            max_cards: Optional cap on session length.
        """
        cards = list(due_cards[:max_cards] if max_cards else due_cards)
        self._session = ReviewSession(
            session_id=generate_session_id(),
            started_at=utc_now(),
            cards=cards,
        )
        logger.info(f"Started review session {self._session.session_id} with {len(cards)} cards")
        return self._session

    def process_review(self, card: Card, response: ReviewResponse) -> ReviewStep:
        """
        Schedule `card` and advance the session.

        Raises:
            NoActiveSessionError: If no session has been started.
            CardNotInSessionError: If `card` is not the session's current card.
        """
        session = self._session
        if session is None:
            raise NoActiveSessionError("No active review session")

        expected = session.current_card
        if expected is None or expected.card_id != card.card_id:
            raise CardNotInSessionError(card.card_id, expected.card_id if expected else None)

        updated = self.set_card_difficulty(card, response)

        session.completed.append(updated)
        session.position += 1
        next_card = session.current_card
        complete = session.is_complete

        if complete:
            self.end()

        return ReviewStep(updated_card=updated, next_card=next_card, session_complete=complete)

    def set_card_difficulty(self, card: Card, response: ReviewResponse) -> Card:
        """
        Schedule `card` outside any session, e.g. for bulk edits.

        Counters are merged exactly as in process_review; the active session,
        if any, is left untouched.
        """
        outcome = self._scheduler.schedule(response, card.schedule_info)
        return dataclasses.replace(
            card, schedule_info=apply_outcome(card.schedule_info, outcome, response)
        )

    def reset_card(self, card: Card) -> Card:
        """Forget the card's schedule so it is treated as new again."""
        logger.debug(f"Reset schedule of card {card.card_id}")
        return dataclasses.replace(card, schedule_info=None)

    def end(self) -> ReviewSession | None:
        """Close the active session and return it (None if there was none)."""
        session = self._session
        self._session = None
        if session is not None:
            logger.info(
                f"Ended review session {session.session_id}: "
                f"{len(session.completed)}/{len(session.cards)} reviewed"
            )
        return session
