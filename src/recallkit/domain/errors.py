"""Exceptions raised by recallkit outside the (total) scheduling core."""


class RecallkitError(Exception):
    """Base class for recallkit errors."""


class NoActiveSessionError(RecallkitError):
    """A review was submitted while no review session is running."""


class CardNotInSessionError(RecallkitError):
    """A review was submitted for a card other than the session's current card."""

    def __init__(self, card_id: str, expected: str | None):
        self.card_id = card_id
        self.expected = expected
        super().__init__(f"Card {card_id!r} is not the current card (expected {expected!r})")


class CardFileError(RecallkitError):
    """A card records file could not be read or has an invalid shape."""
