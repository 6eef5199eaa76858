from datetime import UTC, datetime

import pytest

from recallkit.domain.errors import CardFileError
from recallkit.infrastructure.card_file import dump_card, load_cards, parse_cards

CARDS_YAML = """
cards:
  - id: apple
    front: apple
    schedule:
      due_date: 2026-01-10T09:00:00+00:00
      interval: 6
      ease: 250
      review_count: 2
      lapse_count: 1
  - id: banana
  - id: cherry
    schedule:
      due_date: "2026-02-01T00:00:00"
      interval: 30
      ease: 270
"""


def test_parse_cards():
    apple, banana, cherry = parse_cards(CARDS_YAML)

    assert apple.card_id == "apple"
    assert apple.front == "apple"
    assert apple.schedule_info.due_date == datetime(2026, 1, 10, 9, tzinfo=UTC)
    assert apple.schedule_info.interval == 6
    assert apple.schedule_info.review_count == 2
    assert apple.schedule_info.lapse_count == 1

    assert banana.schedule_info is None

    # No offset -> UTC
    assert cherry.schedule_info.due_date == datetime(2026, 2, 1, tzinfo=UTC)
    assert cherry.schedule_info.review_count == 0


def test_load_cards_from_file(tmp_path):
    path = tmp_path / "cards.yaml"
    path.write_text(CARDS_YAML, encoding="utf-8")
    assert [c.card_id for c in load_cards(path)] == ["apple", "banana", "cherry"]


def test_missing_file(tmp_path):
    with pytest.raises(CardFileError, match="Cannot read"):
        load_cards(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "text,message",
    [
        ("cards: [", "Invalid YAML"),
        ("other: 1", "top-level 'cards'"),
        ("cards:\n  - front: x", "must be a mapping with an 'id'"),
        ("cards:\n  - id: a\n  - id: a", "Duplicate card id"),
        ("cards:\n  - id: a\n    id: b", "duplicate key"),
        ("cards:\n  - id: a\n    schedule: 3", "must be a mapping"),
        ("cards:\n  - id: a\n    schedule:\n      interval: 3", "missing due_date, ease"),
        (
            "cards:\n  - id: a\n    schedule:\n      due_date: nope\n      interval: 1\n      ease: 250",
            "Card 'a'",
        ),
    ],
)
def test_invalid_files(text, message):
    with pytest.raises(CardFileError, match=message):
        parse_cards(text)


def test_dump_card():
    cards = parse_cards(CARDS_YAML)
    records = [dump_card(c) for c in cards]
    assert records[1] == {"id": "banana"}
    assert records[0]["schedule"]["due_date"] == "2026-01-10T09:00:00+00:00"


def test_scalar_front_is_coerced_to_string():
    (card,) = parse_cards("cards:\n  - id: 7\n    front: 42")
    assert card.card_id == "7"
    assert card.front == "42"


@pytest.mark.parametrize("front", ["[a, b]", "{x: 1}"])
def test_non_scalar_front_rejected(front):
    with pytest.raises(CardFileError, match="'front' must be a string"):
        parse_cards(f"cards:\n  - id: a\n    front: {front}")
