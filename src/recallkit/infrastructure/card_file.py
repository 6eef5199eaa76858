"""
Read-only loader for YAML card records.

Expected shape:

    cards:
      - id: apple
        front: apple
        schedule:            # omitted for new cards
          due_date: 2026-10-01T09:00:00+00:00
          interval: 6
          ease: 250
          review_count: 2
          lapse_count: 0
"""

import dataclasses
import logging
from datetime import UTC
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.constructor

from recallkit.domain.errors import CardFileError
from recallkit.domain.scheduling.models import Card, ScheduleInfo

logger = logging.getLogger(__name__)

REQUIRED_SCHEDULE_KEYS = ("due_date", "interval", "ease")


class UniqueKeyLoader(yaml.SafeLoader):
    """
    YAML loader that forbids duplicate keys.
    """

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"found duplicate key '{key}'", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep)


def _parse_schedule(card_id: str, raw: Any) -> ScheduleInfo:
    if not isinstance(raw, dict):
        raise CardFileError(f"Card {card_id!r}: 'schedule' must be a mapping")
    missing = [k for k in REQUIRED_SCHEDULE_KEYS if k not in raw]
    if missing:
        raise CardFileError(f"Card {card_id!r}: schedule is missing {', '.join(missing)}")

    try:
        info = ScheduleInfo.from_dict(raw)
    except (TypeError, ValueError) as e:
        raise CardFileError(f"Card {card_id!r}: {e}") from e

    # YAML timestamps without an offset load as naive datetimes
    if info.due_date.tzinfo is None:
        info = dataclasses.replace(info, due_date=info.due_date.replace(tzinfo=UTC))
    return info


def parse_cards(text: str) -> list[Card]:
    """Parse card records from YAML text."""
    try:
        data = yaml.load(text, Loader=UniqueKeyLoader) or {}
    except yaml.YAMLError as e:
        raise CardFileError(f"Invalid YAML: {e}") from e

    records = data.get("cards") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise CardFileError("Expected a top-level 'cards' list")

    cards: list[Card] = []
    seen_ids: set[str] = set()
    for index, record in enumerate(records):
        if not isinstance(record, dict) or "id" not in record:
            raise CardFileError(f"Card #{index + 1} must be a mapping with an 'id'")

        card_id = str(record["id"])
        if card_id in seen_ids:
            raise CardFileError(f"Duplicate card id {card_id!r}")
        seen_ids.add(card_id)

        front = record.get("front")
        if isinstance(front, (dict, list)):
            raise CardFileError(f"Card {card_id!r}: 'front' must be a string")

        schedule = record.get("schedule")
        cards.append(
            Card(
                card_id=card_id,
                front=str(front) if front is not None else None,
                schedule_info=_parse_schedule(card_id, schedule) if schedule is not None else None,
            )
        )

    logger.debug(f"Parsed {len(cards)} cards")
    return cards


def load_cards(path: Path) -> list[Card]:
    """Load card records from a YAML file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CardFileError(f"Cannot read {path}: {e}") from e
    return parse_cards(text)


def dump_card(card: Card) -> dict[str, Any]:
    record: dict[str, Any] = {"id": card.card_id}
    if card.front is not None:
        record["front"] = card.front
    if card.schedule_info is not None:
        record["schedule"] = card.schedule_info.to_dict()
    return record

