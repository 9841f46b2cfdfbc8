from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from .. import config
from ..errors import ValidationError
from ..store import LogStore

logger = logging.getLogger(__name__)

STORED_PART_FIELDS = ("name", "sets_done", "sets_target")


def _stored_parts(parts: list[dict[str, Any]]) -> list[dict[str, Any]]:
    # monthly_cumulative / monthly_target are recomputed on every read.
    return [{field: part[field] for field in STORED_PART_FIELDS} for part in parts]


def _new_part(name: str, sets_target: int) -> dict[str, Any]:
    name = name.strip()
    if not name:
        raise ValidationError("Part name must not be blank")
    if sets_target < 1:
        raise ValidationError("sets_target must be at least 1")
    return {"name": name, "sets_done": 0, "sets_target": sets_target}


def find_entry(store: LogStore, entry_id: int) -> dict[str, Any] | None:
    for entry in store.list_all():
        if entry["id"] == entry_id:
            return entry
    return None


def add_session(
    store: LogStore, *, name: str, sets_target: int, today: date | None = None
) -> None:
    part = _new_part(name, sets_target)
    today = today or datetime.now(ZoneInfo(config.DISPLAY_TIMEZONE)).date()
    store.insert(today.year, today.month, [part])
    logger.info("added session %s-%02d with part %s", today.year, today.month, part["name"])


def add_part(
    store: LogStore, entry: dict[str, Any], *, name: str, sets_target: int
) -> list[dict[str, Any]]:
    part = _new_part(name, sets_target)
    parts = _stored_parts(entry["parts"]) + [part]
    store.update_parts(entry["id"], parts)
    logger.info("added part %s to log %s", part["name"], entry["id"])
    return parts


def adjust_sets(
    store: LogStore, entry: dict[str, Any], part_index: int, delta: int
) -> list[dict[str, Any]]:
    """Shift one part's ``sets_done`` by ``delta`` and persist the full parts list.

    Raises ``ValidationError`` without touching the store when the index is
    unknown or the result would drop below zero.
    """
    parts = _stored_parts(entry["parts"])
    if not 0 <= part_index < len(parts):
        raise ValidationError(f"Log {entry['id']} has no part at index {part_index}")

    sets_done = parts[part_index]["sets_done"] + delta
    if sets_done < 0:
        logger.warning(
            "rejected sets change on log %s part %s: %s%+d",
            entry["id"],
            part_index,
            parts[part_index]["sets_done"],
            delta,
        )
        raise ValidationError("sets_done cannot go below zero")

    parts[part_index] = {**parts[part_index], "sets_done": sets_done}
    store.update_parts(entry["id"], parts)
    return parts
