from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from .. import config


MONTHLY_TARGETS = {
    "가슴": 5,  # chest
    "등": 5,  # back
    "하체": 4,  # legs
    "어깨": 3,  # shoulders
    "이두": 3,  # biceps
    "삼두": 3,  # triceps
}
DEFAULT_MONTHLY_TARGET = 5

# Fixed divisor printed in every label; not derived from any target.
SESSIONS_PER_MONTH_LABEL = 20


def monthly_target(part_name: str) -> int:
    return MONTHLY_TARGETS.get(part_name, DEFAULT_MONTHLY_TARGET)


def _display_tz(tz: tzinfo | None) -> tzinfo:
    return tz if tz is not None else ZoneInfo(config.DISPLAY_TIMEZONE)


def created_at_local(entry: dict[str, Any], tz: tzinfo | None = None) -> datetime:
    value = entry["created_at"]
    created = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.astimezone(_display_tz(tz))


def _chronological_key(entry: dict[str, Any]):
    return (created_at_local(entry, timezone.utc), entry.get("id") or 0)


def sort_chronologically(entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(entries, key=_chronological_key)


def derive_view(
    entries: list[dict[str, Any]], tz: tzinfo | None = None
) -> list[dict[str, Any]]:
    """Annotate every part with its running count inside its calendar month.

    The month key comes from ``created_at`` read in the display timezone, not
    from the entry's stored ``year``/``month``. Returns new dicts ordered
    newest first; the input is left untouched.
    """
    tz = _display_tz(tz)
    monthly_counts: dict[tuple[int, int], dict[str, int]] = {}
    annotated = []

    for entry in sort_chronologically(entries):
        created = created_at_local(entry, tz)
        counts = monthly_counts.setdefault((created.year, created.month), {})

        parts = []
        for part in entry.get("parts") or []:
            name = part["name"]
            counts[name] = counts.get(name, 0) + 1
            parts.append(
                {
                    **part,
                    "monthly_cumulative": counts[name],
                    "monthly_target": monthly_target(name),
                }
            )
        annotated.append({**entry, "parts": parts})

    annotated.reverse()
    return annotated


def month_session_number(
    entries: list[dict[str, Any]], target: dict[str, Any], tz: tzinfo | None = None
) -> int:
    """1-based position of ``target`` among the sessions of its own calendar month."""
    tz = _display_tz(tz)
    target_created = created_at_local(target, tz)
    month_key = (target_created.year, target_created.month)

    position = 0
    for entry in sort_chronologically(entries):
        created = created_at_local(entry, tz)
        if (created.year, created.month) != month_key:
            continue
        position += 1
        if entry.get("id") == target.get("id"):
            return position
    raise ValueError(f"Log {target.get('id')} is not part of the given entries")


def format_label(
    entries: list[dict[str, Any]],
    target: dict[str, Any],
    index: int,
    tz: tzinfo | None = None,
) -> str:
    created = created_at_local(target, tz)
    total_sessions = len(entries) - index
    segments = " ".join(
        f"[{part['name']}] ({part['monthly_cumulative']}/{part['monthly_target']}회)"
        for part in target["parts"]
    )
    return (
        f"{created.year}년 {total_sessions}회차 {created.month}월 "
        f"{created.day}/{SESSIONS_PER_MONTH_LABEL}회 {segments}"
    )


def build_view(
    entries: list[dict[str, Any]], tz: tzinfo | None = None
) -> list[dict[str, Any]]:
    tz = _display_tz(tz)
    ordered = sort_chronologically(entries)
    view = []
    for index, entry in enumerate(derive_view(ordered, tz)):
        view.append(
            {
                **entry,
                "label": format_label(ordered, entry, index, tz),
                "session_number": len(ordered) - index,
                "month_session": month_session_number(ordered, entry, tz),
            }
        )
    return view
