import copy
from zoneinfo import ZoneInfo

import pytest

from app.services.view import (
    DEFAULT_MONTHLY_TARGET,
    build_view,
    derive_view,
    format_label,
    month_session_number,
    sort_chronologically,
)

SEOUL = ZoneInfo("Asia/Seoul")
UTC = ZoneInfo("UTC")


def _entry(entry_id, created_at, *names, year=2024, month=1):
    return {
        "id": entry_id,
        "created_at": created_at,
        "year": year,
        "month": month,
        "parts": [{"name": name, "sets_done": 0, "sets_target": 5} for name in names],
    }


@pytest.fixture
def chest_entries():
    return [
        _entry(1, "2024-01-05T03:00:00Z", "가슴"),
        _entry(2, "2024-01-12T03:00:00Z", "가슴"),
        _entry(3, "2024-02-03T03:00:00Z", "가슴", month=2),
    ]


def test_derive_view_counts_per_month_and_returns_newest_first(chest_entries):
    view = derive_view(chest_entries, SEOUL)

    assert [entry["id"] for entry in view] == [3, 2, 1]
    assert [entry["parts"][0]["monthly_cumulative"] for entry in view] == [1, 2, 1]
    assert {entry["parts"][0]["monthly_target"] for entry in view} == {5}


def test_format_label_for_first_session_of_history(chest_entries):
    view = derive_view(chest_entries, SEOUL)
    ordered = sort_chronologically(chest_entries)

    assert format_label(ordered, view[2], 2, SEOUL) == "2024년 1회차 1월 5/20회 [가슴] (1/5회)"
    assert format_label(ordered, view[0], 0, SEOUL) == "2024년 3회차 2월 3/20회 [가슴] (1/5회)"


def test_derive_view_ignores_input_order(chest_entries):
    shuffled = [chest_entries[1], chest_entries[2], chest_entries[0]]

    assert derive_view(shuffled, SEOUL) == derive_view(chest_entries, SEOUL)


def test_derive_view_counts_each_part_name_independently():
    entries = [
        _entry(1, "2024-03-01T01:00:00Z", "등", "이두"),
        _entry(2, "2024-03-02T01:00:00Z", "가슴", "삼두"),
        _entry(3, "2024-03-04T01:00:00Z", "등", "이두"),
        _entry(4, "2024-03-06T01:00:00Z", "등", "하체"),
    ]

    view = derive_view(entries, SEOUL)
    by_id = {entry["id"]: entry["parts"] for entry in view}

    assert [p["monthly_cumulative"] for p in by_id[1]] == [1, 1]
    assert [p["monthly_cumulative"] for p in by_id[3]] == [2, 2]
    assert [p["monthly_cumulative"] for p in by_id[4]] == [3, 1]
    assert [p["monthly_target"] for p in by_id[4]] == [5, 4]
    assert [p["monthly_target"] for p in by_id[2]] == [5, 3]


def test_derive_view_counts_repeated_part_within_one_session():
    view = derive_view([_entry(1, "2024-03-01T01:00:00Z", "어깨", "어깨")], SEOUL)

    assert [p["monthly_cumulative"] for p in view[0]["parts"]] == [1, 2]


def test_unknown_part_uses_fallback_target():
    view = derive_view([_entry(1, "2024-03-01T01:00:00Z", "코어")], SEOUL)

    assert view[0]["parts"][0]["monthly_target"] == DEFAULT_MONTHLY_TARGET


def test_month_key_comes_from_created_at_not_stored_fields():
    # 16:00 UTC on Jan 31 is already Feb 1 in Seoul; stored fields still say January.
    entries = [
        _entry(1, "2024-01-20T03:00:00Z", "가슴", month=1),
        _entry(2, "2024-01-31T16:00:00Z", "가슴", month=1),
    ]

    seoul_view = derive_view(entries, SEOUL)
    utc_view = derive_view(entries, UTC)

    assert [e["parts"][0]["monthly_cumulative"] for e in seoul_view] == [1, 1]
    assert [e["parts"][0]["monthly_cumulative"] for e in utc_view] == [2, 1]


def test_naive_timestamps_are_read_as_utc():
    entries = [_entry(1, "2024-01-31T16:00:00", "등")]
    view = derive_view(entries, SEOUL)

    assert format_label(entries, view[0], 0, SEOUL).startswith("2024년 1회차 2월 1/20회")


def test_derive_view_does_not_mutate_input(chest_entries):
    before = copy.deepcopy(chest_entries)
    derive_view(chest_entries, SEOUL)

    assert chest_entries == before
    assert "monthly_cumulative" not in chest_entries[0]["parts"][0]


def test_format_label_is_deterministic_and_joins_parts():
    entries = [
        _entry(10, "2024-05-02T00:30:00Z", "등", "이두"),
        _entry(11, "2024-05-09T00:30:00Z", "하체"),
    ]
    view = derive_view(entries, SEOUL)

    first = format_label(entries, view[1], 1, SEOUL)
    assert first == "2024년 1회차 5월 2/20회 [등] (1/5회) [이두] (1/3회)"
    assert format_label(entries, view[1], 1, SEOUL) == first


def test_month_session_number_counts_within_calendar_month(chest_entries):
    assert month_session_number(chest_entries, chest_entries[0], SEOUL) == 1
    assert month_session_number(chest_entries, chest_entries[1], SEOUL) == 2
    assert month_session_number(chest_entries, chest_entries[2], SEOUL) == 1


def test_month_session_number_rejects_unknown_entry(chest_entries):
    stranger = _entry(99, "2024-01-07T03:00:00Z", "등")

    with pytest.raises(ValueError):
        month_session_number(chest_entries, stranger, SEOUL)


def test_build_view_adds_labels_and_session_numbers(chest_entries):
    view = build_view(chest_entries, SEOUL)

    assert [item["session_number"] for item in view] == [3, 2, 1]
    assert [item["month_session"] for item in view] == [1, 2, 1]
    assert view[1]["label"] == "2024년 2회차 1월 12/20회 [가슴] (2/5회)"


def test_build_view_of_empty_history_is_empty():
    assert build_view([], SEOUL) == []
