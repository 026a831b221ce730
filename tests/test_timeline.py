from __future__ import annotations

from datetime import datetime, timezone

from edithistory.git import Edit
from edithistory.temporal import format_date, last_modified_time, page_context, published_time

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _edit(day: int | None, summary: str) -> Edit:
    timestamp = datetime(2020, 1, day, tzinfo=timezone.utc) if day is not None else None
    return Edit(timestamp=timestamp, summary=summary, message=f"{summary}\n\nDetails.")


def test_published_and_last_modified_from_history() -> None:
    edits = [_edit(3, "first"), _edit(10, "second"), _edit(20, "third")]

    assert published_time(edits) == datetime(2020, 1, 3, tzinfo=timezone.utc)
    assert last_modified_time(edits) == datetime(2020, 1, 20, tzinfo=timezone.utc)


def test_empty_history_falls_back_to_now() -> None:
    assert published_time([], now=NOW) == NOW
    assert last_modified_time([], now=NOW) == NOW


def test_undated_edits_are_excluded() -> None:
    edits = [_edit(5, "dated"), _edit(None, "undated")]

    assert published_time(edits, now=NOW) == datetime(2020, 1, 5, tzinfo=timezone.utc)
    assert last_modified_time(edits, now=NOW) == datetime(2020, 1, 5, tzinfo=timezone.utc)
    assert published_time([_edit(None, "undated")], now=NOW) == NOW


def test_format_date() -> None:
    assert format_date(datetime(2021, 3, 7, tzinfo=timezone.utc), "%Y-%m-%d") == "2021-03-07"
    assert format_date(None) == ""


def test_page_context() -> None:
    edits = [_edit(3, "first"), _edit(20, "second"), _edit(None, "undated")]

    context = page_context(edits, date_format="%Y-%m-%d", now=NOW)

    assert context == {
        "published_time": "2020-01-03T00:00:00+00:00",
        "last_modified_time": "2020-01-20T00:00:00+00:00",
        "date": "2020-01-03",
        "history": [
            {"date": "2020-01-03", "summary": "first", "message": "first\n\nDetails."},
            {"date": "2020-01-20", "summary": "second", "message": "second\n\nDetails."},
            {"date": "", "summary": "undated", "message": "undated\n\nDetails."},
        ],
    }


def test_page_context_without_history() -> None:
    context = page_context([], date_format="%Y-%m-%d", now=NOW)

    assert context["published_time"] == NOW.isoformat()
    assert context["last_modified_time"] == NOW.isoformat()
    assert context["date"] == "2024-05-01"
    assert context["history"] == []
