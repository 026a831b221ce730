"""Published / last-modified times and template context for a page."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..config import DEFAULT_DATE_FORMAT
from ..git.history import Edit


def _dated(edits: Iterable[Edit]) -> List[datetime]:
    return [edit.timestamp for edit in edits if edit.timestamp is not None]


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def published_time(edits: Iterable[Edit], now: Optional[datetime] = None) -> datetime:
    """Return the earliest edit time, or ``now`` when nothing is dated."""

    return min(_dated(edits), default=_now(now))


def last_modified_time(edits: Iterable[Edit], now: Optional[datetime] = None) -> datetime:
    """Return the latest edit time, or ``now`` when nothing is dated."""

    return max(_dated(edits), default=_now(now))


def format_date(value: Optional[datetime], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    if value is None:
        return ""
    return value.strftime(date_format)


def page_context(
    edits: List[Edit],
    date_format: str = DEFAULT_DATE_FORMAT,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the values a page template needs from a file's history.

    Parameters
    ----------
    edits:
        Edit records, oldest first, as returned by ``extract_history``.
    date_format:
        ``strftime`` pattern for the human readable dates.
    now:
        Time used for both ends of the timeline when no edit is dated.
        Defaults to the current UTC time.

    Returns
    -------
    Dictionary with ``published_time`` and ``last_modified_time`` as RFC 3339
    strings, ``date`` (the published time formatted with ``date_format``) and
    ``history``, a list of ``{"date", "summary", "message"}`` entries.
    """

    current = _now(now)
    published = published_time(edits, current)
    last_modified = last_modified_time(edits, current)
    return {
        "published_time": published.isoformat(),
        "last_modified_time": last_modified.isoformat(),
        "date": format_date(published, date_format),
        "history": [
            {
                "date": format_date(edit.timestamp, date_format),
                "summary": edit.summary,
                "message": edit.message,
            }
            for edit in edits
        ],
    }
