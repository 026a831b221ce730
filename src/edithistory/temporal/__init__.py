"""Temporal metadata derived from a file's edit history."""

from .timeline import format_date, last_modified_time, page_context, published_time

__all__ = ["format_date", "last_modified_time", "page_context", "published_time"]
