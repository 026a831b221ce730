"""Exceptions raised while locating a path inside a git working tree."""

from __future__ import annotations


class HistoryError(Exception):
    """Base exception for history extraction errors."""


class RepositoryNotFoundError(HistoryError):
    """No git repository encloses the requested path."""


class NoWorkingTreeError(HistoryError):
    """The enclosing repository is bare and has no checked-out files."""


class PathResolutionError(HistoryError):
    """The path could not be canonicalised (missing, unreadable, looping links)."""


class PathOutsideRepositoryError(HistoryError):
    """The canonical path does not live under the repository's working tree."""
