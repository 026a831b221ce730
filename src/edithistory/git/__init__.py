"""Git integration for extracting the edit history of individual files."""

from .errors import (
    HistoryError,
    NoWorkingTreeError,
    PathOutsideRepositoryError,
    PathResolutionError,
    RepositoryNotFoundError,
)
from .history import Edit, extract_history, resolve_repository_path
from .index import HistoryIndex, extract_histories

__all__ = [
    "Edit",
    "extract_history",
    "resolve_repository_path",
    "HistoryIndex",
    "extract_histories",
    "HistoryError",
    "RepositoryNotFoundError",
    "NoWorkingTreeError",
    "PathResolutionError",
    "PathOutsideRepositoryError",
]
