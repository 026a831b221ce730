"""EditHistory package.

Extracts the chronologically ordered list of commits that changed a file in a
git working tree, for use as page metadata by static site builders.
"""

from .git import Edit, HistoryIndex, extract_histories, extract_history

__all__ = [
    "Edit",
    "HistoryIndex",
    "extract_histories",
    "extract_history",
]
