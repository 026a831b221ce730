"""Shared per-repository history index.

``extract_history`` walks the whole commit graph for every file it is asked
about. When many files of the same repository need their history, a
``HistoryIndex`` walks the graph once, records every changed location of every
commit, and answers each lookup from that mapping.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import git
from git.objects import Commit

from ..config import DEFAULT_CONFIG, HistoryConfig
from ..logging import get_logger
from .errors import HistoryError, NoWorkingTreeError
from .history import (
    Edit,
    StrPath,
    iter_history_commits,
    make_edit,
    open_repository,
    relative_location,
    sort_edits,
)
from .treediff import iter_tree_changes

logger = get_logger(__name__)


class HistoryIndex:
    """Mapping from repository location to the edits that touched it."""

    def __init__(self, repo: git.Repo):
        workdir = repo.working_tree_dir
        if workdir is None:
            raise NoWorkingTreeError(f"Repository {repo.git_dir} is bare")
        self.repo = repo
        self.root = Path(workdir).resolve()
        self._edits: Optional[Dict[str, List[Edit]]] = None

    @classmethod
    def for_path(cls, path: StrPath, search_parent_directories: bool = True) -> "HistoryIndex":
        """Open the repository enclosing ``path`` and wrap it in an index."""

        repo = open_repository(path, search_parent_directories)
        try:
            return cls(repo)
        except HistoryError:
            repo.close()
            raise

    def __enter__(self) -> "HistoryIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.repo.close()

    @property
    def is_built(self) -> bool:
        return self._edits is not None

    def build(self) -> None:
        """Walk the commit graph once and record every changed location."""

        edits: Dict[str, List[Edit]] = defaultdict(list)
        commit_count = 0
        for commit in iter_history_commits(self.repo):
            commit_count += 1
            locations = self._changed_locations(commit)
            if not locations:
                continue
            edit = make_edit(commit)
            for location in locations:
                edits[location].append(edit)

        self._edits = dict(edits)
        logger.info(
            "history_index_built",
            root=str(self.root),
            commits=commit_count,
            locations=len(self._edits),
        )

    def _changed_locations(self, commit: Commit) -> Set[str]:
        try:
            tree = commit.tree
            parent_tree = commit.parents[0].tree if commit.parents else None
            return set(iter_tree_changes(parent_tree, tree))
        except Exception as e:
            logger.warning("commit_diff_failed", sha=commit.hexsha, error=str(e))
            return set()

    def locations(self) -> List[str]:
        """Return every location changed by at least one commit, sorted."""

        if self._edits is None:
            self.build()
        return sorted(self._edits)

    def history(self, path: StrPath) -> List[Edit]:
        """Return the edits of ``path``, oldest first.

        Paths that do not exist or fall outside this repository's working tree
        have no history.
        """

        if self._edits is None:
            self.build()
        try:
            _, location = relative_location(path, self.root)
        except HistoryError as e:
            logger.debug("history_unavailable", path=str(path), reason=str(e))
            return []
        return sort_edits(replace(edit) for edit in self._edits.get(location, []))


def extract_histories(
    paths: Iterable[StrPath], config: HistoryConfig | None = None
) -> Dict[str, List[Edit]]:
    """Return the history of many paths, walking each repository only once.

    Returns
    -------
    Dictionary mapping ``str(path)`` to its edits. Paths without a usable
    repository map to an empty list.
    """

    active_config = config or DEFAULT_CONFIG
    indexes: Dict[Path, HistoryIndex] = {}
    results: Dict[str, List[Edit]] = {}
    try:
        for path in paths:
            try:
                repo = open_repository(path, active_config.search_parent_directories)
            except HistoryError as e:
                logger.debug("history_unavailable", path=str(path), reason=str(e))
                results[str(path)] = []
                continue

            workdir = repo.working_tree_dir
            root = Path(workdir).resolve() if workdir is not None else None
            if root is not None and root in indexes:
                repo.close()
                index = indexes[root]
            else:
                try:
                    index = HistoryIndex(repo)
                except HistoryError as e:
                    repo.close()
                    logger.debug("history_unavailable", path=str(path), reason=str(e))
                    results[str(path)] = []
                    continue
                indexes[index.root] = index

            results[str(path)] = index.history(path)
    finally:
        for index in indexes.values():
            index.close()
    return results
