"""Per-file edit history extracted from a git working tree."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from os import PathLike
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import git
from git.objects import Commit

from ..config import DEFAULT_CONFIG, HistoryConfig
from ..logging import get_logger
from .errors import (
    HistoryError,
    NoWorkingTreeError,
    PathOutsideRepositoryError,
    PathResolutionError,
    RepositoryNotFoundError,
)
from .treediff import iter_tree_changes

logger = get_logger(__name__)

StrPath = Union[str, PathLike]

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(slots=True)
class Edit:
    """A single commit that changed a file.

    ``timestamp`` is the commit time in UTC, or ``None`` when the recorded time
    cannot be represented as a datetime.
    """

    timestamp: Optional[datetime]
    summary: str
    message: str
    commit: str = ""


@dataclass(slots=True)
class RepositoryPath:
    """A path located inside a repository's working tree."""

    repo: git.Repo
    root: Path
    location: str


def open_repository(path: StrPath, search_parent_directories: bool = True) -> git.Repo:
    """Open the repository enclosing ``path``.

    The search starts at ``path`` when it is a directory and at its parent
    otherwise.
    """

    candidate = Path(path)
    start = candidate if candidate.is_dir() else candidate.parent
    try:
        return git.Repo(start, search_parent_directories=search_parent_directories)
    except (git.InvalidGitRepositoryError, OSError, ValueError) as e:
        raise RepositoryNotFoundError(f"No git repository encloses {candidate}") from e


def relative_location(path: StrPath, workdir: StrPath) -> tuple[Path, str]:
    """Return the canonical working-tree root and ``path`` relative to it.

    Both paths are resolved (symlinks and ``..`` segments) before the root is
    stripped, and the result always uses ``/`` separators.
    """

    try:
        absolute = Path(path).resolve(strict=True)
        root = Path(workdir).resolve(strict=True)
    except (OSError, RuntimeError, ValueError) as e:
        raise PathResolutionError(f"Cannot canonicalise {path}: {e}") from e

    if not absolute.is_relative_to(root):
        raise PathOutsideRepositoryError(f"{absolute} is not inside {root}")
    return root, absolute.relative_to(root).as_posix()


def resolve_repository_path(
    path: StrPath, search_parent_directories: bool = True
) -> RepositoryPath:
    """Locate ``path`` inside its enclosing repository.

    Raises
    ------
    RepositoryNotFoundError, NoWorkingTreeError, PathResolutionError,
    PathOutsideRepositoryError
        When the path has no usable repository-relative location. The caller
        owns the returned repository and must close it.
    """

    repo = open_repository(path, search_parent_directories)
    try:
        workdir = repo.working_tree_dir
        if workdir is None:
            raise NoWorkingTreeError(f"Repository {repo.git_dir} is bare")
        root, location = relative_location(path, workdir)
    except HistoryError:
        repo.close()
        raise
    return RepositoryPath(repo=repo, root=root, location=location)


def iter_history_commits(repo: git.Repo) -> Iterator[Commit]:
    """Yield each commit reachable from HEAD once.

    A repository without commits yields nothing. A git failure part way through
    ends the walk; commits produced before it stay valid.
    """

    if not repo.head.is_valid():
        logger.debug("history_no_head", git_dir=str(repo.git_dir))
        return
    try:
        yield from repo.iter_commits("HEAD")
    except (git.GitError, ValueError) as e:
        logger.warning("history_walk_failed", git_dir=str(repo.git_dir), error=str(e))


def is_path_changed_in_commit(commit: Commit, location: str) -> bool:
    """Check whether ``location`` differs between ``commit`` and its first parent.

    Root commits are compared with the empty tree. Any failure to load trees or
    compare them counts as "unchanged" for this commit.
    """

    try:
        tree = commit.tree
        parent_tree = commit.parents[0].tree if commit.parents else None
        return any(
            changed == location
            for changed in iter_tree_changes(parent_tree, tree, within=location)
        )
    except Exception as e:
        logger.warning("commit_diff_failed", sha=commit.hexsha, error=str(e))
        return False


def commit_time(commit: Commit) -> Optional[datetime]:
    """Return the committer time of ``commit`` as an aware UTC datetime."""

    try:
        return datetime.fromtimestamp(commit.committed_date, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        logger.warning(
            "commit_time_invalid",
            sha=commit.hexsha,
            committed_date=commit.committed_date,
            error=str(e),
        )
        return None


def commit_message(commit: Commit) -> str:
    message = commit.message
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return message


def make_edit(commit: Commit) -> Edit:
    message = commit_message(commit)
    return Edit(
        timestamp=commit_time(commit),
        summary=message.split("\n", 1)[0],
        message=message,
        commit=commit.hexsha,
    )


def _edit_sort_key(edit: Edit) -> tuple[bool, datetime]:
    # Undated edits go last
    return edit.timestamp is None, edit.timestamp or _EPOCH


def sort_edits(edits: Iterable[Edit]) -> List[Edit]:
    """Return ``edits`` oldest first."""

    return sorted(edits, key=_edit_sort_key)


def extract_history(path: StrPath, config: HistoryConfig | None = None) -> List[Edit]:
    """Return the commits that changed ``path``, oldest first.

    Parameters
    ----------
    path:
        Absolute or relative path of a file inside a git working tree.
    config:
        Optional configuration; only ``search_parent_directories`` is used.

    Returns
    -------
    List of Edit records. The list is empty when the path has no repository,
    lives in a bare repository or outside the working tree, does not exist,
    or was never committed.
    """

    active_config = config or DEFAULT_CONFIG
    try:
        target = resolve_repository_path(
            path, search_parent_directories=active_config.search_parent_directories
        )
    except HistoryError as e:
        logger.debug("history_unavailable", path=str(path), reason=str(e))
        return []

    try:
        edits = [
            make_edit(commit)
            for commit in iter_history_commits(target.repo)
            if is_path_changed_in_commit(commit, target.location)
        ]
    finally:
        target.repo.close()

    logger.debug("history_extracted", path=target.location, edits=len(edits))
    return sort_edits(edits)
