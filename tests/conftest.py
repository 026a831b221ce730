"""Shared fixtures building throwaway git repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import git
import pytest
import structlog
from git.objects import Commit


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging set up by command line runs."""
    yield
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()


@pytest.fixture
def repo(tmp_path) -> git.Repo:
    """Create an empty repository with a configured committer."""
    repo = git.Repo.init(tmp_path / "repo")
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
    yield repo
    repo.close()


@pytest.fixture
def commit(repo) -> Callable[..., Commit]:
    """Return a helper that writes files and commits them at a fixed time.

    ``when`` is a Unix timestamp used for both author and committer time.
    ``parents`` overrides the parent commits (HEAD by default), which lets
    tests build merges without checking out branches.
    """

    root = Path(repo.working_tree_dir)

    def _commit(
        message: str,
        when: int,
        files: Optional[Dict[str, str]] = None,
        remove: Iterable[str] = (),
        parents: Optional[List[Commit]] = None,
    ) -> Commit:
        files = files or {}
        for name, content in files.items():
            target = root / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        if files:
            repo.index.add(list(files))
        removed = list(remove)
        if removed:
            repo.index.remove(removed, working_tree=True)
        date = f"{when} +0000"
        return repo.index.commit(
            message,
            parent_commits=parents,
            author_date=date,
            commit_date=date,
        )

    return _commit
