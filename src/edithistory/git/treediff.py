"""Lazy structural comparison of two git trees."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from git.objects import Object, Tree


def _entries(tree: Optional[Tree]) -> Dict[str, Object]:
    if tree is None:
        return {}
    return {item.name: item for item in tree}


def _subtree(item: Optional[Object]) -> Optional[Tree]:
    if item is not None and item.type == "tree":
        return item
    return None


def _may_contain(location: str, within: str) -> bool:
    return within == location or within.startswith(location + "/")


def iter_tree_changes(
    old: Optional[Tree],
    new: Optional[Tree],
    within: Optional[str] = None,
    prefix: str = "",
) -> Iterator[str]:
    """Yield the location of every entry that differs between two trees.

    Parameters
    ----------
    old:
        Tree to compare from. ``None`` stands for the empty tree, so every
        entry of ``new`` is reported as added.
    new:
        Tree to compare to. ``None`` reports every entry of ``old`` as removed.
    within:
        Optional repository-relative path. Subtrees that cannot contain it are
        never loaded, which keeps lookups for a single file cheap on large
        trees.
    prefix:
        Location of ``old``/``new`` inside the root tree, ending in ``/``.

    Yields
    ------
    POSIX locations relative to the root tree. Directories are reported
    before their changed children. Entries with the same object id and mode on
    both sides are skipped without descending into them.

    The generator does no work ahead of the consumer; stopping iteration stops
    the walk.
    """

    old_entries = _entries(old)
    new_entries = _entries(new)
    for name in sorted(old_entries.keys() | new_entries.keys()):
        location = prefix + name
        if within is not None and not _may_contain(location, within):
            continue

        before = old_entries.get(name)
        after = new_entries.get(name)
        if (
            before is not None
            and after is not None
            and before.binsha == after.binsha
            and before.mode == after.mode
        ):
            continue

        yield location

        old_subtree = _subtree(before)
        new_subtree = _subtree(after)
        if old_subtree is not None or new_subtree is not None:
            yield from iter_tree_changes(old_subtree, new_subtree, within, location + "/")
