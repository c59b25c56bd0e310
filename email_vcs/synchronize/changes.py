"""Aggregates the files touched by the commits of a push event."""

from dataclasses import dataclass, field
from typing import Sequence

from email_vcs.schemas.push_event import CommitModel


@dataclass
class ChangeSet:
    """Paths touched by a push, by category, in first-seen order without duplicates."""

    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


def build_change_set(commits: Sequence[CommitModel]) -> ChangeSet:
    """Merge the per-commit added, modified and removed lists of a push event."""
    change_set = ChangeSet()
    for commit in commits:
        for category in ("added", "modified", "removed"):
            touched: list[str] = getattr(change_set, category)
            for path in getattr(commit, category):
                if path not in touched:
                    touched.append(path)
    return change_set


def flatten_touched_paths(commits: Sequence[CommitModel]) -> list[str]:
    """List every path touched by a push once, without regard to category.

    Paths are taken commit by commit, each commit contributing its added,
    then modified, then removed paths.
    """
    touched: list[str] = []
    for commit in commits:
        touched.extend(commit.added)
        touched.extend(commit.modified)
        touched.extend(commit.removed)
    return list(dict.fromkeys(touched))
