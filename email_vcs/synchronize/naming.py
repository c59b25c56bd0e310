"""Maps repository paths to remote template identities."""

from collections import Counter
from typing import Iterable

import structlog

from email_vcs.synchronize.exceptions import CollisionError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def to_remote_id(path: str) -> str:
    """Convert a repository path to a remote template identity.

    The first path separator becomes a hyphen and the 3-character ``.md``
    extension is dropped, so ``welcome/user.md`` maps to ``welcome-user``.
    """
    return path.replace("/", "-", 1)[:-3]


def remove_duplicate_paths(paths: Iterable[str]) -> list[str]:
    """Remove exact duplicate paths, keeping first-seen order."""
    return list(dict.fromkeys(paths))


def deduplicate_paths(paths: Iterable[str], repository_paths: Iterable[str] = ()) -> tuple[list[str], list[str]]:
    """Drop paths whose remote identity would collide with another path.

    Exact duplicates are removed first and never count as collisions. The
    seen identities are seeded from every repository path outside the batch,
    so a changed file cannot alias an untouched one. Paths are then scanned
    in order, and a path whose identity has already been seen is dropped.

    Args:
        paths: Changed repository paths, in the order they were touched.
        repository_paths: Every path currently present in the repository.

    Returns:
        tuple[list[str], list[str]]: The kept paths and one collision message per dropped path.
    """
    unique_paths = remove_duplicate_paths(paths)
    batch = set(unique_paths)
    seen_remote_ids: Counter[str] = Counter(to_remote_id(path) for path in repository_paths if path not in batch)

    kept_paths: list[str] = []
    collisions: list[str] = []
    for path in unique_paths:
        remote_id = to_remote_id(path)
        if seen_remote_ids[remote_id] > 0:
            error = CollisionError(path, remote_id)
            logger.warning("Path collides with an existing remote template identity", path=path, remote_id=remote_id)
            collisions.append(str(error))
        else:
            kept_paths.append(path)
        seen_remote_ids[remote_id] += 1
    return kept_paths, collisions
