"""Unit tests for mapping repository paths to remote template identities."""

import pytest

from email_vcs.synchronize.exceptions import CollisionError
from email_vcs.synchronize.naming import deduplicate_paths, remove_duplicate_paths, to_remote_id


@pytest.mark.parametrize(
    "path, expected",
    [
        pytest.param("a/b.md", "a-b", id="one directory"),
        pytest.param("welcome.md", "welcome", id="top level"),
        pytest.param("a/b/c.md", "a-b/c", id="only first separator replaced"),
        pytest.param("x-y.md", "x-y", id="hyphenated name"),
    ],
)
def test_to_remote_id(path: str, expected: str) -> None:
    """Test conversion of repository paths to remote template identities."""
    assert to_remote_id(path) == expected


def test_to_remote_id_is_deterministic() -> None:
    """Test that the same path always maps to the same identity."""
    assert to_remote_id("account/reset.md") == to_remote_id("account/reset.md")


def test_remove_duplicate_paths_keeps_first_seen_order() -> None:
    """Test that exact duplicates are removed without reordering."""
    assert remove_duplicate_paths(["b.md", "a.md", "b.md", "c.md", "a.md"]) == ["b.md", "a.md", "c.md"]


def test_deduplicate_paths_reports_collision() -> None:
    """Test that the second path aliasing an identity is dropped and reported."""
    kept, collisions = deduplicate_paths(["x/y.md", "x-y.md"])

    assert kept == ["x/y.md"]
    assert collisions == ["x-y.md causes duplication once converted to x-y"]


def test_deduplicate_paths_exact_duplicates_are_not_collisions() -> None:
    """Test that exact duplicates are removed before collision detection."""
    kept, collisions = deduplicate_paths(["a.md", "a.md"])

    assert kept == ["a.md"]
    assert collisions == []


def test_deduplicate_paths_batch_files_in_repository_do_not_collide_with_themselves() -> None:
    """Test that changed files present in the repository tree are not counted twice."""
    kept, collisions = deduplicate_paths(["x/y.md", "x-y.md"], repository_paths=["x/y.md", "x-y.md", "other.md"])

    assert kept == ["x/y.md"]
    assert collisions == ["x-y.md causes duplication once converted to x-y"]


def test_deduplicate_paths_collision_with_untouched_repository_file() -> None:
    """Test that a changed file aliasing an untouched repository file is dropped."""
    kept, collisions = deduplicate_paths(["a-b.md", "c.md"], repository_paths=["a/b.md", "a-b.md", "c.md"])

    assert kept == ["c.md"]
    assert collisions == ["a-b.md causes duplication once converted to a-b"]


def test_deduplicate_paths_flags_every_later_duplicate() -> None:
    """Test that each further path mapping to a seen identity is also flagged, in input order."""
    kept, collisions = deduplicate_paths(["p/q.md", "p-q.md", "z.md", "p/q.md", "p-q.md"])

    assert kept == ["p/q.md", "z.md"]
    assert collisions == ["p-q.md causes duplication once converted to p-q"]


def test_collision_error_message() -> None:
    """Test the message and attributes of a collision error."""
    error = CollisionError("x-y.md", "x-y")

    assert str(error) == "x-y.md causes duplication once converted to x-y"
    assert error.path == "x-y.md"
    assert error.remote_id == "x-y"
