"""Contains results of a template synchronization run."""

from dataclasses import dataclass, field


@dataclass
class SyncActions:
    """Paths that were synchronized, by kind of change made to the template store."""

    added: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


@dataclass
class SyncOutcome:
    """Accumulates the actions taken and errors encountered during one sync run.

    A new instance is created for every webhook invocation. Concurrent
    per-file tasks only ever append to it.
    """

    actions: SyncActions = field(default_factory=SyncActions)
    errors: list[str] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        """Number of paths that resulted in a change to the template store."""
        return len(self.actions.added) + len(self.actions.modified) + len(self.actions.removed)


@dataclass
class UpsertResult:
    """Result of upserting a single template."""

    remote_id: str
    created: bool
