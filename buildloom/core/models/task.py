"""
Task graph nodes.

Builders produce these; the runner executes them. A node is plain data:
building a graph never runs anything.

    leaf      ActionTask (one adapter action) or NoticeTask (log only)
    series    children run strictly in order
    parallel  children run concurrently, complete when all complete
    watch     re-runs a wrapped node whenever a watched glob changes
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar

from buildloom.core.models.action import Action


@dataclass
class Task:
    """Base node. ``name`` and ``description`` are stamped by the builder."""

    kind: ClassVar[str] = "leaf"

    name: str = ""
    description: str = ""

    @property
    def children(self) -> list[Task]:
        return []

    def walk(self) -> Iterator[Task]:
        """Yield this node and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "description": self.description, "kind": self.kind}
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass
class ActionTask(Task):
    """Leaf that executes one adapter action.

    With ``ignore_failure`` a failed receipt is logged and recorded as
    skipped; it is never retried or re-raised, and the enclosing series
    keeps going.
    """

    action: Action | None = None
    ignore_failure: bool = False

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.action is not None:
            data["action"] = self.action.model_dump(mode="json")
        data["ignore_failure"] = self.ignore_failure
        return data


@dataclass
class NoticeTask(Task):
    """Leaf that only logs a warning — marks a task as intentionally absent."""

    message: str = "Task not defined for project"


@dataclass
class SeriesTask(Task):
    kind: ClassVar[str] = "series"

    steps: list[Task] = field(default_factory=list)

    @property
    def children(self) -> list[Task]:
        return list(self.steps)


@dataclass
class ParallelTask(Task):
    kind: ClassVar[str] = "parallel"

    branches: list[Task] = field(default_factory=list)

    @property
    def children(self) -> list[Task]:
        return list(self.branches)


@dataclass
class WatchTask(Task):
    """Re-runs ``task`` on every change below ``paths``."""

    kind: ClassVar[str] = "watch"

    task: Task | None = None
    paths: list[str] = field(default_factory=list)

    @property
    def children(self) -> list[Task]:
        return [self.task] if self.task is not None else []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["paths"] = list(self.paths)
        return data
