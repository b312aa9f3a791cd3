"""
Adapter base — bindings for the collaborators a task leaf depends on.

Leaves never run tools themselves. Each Action names a collaborator and
an operation on it:

    shell       run(argv, cwd, stdio)
    filesystem  copy(patterns, base_dir, dest_dir), delete(patterns),
                archive(patterns, base_dir, dest_file)

An adapter implements one collaborator. It checks an action's params,
performs the operation and reports the outcome as a Receipt; it never
lets an exception escape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel

from buildloom.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """One action, plus where and how it is being executed."""

    action: Action
    project_root: str = "."
    dry_run: bool = False

    @property
    def params(self) -> dict[str, Any]:
        return self.action.params

    @property
    def working_dir(self) -> str:
        """The action's ``cwd`` param, else the project root."""
        return self.params.get("cwd") or self.project_root


class Adapter(ABC):
    """A collaborator binding.

    Subclasses set ``name`` (matched against ``Action.adapter``) and
    ``operations`` (the first one is the default when an action does not
    name its operation), then implement validate and execute.
    """

    name: ClassVar[str]
    operations: ClassVar[tuple[str, ...]]

    def operation(self, context: ExecutionContext) -> str:
        return context.params.get("operation") or self.operations[0]

    @abstractmethod
    def validate(self, context: ExecutionContext) -> str | None:
        """Problem with the action's params, or None when it can run."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the operation. Failures come back as failed receipts."""

    def describe(self, context: ExecutionContext) -> str:
        """Short human form of the operation, used by dry runs."""
        return f"{self.operation(context)} ({context.action.id})"

    def succeeded(self, context: ExecutionContext, output: str = "", **kwargs: Any) -> Receipt:
        return Receipt.success(
            adapter=self.name, action_id=context.action.id, output=output, **kwargs
        )

    def failed(self, context: ExecutionContext, error: str, **kwargs: Any) -> Receipt:
        return Receipt.failure(
            adapter=self.name, action_id=context.action.id, error=error, **kwargs
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}: {', '.join(self.operations)}>"
