"""
Mock collaborator — answers every action without running anything.

Backs ``run --mock`` and the runner tests. Every action succeeds unless a
failure or a canned receipt was registered for its id.
"""

from __future__ import annotations

import threading

from buildloom.adapters.base import Adapter, ExecutionContext
from buildloom.core.models.action import Receipt


class MockAdapter(Adapter):
    """Stand-in for every collaborator. Safe to call from parallel branches."""

    name = "mock"
    operations = ("run", "copy", "delete", "archive")

    def __init__(self):
        self._canned: dict[str, Receipt] = {}
        self._calls: list[ExecutionContext] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> list[ExecutionContext]:
        with self._lock:
            return list(self._calls)

    @property
    def executed_ids(self) -> list[str]:
        """Action ids in execution order."""
        return [ctx.action.id for ctx in self.calls]

    def fail(self, action_id: str, error: str = "Mock failure") -> None:
        self._canned[action_id] = Receipt.failure(
            adapter=self.name, action_id=action_id, error=error
        )

    def respond(self, action_id: str, receipt: Receipt) -> None:
        self._canned[action_id] = receipt

    def reset(self) -> None:
        with self._lock:
            self._calls.clear()
        self._canned.clear()

    def validate(self, context: ExecutionContext) -> str | None:
        return None

    def describe(self, context: ExecutionContext) -> str:
        return f"{context.action.adapter}:{self.operation(context)} ({context.action.id})"

    def execute(self, context: ExecutionContext) -> Receipt:
        with self._lock:
            self._calls.append(context)

        canned = self._canned.get(context.action.id)
        if canned is not None:
            return canned.model_copy()

        return Receipt.success(
            adapter=context.action.adapter,
            action_id=context.action.id,
            output=f"[mock] {self.describe(context)}",
            metadata={"mock": True},
        )
