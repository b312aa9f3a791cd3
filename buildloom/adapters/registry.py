"""
Adapter registry — routes each action to the collaborator that performs it.

    action.adapter    → adapter (``shell`` / ``filesystem``)
    params.operation  → one of that adapter's operations (default: its first)

Unknown collaborators, unsupported operations, invalid params and
exceptions raised by an adapter all become failed receipts, so the runner
only ever sees receipts.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from buildloom.adapters.base import Adapter, ExecutionContext
from buildloom.adapters.mock import MockAdapter
from buildloom.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Collaborator bindings by name.

    Args:
        adapters: Adapters to register.
        mock: When given, every action is answered by this mock instead
            of a real collaborator (``run --mock``).
    """

    def __init__(self, adapters: Iterable[Adapter] = (), mock: MockAdapter | None = None):
        self._adapters: dict[str, Adapter] = {}
        self._mock = mock
        for adapter in adapters:
            self.register(adapter)

    @property
    def mock(self) -> MockAdapter | None:
        return self._mock

    @property
    def collaborators(self) -> dict[str, tuple[str, ...]]:
        """Registered collaborator names and the operations each supports."""
        return {name: a.operations for name, a in self._adapters.items()}

    def register(self, adapter: Adapter) -> None:
        self._adapters[adapter.name] = adapter
        logger.debug("Collaborator %s: %s", adapter.name, ", ".join(adapter.operations))

    def _resolve(self, context: ExecutionContext) -> tuple[Adapter | None, str]:
        action = context.action
        if self._mock is not None:
            return self._mock, ""

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return None, f"No collaborator registered for '{action.adapter}'"

        operation = adapter.operation(context)
        if operation not in adapter.operations:
            return None, (
                f"'{action.adapter}' does not support '{operation}'. "
                f"Valid: {', '.join(adapter.operations)}"
            )

        problem = adapter.validate(context)
        if problem:
            return None, f"Validation failed: {problem}"
        return adapter, ""

    def execute_action(
        self,
        action: Action,
        project_root: str = ".",
        dry_run: bool = False,
    ) -> Receipt:
        """Run one action and return its receipt.

        With ``dry_run`` the action is resolved and validated, then
        reported as skipped without being performed.
        """
        start = time.monotonic()
        context = ExecutionContext(action=action, project_root=project_root, dry_run=dry_run)

        try:
            adapter, problem = self._resolve(context)
        except Exception as e:
            adapter, problem = None, f"Validation error: {e}"
        if adapter is None:
            return Receipt.failure(adapter=action.adapter, action_id=action.id, error=problem)

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would {adapter.describe(context)}",
                metadata={"dry_run": True},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("%s raised while running %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt


def create_default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry bound to the shell and filesystem collaborators."""
    from buildloom.adapters.shell.command import ShellCommandAdapter
    from buildloom.adapters.shell.filesystem import FilesystemAdapter

    return AdapterRegistry(
        [ShellCommandAdapter(), FilesystemAdapter()],
        mock=MockAdapter() if mock_mode else None,
    )
