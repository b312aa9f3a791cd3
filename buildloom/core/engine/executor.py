"""
Task runner — executes a task graph through the adapter registry.

Graph construction never runs anything; this is the only place where
task nodes turn into side effects.

    leaf      dispatch the action, or log the notice
    series    children in order, stop at the first failure
    parallel  children on a thread pool, all of them run to completion
    watch     re-run the wrapped node on every change until stopped
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from buildloom.adapters.registry import AdapterRegistry
from buildloom.core.engine.watcher import POLL_INTERVAL_S, PathWatcher
from buildloom.core.models.action import Receipt
from buildloom.core.models.task import (
    ActionTask,
    NoticeTask,
    ParallelTask,
    SeriesTask,
    Task,
    WatchTask,
)

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Result of running one task graph."""

    task: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "task": self.task,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class TaskRunner:
    """Runs task nodes.

    Args:
        registry: Adapter dispatch for action leaves.
        project_root: Fallback working directory for actions.
        dry_run: Validate actions without executing them. Watch nodes
            are reported instead of started.
        max_workers: Thread pool size for parallel nodes (default: one
            per branch).
        poll_interval: Seconds between watch poll cycles.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        project_root: str = ".",
        dry_run: bool = False,
        max_workers: int | None = None,
        poll_interval: float = POLL_INTERVAL_S,
    ):
        self._registry = registry
        self._project_root = project_root
        self._dry_run = dry_run
        self._max_workers = max_workers
        self._poll_interval = poll_interval
        self._stop_event = threading.Event()

    @property
    def stop_event(self) -> threading.Event:
        """Set to end every running watch loop."""
        return self._stop_event

    def stop(self) -> None:
        self._stop_event.set()

    def run(self, task: Task) -> ExecutionReport:
        report = ExecutionReport(task=task.name)
        self._execute(task, report.receipts)

        marker = "✓" if report.all_ok else "✗"
        logger.info(
            "%s %s → %s (%d ok, %d failed, %d skipped)",
            marker, task.name or task.kind, report.status,
            report.succeeded, report.failed, report.skipped,
        )
        return report

    # ── Node dispatch ───────────────────────────────────────────

    def _execute(self, task: Task, receipts: list[Receipt]) -> bool:
        """Run one node, appending receipts. Returns False on failure."""
        if isinstance(task, ActionTask):
            return self._run_action(task, receipts)
        if isinstance(task, NoticeTask):
            return self._run_notice(task, receipts)
        if isinstance(task, SeriesTask):
            return self._run_series(task, receipts)
        if isinstance(task, ParallelTask):
            return self._run_parallel(task, receipts)
        if isinstance(task, WatchTask):
            return self._run_watch(task, receipts)

        logger.warning("Nothing to run for task '%s' (%s)", task.name, type(task).__name__)
        return True

    def _run_action(self, task: ActionTask, receipts: list[Receipt]) -> bool:
        if task.action is None:
            receipts.append(Receipt.skip(adapter="none", action_id=task.name, reason="No action"))
            return True

        receipt = self._registry.execute_action(
            task.action,
            project_root=self._project_root,
            dry_run=self._dry_run,
        )

        if receipt.failed and task.ignore_failure:
            logger.warning("%s failed (ignored): %s", task.action.id, receipt.error)
            receipts.append(
                Receipt.skip(
                    adapter=receipt.adapter,
                    action_id=receipt.action_id,
                    reason=f"Failure ignored: {receipt.error}",
                    duration_ms=receipt.duration_ms,
                    metadata={**receipt.metadata, "ignored_failure": True},
                )
            )
            return True

        if receipt.failed:
            logger.error("%s failed: %s", task.action.id, receipt.error)
        else:
            logger.debug("%s → %s", task.action.id, receipt.status)
        receipts.append(receipt)
        return not receipt.failed

    def _run_notice(self, task: NoticeTask, receipts: list[Receipt]) -> bool:
        logger.warning("%s: %s", task.name or "notice", task.message)
        receipts.append(
            Receipt.skip(adapter="notice", action_id=task.name or "notice", reason=task.message)
        )
        return True

    def _run_series(self, task: SeriesTask, receipts: list[Receipt]) -> bool:
        for step in task.steps:
            if not self._execute(step, receipts):
                logger.debug("Series '%s' stopped at '%s'", task.name, step.name)
                return False
        return True

    def _run_parallel(self, task: ParallelTask, receipts: list[Receipt]) -> bool:
        if not task.branches:
            return True

        def _branch(node: Task) -> tuple[bool, list[Receipt]]:
            collected: list[Receipt] = []
            return self._execute(node, collected), collected

        workers = self._max_workers or len(task.branches)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="buildloom") as pool:
            futures = [pool.submit(_branch, branch) for branch in task.branches]
            results = [f.result() for f in futures]

        ok = True
        for branch_ok, collected in results:
            receipts.extend(collected)
            ok = ok and branch_ok
        return ok

    def _run_watch(self, task: WatchTask, receipts: list[Receipt]) -> bool:
        if task.task is None:
            return True

        if self._dry_run:
            receipts.append(
                Receipt.skip(
                    adapter="watch",
                    action_id=task.name,
                    reason=f"[dry-run] Would watch {len(task.paths)} patterns",
                    metadata={"paths": list(task.paths)},
                )
            )
            return True

        watcher = PathWatcher(task.paths, poll_interval=self._poll_interval)
        runs = watcher.run(lambda: self.run(task.task), self._stop_event)
        receipts.append(
            Receipt.success(
                adapter="watch",
                action_id=task.name,
                output=f"Watcher stopped after {runs} runs",
                metadata={"runs": runs},
            )
        )
        return True
