"""
Run use case — build the task list for a project and execute one task.

The full vertical slice from a task name to a report: load the
descriptor, build every task through the matching factory, select the
requested one, and run it through the adapter registry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from buildloom.adapters.registry import AdapterRegistry, create_default_registry
from buildloom.core.engine.executor import ExecutionReport, TaskRunner
from buildloom.core.errors import BuildloomError
from buildloom.core.models.project import Project
from buildloom.core.models.task import Task
from buildloom.core.use_cases.tasks import load_tasks

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running one task."""

    report: ExecutionReport | None = None
    task: Task | None = None
    project: Project | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["project_name"] = self.project.name if self.project else ""
        result["task"] = self.task.name if self.task else ""
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_task(
    name: str,
    config_path: Path | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    registry: AdapterRegistry | None = None,
    env: Mapping[str, str] | None = None,
    runner: TaskRunner | None = None,
) -> RunResult:
    """Execute the named task of the project.

    Args:
        name: Task name, e.g. ``build`` or ``watch-lint``.
        config_path: Optional explicit descriptor path.
        dry_run: Validate actions without executing them.
        mock_mode: Use mock adapter responses.
        registry: Optional pre-configured adapter registry.
        env: Environment snapshot for deployment options.
        runner: Optional pre-configured runner (``registry``, ``dry_run``
            and ``mock_mode`` are then ignored).

    Returns:
        RunResult with the execution report.
    """
    result = RunResult()

    try:
        project, tasks = load_tasks(config_path, env)
    except BuildloomError as e:
        result.error = str(e)
        return result
    result.project = project

    by_name = {t.name: t for t in tasks}
    task = by_name.get(name)
    if task is None:
        result.error = f"Unknown task '{name}'. Available: {', '.join(by_name)}"
        return result
    result.task = task

    if runner is None:
        if registry is None:
            registry = create_default_registry(mock_mode=mock_mode)
        runner = TaskRunner(
            registry,
            project_root=project.root_dir.absolute_path,
            dry_run=dry_run,
        )

    logger.info("Running '%s' for %s", name, project.name)
    result.report = runner.run(task)
    return result
