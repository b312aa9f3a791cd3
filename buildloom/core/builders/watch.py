"""Watch wrapper — re-run an existing task whenever its inputs change."""

from __future__ import annotations

from buildloom.core.builders.base import TaskBuilder, ensure_project
from buildloom.core.errors import InvalidArgumentError
from buildloom.core.models.project import Project
from buildloom.core.models.task import Task, WatchTask


class WatchTaskBuilder(TaskBuilder):
    """Wraps a built task and the globs that should re-trigger it.

    Args:
        task: An already built task (its name names the watch task).
        paths: Globs to monitor.
    """

    def __init__(self, task: Task, paths: list[str]):
        if not isinstance(task, Task):
            raise InvalidArgumentError("Invalid task (arg #1)")
        if not isinstance(paths, list):
            raise InvalidArgumentError("Invalid paths (arg #2)")
        super().__init__(
            f"watch-{task.name}",
            f"[Monitor and execute] {task.description}",
        )
        self._task = task
        self._paths = list(paths)

    def _create_task(self, project: Project) -> Task:
        ensure_project(project)
        return WatchTask(task=self._task, paths=list(self._paths))
