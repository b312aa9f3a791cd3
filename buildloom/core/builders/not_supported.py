"""Not-supported marker — a task that deliberately does nothing."""

from __future__ import annotations

from buildloom.core.builders.base import TaskBuilder, ensure_project
from buildloom.core.models.project import Project
from buildloom.core.models.task import NoticeTask, Task

DEFAULT_MESSAGE = "Task not defined for project"


class NotSupportedTaskBuilder(TaskBuilder):
    """Builds a leaf that only logs a warning when run.

    Used wherever a step does not apply to a project type, so the step
    is visibly absent instead of silently missing.

    Args:
        message: Optional warning text.
    """

    def __init__(self, message: str | None = None):
        super().__init__(
            "not-supported",
            "Task that does nothing - used to indicate that a task is not "
            "supported for a project type.",
        )
        self._message = message if isinstance(message, str) and message else DEFAULT_MESSAGE

    @property
    def message(self) -> str:
        return self._message

    def _create_task(self, project: Project) -> Task:
        ensure_project(project)
        return NoticeTask(message=self._message)
