"""
Task listing use case — every task a project offers, with descriptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from buildloom.core.config.loader import load_project
from buildloom.core.errors import BuildloomError
from buildloom.core.factories import create_task_factory
from buildloom.core.models.project import Project
from buildloom.core.models.task import Task


def load_tasks(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[Project, list[Task]]:
    """Load the project and build its full task list.

    Raises:
        BuildloomError: The descriptor is missing, malformed or incomplete.
    """
    project = load_project(config_path)
    return project, create_task_factory(project, env).create_tasks()


@dataclass
class TaskListResult:
    project: Project | None = None
    tasks: list[Task] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "project_name": self.project.name if self.project else "",
            "tasks": [t.to_dict() for t in self.tasks],
        }


def list_tasks(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> TaskListResult:
    result = TaskListResult()
    try:
        result.project, result.tasks = load_tasks(config_path, env)
    except BuildloomError as e:
        result.error = str(e)
    return result
