"""
Task factories — project type → complete task list.

    from buildloom.core.factories import create_task_factory

    tasks = create_task_factory(project).create_tasks()
"""

from __future__ import annotations

from collections.abc import Mapping

from buildloom.core.builders.base import ensure_project
from buildloom.core.factories.base import (
    TaskFactory,
    generate_additional_container_builders,
)
from buildloom.core.factories.project_types import (
    ApiTaskFactory,
    AwsMicroserviceTaskFactory,
    CliTaskFactory,
    ContainerTaskFactory,
    LibTaskFactory,
    NotSupportedTaskFactory,
    UiTaskFactory,
)
from buildloom.core.models.project import Project
from buildloom.core.models.schema import ProjectType

_FACTORIES: dict[ProjectType, type[TaskFactory]] = {
    ProjectType.LIB: LibTaskFactory,
    ProjectType.CLI: CliTaskFactory,
    ProjectType.API: ApiTaskFactory,
    ProjectType.AWS_MICROSERVICE: AwsMicroserviceTaskFactory,
    ProjectType.CONTAINER: ContainerTaskFactory,
    ProjectType.UI: UiTaskFactory,
}


def resolve_factory_class(project_type: object) -> type[TaskFactory]:
    """Factory class for a project type; unknown types get the fallback."""
    try:
        return _FACTORIES.get(ProjectType(project_type), NotSupportedTaskFactory)
    except (TypeError, ValueError):
        return NotSupportedTaskFactory


def create_task_factory(project: Project, env: Mapping[str, str] | None = None) -> TaskFactory:
    """Instantiate the factory that matches ``project.type``."""
    project = ensure_project(project)
    return resolve_factory_class(project.type)(project, env)


__all__ = [
    "ApiTaskFactory",
    "AwsMicroserviceTaskFactory",
    "CliTaskFactory",
    "ContainerTaskFactory",
    "LibTaskFactory",
    "NotSupportedTaskFactory",
    "TaskFactory",
    "UiTaskFactory",
    "create_task_factory",
    "generate_additional_container_builders",
    "resolve_factory_class",
]
