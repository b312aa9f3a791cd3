"""
TaskFactory base — turns a project into its complete, ordered task list.

A concrete factory only chooses builders. Materializing tasks, deriving
watch tasks and reading the deployment environment live here.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from buildloom.core.builders.base import TaskBuilder, ensure_project
from buildloom.core.builders.package import PackageContainerTaskBuilder
from buildloom.core.builders.publish import PublishContainerTaskBuilder
from buildloom.core.builders.watch import WatchTaskBuilder
from buildloom.core.models.project import DEFAULT_TARGET, Project
from buildloom.core.models.task import Task

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "dev"


def _container_pair(target: str) -> list[TaskBuilder]:
    return [PackageContainerTaskBuilder(target), PublishContainerTaskBuilder(target)]


def generate_additional_container_builders(
    project: Project,
    builders_for_target: Callable[[str], list[TaskBuilder]] | None = None,
) -> list[TaskBuilder]:
    """Per-target builders for every container target except ``default``.

    Args:
        project: Project whose container targets are expanded.
        builders_for_target: Builders for one target. Defaults to a
            package-container / publish-container pair.

    Returns:
        Builders in target declaration order; empty when ``default`` is
        the only target.
    """
    if builders_for_target is None:
        builders_for_target = _container_pair

    builders: list[TaskBuilder] = []
    for target in project.get_container_targets():
        if target != DEFAULT_TARGET:
            builders.extend(builders_for_target(target))
    return builders


class TaskFactory(ABC):
    """Abstract factory of all tasks for one project type.

    Args:
        project: The project to generate tasks for.
        env: Environment snapshot for deployment options. Defaults to a
            copy of ``os.environ`` taken at construction.
    """

    def __init__(self, project: Project, env: Mapping[str, str] | None = None):
        self._project = ensure_project(project)
        self._env = dict(os.environ) if env is None else dict(env)

    @property
    def project(self) -> Project:
        return self._project

    @property
    def environment(self) -> str:
        """Deployment environment (``INFRA_ENV``, default ``dev``)."""
        return self._env.get("INFRA_ENV") or DEFAULT_ENVIRONMENT

    @property
    def no_prompt(self) -> bool:
        """Whether deployments skip approval prompts (``INFRA_NO_PROMPT=true``)."""
        return self._env.get("INFRA_NO_PROMPT") == "true"

    @abstractmethod
    def _create_task_builders(self) -> list[TaskBuilder]:
        """Ordered builders for this project type."""

    def get_task_builders(self) -> list[TaskBuilder]:
        return list(self._create_task_builders())

    def create_tasks(self) -> list[Task]:
        """Build every task, then one watch task per source-dependent builder.

        Returns:
            Primary tasks in builder order, followed by the watch tasks in
            the same relative order.
        """
        builders = self._create_task_builders()
        tasks: list[Task] = []
        watchers: list[TaskBuilder] = []

        for builder in builders:
            task = builder.build_task(self._project)
            tasks.append(task)
            paths = builder.get_watch_paths(self._project)
            if paths:
                watchers.append(WatchTaskBuilder(task, paths))

        tasks.extend(w.build_task(self._project) for w in watchers)
        logger.debug(
            "%s: %d tasks (%d watch) for '%s'",
            self.__class__.__name__, len(tasks), len(watchers), self._project.name,
        )
        return tasks
