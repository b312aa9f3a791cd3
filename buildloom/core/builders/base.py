"""
TaskBuilder base — the contract every build step implements.

A builder is a named, described, stateless mapping from a Project to a
task node, plus the globs whose changes should re-trigger that task.
Constructor arguments (a container target, a test type) are the only
per-instance state.

To add a step:
    1. Subclass TaskBuilder (or CompositeTaskBuilder)
    2. Implement _create_task (or _get_sub_builders)
    3. Override get_watch_paths if the step depends on source files
    4. Add it to the relevant factories
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from buildloom.core.errors import InvalidArgumentError
from buildloom.core.models.action import Action
from buildloom.core.models.directory import Directory
from buildloom.core.models.project import Project
from buildloom.core.models.schema import Language, ProjectType
from buildloom.core.models.task import ActionTask, SeriesTask, Task


def ensure_project(project: object) -> Project:
    """Reject anything that is not a Project."""
    if not isinstance(project, Project):
        raise InvalidArgumentError("Invalid project (arg #1)")
    return project


def dedupe(paths: Iterable[str]) -> list[str]:
    """Drop repeated paths, keeping first-occurrence order."""
    return list(dict.fromkeys(paths))


def dir_globs(root: Directory, dirs: Iterable[str], extensions: Iterable[str]) -> list[str]:
    """Globs for every extension under every named child of ``root``."""
    exts = list(extensions)
    return [root.get_child(d).get_all_files_glob(ext) for d in dirs for ext in exts]


def file_globs(root: Directory, names: Iterable[str]) -> list[str]:
    return [root.get_file_glob(name) for name in names]


def source_dirs(project: Project, *dirs: str) -> list[str]:
    """``dirs`` (default ``src``, ``test``), plus ``infra`` for cloud stacks."""
    result = list(dirs or ("src", "test"))
    if project.type == ProjectType.AWS_MICROSERVICE and "infra" not in result:
        result.append("infra")
    return result


def language_extensions(project: Project, *base: str) -> list[str]:
    """``base`` extensions, plus ``ts``/``tsx`` for TypeScript projects."""
    exts = list(base)
    if project.language == Language.TS:
        exts += ["ts", "tsx"]
    return exts


def node_bin(project: Project, tool: str) -> str:
    """Path of a locally installed node tool (``node_modules/.bin/<tool>``)."""
    return project.root_dir.get_child("node_modules").get_file_path(os.path.join(".bin", tool))


def shell_action(
    action_id: str,
    argv: list[str],
    cwd: str,
    stdio: str = "inherit",
    **params: Any,
) -> Action:
    """Action for the ``run(argv, cwd, stdio)`` collaborator."""
    return Action(
        id=action_id,
        adapter="shell",
        params={"argv": list(argv), "cwd": cwd, "stdio": stdio, **params},
    )


def filesystem_action(action_id: str, operation: str, **params: Any) -> Action:
    """Action for the filesystem collaborator (copy / delete / archive)."""
    return Action(
        id=action_id,
        adapter="filesystem",
        params={"operation": operation, **params},
    )


class TaskBuilder(ABC):
    """Abstract builder of one named task.

    Args:
        name: Unique task name, e.g. ``clean`` or ``publish-container-arm``.
        description: One-line description shown in task listings.
    """

    def __init__(self, name: str, description: str):
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Invalid name (arg #1)")
        if not isinstance(description, str) or not description:
            raise InvalidArgumentError("Invalid description (arg #2)")
        self._name = name
        self._description = description

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @abstractmethod
    def _create_task(self, project: Project) -> Task:
        """Create the task node for ``project``.

        Implementations must reject a non-Project argument with
        InvalidArgumentError.
        """

    def build_task(self, project: Project) -> Task:
        """Create the task and stamp this builder's name and description on it."""
        task = self._create_task(ensure_project(project))
        task.name = self._name
        task.description = self._description
        return task

    def get_watch_paths(self, project: Project) -> list[str]:
        """Globs that should re-trigger this task. Empty: no file dependency."""
        ensure_project(project)
        return []

    def _action_id(self, step: str) -> str:
        return f"{self._name}:{step}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self._name!r}>"


class CompositeTaskBuilder(TaskBuilder):
    """Builder whose task is a series of variant-selected sub builders.

    Sub builder selection is a pure function of the project, so the same
    project always yields the same children.
    """

    @abstractmethod
    def _get_sub_builders(self, project: Project) -> list[TaskBuilder]:
        """Select the child builders for ``project``."""

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        return SeriesTask(
            steps=[b.build_task(project) for b in self._get_sub_builders(project)]
        )

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dedupe(
            path
            for builder in self._get_sub_builders(project)
            for path in builder.get_watch_paths(project)
        )


class ShellTaskBuilder(TaskBuilder):
    """Builder of a single shell leaf; subclasses supply argv and cwd."""

    ignore_failure: bool = False

    @abstractmethod
    def _argv(self, project: Project) -> list[str]:
        """Command line for the tool invocation."""

    def _cwd(self, project: Project) -> str:
        return project.root_dir.absolute_path

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        return ActionTask(
            action=shell_action(self._action_id("run"), self._argv(project), self._cwd(project)),
            ignore_failure=self.ignore_failure,
        )
