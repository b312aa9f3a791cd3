"""Documentation builders — jsdoc for javascript, typedoc for TypeScript."""

from __future__ import annotations

import os
from collections.abc import Callable

from buildloom.core.builders.base import (
    CompositeTaskBuilder,
    ShellTaskBuilder,
    TaskBuilder,
    dir_globs,
    ensure_project,
    node_bin,
)
from buildloom.core.builders.not_supported import NotSupportedTaskBuilder
from buildloom.core.models.project import Project
from buildloom.core.models.schema import Language, ProjectType


def _output_dir(project: Project) -> str:
    """``docs/<name>/<version>`` — one tree per released version."""
    return project.root_dir.get_child("docs").get_file_path(
        os.path.join(project.name, project.version)
    )


class DocsJsTaskBuilder(ShellTaskBuilder):
    def __init__(self):
        super().__init__(
            "docs-js",
            "Generates documentation from code comments in javascript files",
        )

    def _argv(self, project: Project) -> list[str]:
        root = project.root_dir
        return [
            node_bin(project, "jsdoc"),
            "--readme",
            root.get_file_path("README.md"),
            "--destination",
            _output_dir(project),
            "--recurse",
            root.get_child("src").absolute_path,
        ]

    def get_watch_paths(self, project: Project) -> list[str]:
        return dir_globs(ensure_project(project).root_dir, ["src"], ["js"])


class DocsTsTaskBuilder(ShellTaskBuilder):
    def __init__(self):
        super().__init__(
            "docs-ts",
            "Generates documentation from code comments in typescript files",
        )

    def _argv(self, project: Project) -> list[str]:
        root = project.root_dir
        return [
            node_bin(project, "typedoc"),
            "--name",
            f"{project.name} Documentation",
            "--readme",
            root.get_file_path("README.md"),
            "--out",
            _output_dir(project),
            "--entryPointStrategy",
            "expand",
            root.get_child("src").absolute_path,
        ]

    def get_watch_paths(self, project: Project) -> list[str]:
        return dir_globs(ensure_project(project).root_dir, ["src"], ["ts"])


class DocsTaskBuilder(CompositeTaskBuilder):
    _LANGUAGE_VARIANTS: dict[Language, Callable[[], TaskBuilder]] = {
        Language.TS: DocsTsTaskBuilder,
        Language.JS: DocsJsTaskBuilder,
    }

    def __init__(self):
        super().__init__("docs", "Generates documentation from code comments in source files")

    def _get_sub_builders(self, project: Project) -> list[TaskBuilder]:
        if project.type == ProjectType.CONTAINER:
            return [NotSupportedTaskBuilder()]
        return [self._LANGUAGE_VARIANTS.get(project.language, NotSupportedTaskBuilder)()]
