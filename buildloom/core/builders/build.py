"""
Build builders — compile or copy sources into the ``working`` staging tree.

    ui         build-ui (bundler) then copy-files
    container  not supported
    ts         build-ts (compiler) then copy-files
    js         build-js (plain copy) then copy-files
"""

from __future__ import annotations

from collections.abc import Callable

from buildloom.core.builders.base import (
    CompositeTaskBuilder,
    ShellTaskBuilder,
    TaskBuilder,
    dir_globs,
    ensure_project,
    file_globs,
    filesystem_action,
    node_bin,
    source_dirs,
)
from buildloom.core.builders.not_supported import NotSupportedTaskBuilder
from buildloom.core.models.project import Project
from buildloom.core.models.schema import Language, ProjectType
from buildloom.core.models.task import ActionTask, Task

# Top-level files staged with every build, besides per-container build files
_EXTRA_FILES = (
    "package-lock.json",
    "package.json",
    "LICENSE",
    "README.md",
    "nginx.conf",
    ".env",
    ".npmignore",
    ".npmrc",
)


def _copy_to_working(action_id: str, project: Project, patterns: list[str]) -> ActionTask:
    root = project.root_dir
    return ActionTask(
        action=filesystem_action(
            action_id,
            "copy",
            patterns=patterns,
            base_dir=root.absolute_path,
            dest_dir=root.get_child("working").absolute_path,
        )
    )


class BuildJsTaskBuilder(TaskBuilder):
    def __init__(self):
        super().__init__(
            "build-js",
            "Copies javascript files from source to destination directories",
        )

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        return _copy_to_working(self._action_id("copy"), project, self.get_watch_paths(project))

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dir_globs(project.root_dir, source_dirs(project), ["js"])


class BuildTsTaskBuilder(ShellTaskBuilder):
    """Runs the TypeScript compiler into ``working``.

    Compiler errors are reported but tolerated, so a watch loop keeps going
    while sources are mid-edit.
    """

    ignore_failure = True

    def __init__(self):
        super().__init__(
            "build-ts",
            "Build typescript files and writes them to the build directory",
        )

    def _argv(self, project: Project) -> list[str]:
        return [
            node_bin(project, "tsc"),
            "--project",
            project.root_dir.get_file_path("tsconfig.json"),
            "--outDir",
            project.root_dir.get_child("working").absolute_path,
        ]

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dir_globs(project.root_dir, source_dirs(project), ["ts"])


class BuildUiTaskBuilder(ShellTaskBuilder):
    ignore_failure = True

    def __init__(self):
        super().__init__("build-ui", "Build web ui project")

    def _argv(self, project: Project) -> list[str]:
        return [node_bin(project, "vite"), "build"]


class CopyFilesTaskBuilder(TaskBuilder):
    """Stages static files: json + declared patterns, plus top-level extras."""

    def __init__(self):
        super().__init__(
            "copy-files",
            "Copies project files from source to build directories",
        )

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        root = project.root_dir

        extensions = ["json", *project.get_static_file_patterns()]
        build_files = [
            project.get_container_definition(t).build_file
            for t in project.get_container_targets()
        ]
        extras = [project.config_file_name, *_EXTRA_FILES, *build_files]

        patterns = dir_globs(
            root, source_dirs(project, "src", "test", "scripts"), extensions
        ) + file_globs(root, dict.fromkeys(extras))
        return _copy_to_working(self._action_id("copy"), project, patterns)


class BuildTaskBuilder(CompositeTaskBuilder):
    """Selects the build variant for the project type and language."""

    _TYPE_VARIANTS: dict[ProjectType, Callable[[], list[TaskBuilder]]] = {
        ProjectType.UI: lambda: [BuildUiTaskBuilder(), CopyFilesTaskBuilder()],
        ProjectType.CONTAINER: lambda: [NotSupportedTaskBuilder()],
    }
    _LANGUAGE_VARIANTS: dict[Language, Callable[[], list[TaskBuilder]]] = {
        Language.TS: lambda: [BuildTsTaskBuilder(), CopyFilesTaskBuilder()],
        Language.JS: lambda: [BuildJsTaskBuilder(), CopyFilesTaskBuilder()],
    }

    def __init__(self):
        super().__init__("build", "Builds the project making it ready for execution/packaging")

    def _get_sub_builders(self, project: Project) -> list[TaskBuilder]:
        variant = self._TYPE_VARIANTS.get(project.type)
        if variant is None:
            variant = self._LANGUAGE_VARIANTS.get(project.language, lambda: [NotSupportedTaskBuilder()])
        return variant()
