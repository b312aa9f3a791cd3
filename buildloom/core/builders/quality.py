"""
Code quality builders — format, lint and lint-fix.

All three scan the same source directories (``src``, ``test`` and, for
cloud stacks, ``infra``). TypeScript extensions are only added for
TypeScript projects.
"""

from __future__ import annotations

from buildloom.core.builders.base import (
    ShellTaskBuilder,
    dir_globs,
    ensure_project,
    file_globs,
    language_extensions,
    node_bin,
    source_dirs,
)
from buildloom.core.models.project import Project


def _lint_globs(project: Project) -> list[str]:
    return dir_globs(
        project.root_dir,
        source_dirs(project),
        language_extensions(project, "js", "jsx"),
    )


class FormatTaskBuilder(ShellTaskBuilder):
    """Prettier over sources and README. Formatting failures are tolerated."""

    ignore_failure = True

    def __init__(self):
        super().__init__("format", "Formats all source files, README.md and build scripts")

    def _argv(self, project: Project) -> list[str]:
        paths = dir_globs(
            project.root_dir,
            source_dirs(project),
            language_extensions(project, "js", "jsx", "json"),
        ) + file_globs(project.root_dir, ["README.md"])
        return [node_bin(project, "prettier"), "--write", "--ignore-unknown", *paths]


class LintTaskBuilder(ShellTaskBuilder):
    def __init__(self):
        super().__init__("lint", "Lints all source files")

    def _argv(self, project: Project) -> list[str]:
        return [node_bin(project, "eslint"), *_lint_globs(project)]

    def get_watch_paths(self, project: Project) -> list[str]:
        return _lint_globs(ensure_project(project))


class LintFixTaskBuilder(ShellTaskBuilder):
    def __init__(self):
        super().__init__(
            "lint-fix",
            "Lints all source files and applies automatic fixes where possible",
        )

    def _argv(self, project: Project) -> list[str]:
        return [node_bin(project, "eslint"), "--fix", *_lint_globs(project)]
