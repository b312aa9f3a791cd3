"""Test builders — instrumented mocha suites and jest-based UI tests."""

from __future__ import annotations

from buildloom.core.builders.base import (
    ShellTaskBuilder,
    dir_globs,
    ensure_project,
    node_bin,
)
from buildloom.core.errors import InvalidArgumentError
from buildloom.core.models.project import Project

TEST_TYPES = ("unit", "api", "int")

_UI_WATCH_DIRS = ("src", "test", "infra")
_UI_WATCH_EXTENSIONS = ("md", "html", "json", "js", "jsx", "ts", "tsx")


class TestTaskBuilder(ShellTaskBuilder):
    """Runs one test suite under c8 coverage.

    Args:
        test_type: One of ``unit``, ``api`` or ``int``.
    """

    __test__ = False  # not a pytest class

    def __init__(self, test_type: str):
        if test_type not in TEST_TYPES:
            raise InvalidArgumentError("Invalid testType (arg #1)")
        super().__init__(f"test-{test_type}", f"Execute {test_type} tests")
        self._test_type = test_type

    @property
    def test_type(self) -> str:
        return self._test_type

    def _argv(self, project: Project) -> list[str]:
        suite_dir = project.js_root_dir.get_child(f"test/{self._test_type}")
        return [
            node_bin(project, "c8"),
            node_bin(project, "mocha"),
            "--recursive",
            suite_dir.absolute_path,
        ]

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dir_globs(project.js_root_dir, ["src", f"test/{self._test_type}"], ["js"])


class TestUiTaskBuilder(ShellTaskBuilder):
    """Jest with coverage. Failures are reported, not fatal."""

    __test__ = False
    ignore_failure = True

    def __init__(self):
        super().__init__("test-ui", "Execute web UI tests")

    def _argv(self, project: Project) -> list[str]:
        return [node_bin(project, "jest"), "--config", "jest.config.js", "--coverage"]

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dir_globs(project.js_root_dir, _UI_WATCH_DIRS, _UI_WATCH_EXTENSIONS)
