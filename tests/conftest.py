"""
Shared test fixtures and configuration.
"""

import copy
import json
from pathlib import Path

import pytest

from buildloom.core.models.project import Project

BASE_DESCRIPTOR = {
    "name": "@scope/my-lib",
    "description": "A sample project",
    "version": "1.2.3",
    "buildMetadata": {"type": "lib", "language": "js"},
}


def make_descriptor(**build_metadata) -> dict:
    """Base descriptor with ``buildMetadata`` keys overridden."""
    descriptor = copy.deepcopy(BASE_DESCRIPTOR)
    descriptor["buildMetadata"].update(build_metadata)
    return descriptor


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Project root used for every fixture project."""
    return tmp_path


@pytest.fixture
def make_project(root: Path):
    """Factory: ``make_project(type="api", container=...)`` rooted at ``root``."""

    def _make(**build_metadata) -> Project:
        return Project(make_descriptor(**build_metadata), root_path=str(root))

    return _make


@pytest.fixture
def lib_project(make_project) -> Project:
    return make_project()


@pytest.fixture
def ts_lib_project(make_project) -> Project:
    return make_project(language="ts")


@pytest.fixture
def write_package_json(root: Path):
    """Write a package.json descriptor into ``root`` and return its path."""

    def _write(**build_metadata) -> Path:
        path = root / "package.json"
        path.write_text(json.dumps(make_descriptor(**build_metadata), indent=2))
        return path

    return _write


@pytest.fixture
def descriptor():
    """Factory: ``descriptor(type="api")`` → a raw descriptor dict."""
    return make_descriptor
