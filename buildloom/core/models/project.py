"""
Project model — the validated, read-only view of a project descriptor.

Every task builder queries the project through this surface. A Project is
built once from a raw descriptor and never changes afterwards; any getter
that returns a collection or object returns a copy.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from buildloom.core.errors import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    SchemaValidationError,
)
from buildloom.core.models.directory import Directory
from buildloom.core.models.schema import (
    ContainerTarget,
    Language,
    ProjectDescriptor,
    ProjectType,
)
from buildloom.core.utils.naming import config_file_name, kebab_cased_name, unscoped_name
from buildloom.core.utils.semver import normalize_version

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "default"

# Types whose package/publish tasks need a default container build
_CONTAINER_REQUIRED_TYPES = (ProjectType.API, ProjectType.CONTAINER)

_SOURCE_TREE: dict[str, Any] = {
    "src": None,
    "test": {"unit": None, "api": None, "int": None},
    "infra": None,
    "scripts": None,
}


def _skeleton_tree() -> dict[str, Any]:
    """Canonical project layout, as a fresh mutable mapping."""
    working = _copy_tree(_SOURCE_TREE)
    working["node_modules"] = None

    tree = _copy_tree(_SOURCE_TREE)
    tree.update(
        {
            "working": working,
            "dist": None,
            "docs": None,
            "node_modules": None,
            "coverage": None,
            ".gulp": None,
            ".tscache": None,
            "logs": None,
            "cdk.out": None,
        }
    )
    return tree


def _copy_tree(tree: dict[str, Any]) -> dict[str, Any]:
    return {k: _copy_tree(v) if isinstance(v, dict) else v for k, v in tree.items()}


def _merge_path(tree: dict[str, Any], rel_path: str) -> None:
    """Merge a ``/``-separated directory path into a tree mapping."""
    node = tree
    for segment in (s for s in rel_path.split("/") if s and s != "."):
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child


def _schema_error(exc: PydanticValidationError) -> SchemaValidationError:
    """Reduce a pydantic error to the first offending field."""
    first = exc.errors()[0]
    field_path = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return SchemaValidationError(field_path, first.get("msg", "is invalid"))


class Project:
    """Validated project configuration.

    Args:
        descriptor: Raw descriptor mapping, usually the parsed contents
            of ``package.json`` with a ``buildMetadata`` section.
        root_path: Project root. Relative paths resolve against the cwd.

    Raises:
        InvalidArgumentError: ``descriptor`` is not a mapping.
        SchemaValidationError: A field is missing or malformed.
        ConfigurationError: The descriptor is valid but incomplete for its
            project type (e.g. an aws-microservice without stacks).
    """

    def __init__(self, descriptor: Mapping[str, Any], root_path: str = "./"):
        if not isinstance(descriptor, Mapping):
            raise InvalidArgumentError("Invalid project definition (arg #1)")
        if not isinstance(root_path, str) or not root_path:
            raise InvalidArgumentError("Invalid root path (arg #2)")

        try:
            parsed = ProjectDescriptor.model_validate(dict(descriptor))
        except PydanticValidationError as e:
            raise _schema_error(e) from e

        version = normalize_version(parsed.version)
        if version is None:
            raise SchemaValidationError("version", "is not a valid semantic version")

        meta = parsed.build_metadata
        self._check_targets(meta.type, meta.aws, meta.container)

        self._name = parsed.name
        self._description = parsed.description
        self._version = version
        self._type = meta.type
        self._language = meta.language
        self._required_env = list(meta.required_env)
        self._static_file_patterns = list(meta.static_file_patterns)
        self._static_dirs = list(meta.static_dirs)
        self._cdk_stacks: dict[str, str] = dict(meta.aws.stacks) if meta.aws else {}
        self._container_targets: dict[str, ContainerTarget] = dict(meta.container or {})

        self._unscoped_name = unscoped_name(self._name)
        self._kebab_cased_name = kebab_cased_name(self._name)
        self._config_file_name = config_file_name(self._name)
        self._root_dir = self._init_tree(root_path)

        logger.debug(
            "Project '%s' %s (%s/%s)", self._name, self._version,
            self._type.value, self._language.value,
        )

    @staticmethod
    def _check_targets(project_type: ProjectType, aws: Any, container: Any) -> None:
        if aws is not None and not aws.stacks:
            raise ConfigurationError("No AWS stacks defined")
        if container is not None:
            if not container:
                raise ConfigurationError("No container builds defined")
            if DEFAULT_TARGET not in container:
                raise SchemaValidationError(
                    "buildMetadata.container",
                    f"must have required property '{DEFAULT_TARGET}'",
                )

        if project_type == ProjectType.AWS_MICROSERVICE and aws is None:
            raise ConfigurationError(
                "The project is an AWS microservice, but does not define AWS configuration"
            )
        if project_type in _CONTAINER_REQUIRED_TYPES and container is None:
            raise ConfigurationError(
                f"Projects of type '{project_type.value}' must define container builds"
            )

    def _init_tree(self, root_path: str) -> Directory:
        tree = _skeleton_tree()
        for static_dir in self._static_dirs:
            _merge_path(tree, static_dir)
            _merge_path(tree["working"], static_dir)
        return Directory.create_tree(root_path, tree)

    # ── Identity ────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def version(self) -> str:
        return self._version

    @property
    def type(self) -> ProjectType:
        return self._type

    @property
    def language(self) -> Language:
        return self._language

    @property
    def unscoped_name(self) -> str:
        """Name without its ``@scope/`` prefix."""
        return self._unscoped_name

    @property
    def kebab_cased_name(self) -> str:
        """Name safe for package file names (``@a/b`` → ``a-b``)."""
        return self._kebab_cased_name

    @property
    def config_file_name(self) -> str:
        """Runtime config file expected by the project (``.myLibrc``)."""
        return self._config_file_name

    # ── Layout ──────────────────────────────────────────────────

    @property
    def root_dir(self) -> Directory:
        return self._root_dir

    @property
    def js_root_dir(self) -> Directory:
        """Directory holding runnable javascript.

        TypeScript projects compile into ``working``; javascript projects
        run from the root.
        """
        if self._language == Language.TS:
            return self._root_dir.get_child("working")
        return self._root_dir

    # ── Collections (copies) ────────────────────────────────────

    def get_required_env(self) -> list[str]:
        return list(self._required_env)

    def get_static_file_patterns(self) -> list[str]:
        return list(self._static_file_patterns)

    def get_static_dirs(self) -> list[str]:
        return list(self._static_dirs)

    def get_cdk_targets(self) -> list[str]:
        """CDK stack keys, in declaration order."""
        return list(self._cdk_stacks)

    def get_cdk_stack_definition(self, target: str) -> dict[str, str]:
        """Stack definition for a target key: ``{"name": <stack name>}``."""
        if not isinstance(target, str) or not target:
            raise InvalidArgumentError("Invalid target (arg #1)")
        if target not in self._cdk_stacks:
            raise NotFoundError(f"CDK target not defined: [{target}]")
        return {"name": self._cdk_stacks[target]}

    def get_container_targets(self) -> list[str]:
        """Container build keys, in declaration order."""
        return list(self._container_targets)

    def get_container_definition(self, target: str) -> ContainerTarget:
        """Normalized container build definition for a target key."""
        if not isinstance(target, str) or not target:
            raise InvalidArgumentError("Invalid target (arg #1)")
        if target not in self._container_targets:
            raise NotFoundError(f"Container target not defined: [{target}]")
        return self._container_targets[target].model_copy(deep=True)

    # ── Environment ─────────────────────────────────────────────

    def get_undefined_environment_variables(
        self,
        env: Mapping[str, str] | None = None,
    ) -> list[str]:
        """Required variables missing (or empty) in an environment snapshot.

        Args:
            env: Environment to check. Defaults to a snapshot of ``os.environ``.

        Returns:
            Missing names, in ``required_env`` order.
        """
        snapshot = dict(os.environ) if env is None else env
        return [name for name in self._required_env if not snapshot.get(name)]

    def __repr__(self) -> str:
        return f"<Project name={self._name!r} type={self._type.value!r} language={self._language.value!r}>"
