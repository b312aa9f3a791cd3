"""
Status use cases — project summary and required-environment pre-flight.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from buildloom.core.config.env_files import merge_env_files
from buildloom.core.config.loader import load_project
from buildloom.core.errors import BuildloomError
from buildloom.core.factories.base import DEFAULT_ENVIRONMENT
from buildloom.core.models.project import Project


@dataclass
class InfoResult:
    """Summary of the loaded project."""

    project: Project | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        p = self.project
        if self.error or p is None:
            return {"error": self.error or "No project loaded"}
        return {
            "name": p.name,
            "description": p.description,
            "version": p.version,
            "type": p.type.value,
            "language": p.language.value,
            "unscoped_name": p.unscoped_name,
            "kebab_cased_name": p.kebab_cased_name,
            "config_file_name": p.config_file_name,
            "root": p.root_dir.absolute_path,
            "required_env": p.get_required_env(),
            "cdk_targets": p.get_cdk_targets(),
            "container_targets": p.get_container_targets(),
        }


def get_info(config_path: Path | None = None) -> InfoResult:
    result = InfoResult()
    try:
        result.project = load_project(config_path)
    except BuildloomError as e:
        result.error = str(e)
    return result


@dataclass
class EnvCheckResult:
    """Which required variables are defined."""

    required: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    env_files: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.missing

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "ok": self.ok,
            "required": self.required,
            "missing": self.missing,
            "env_files": self.env_files,
        }


def check_environment(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> EnvCheckResult:
    """Check ``requiredEnv`` against the environment.

    The deployment env files (``infra/.env.<INFRA_ENV>`` then ``infra/.env``)
    are merged in first, exactly as a deployment would see them.
    """
    result = EnvCheckResult()
    try:
        project = load_project(config_path)
    except BuildloomError as e:
        result.error = str(e)
        return result

    snapshot = dict(os.environ) if env is None else dict(env)
    environment = snapshot.get("INFRA_ENV") or DEFAULT_ENVIRONMENT
    infra_dir = project.root_dir.get_child("infra")
    result.env_files = [
        infra_dir.get_file_path(f".env.{environment}"),
        infra_dir.get_file_path(".env"),
    ]

    merged = merge_env_files(result.env_files, snapshot)
    result.required = project.get_required_env()
    result.missing = project.get_undefined_environment_variables(merged)
    return result
