"""
Package builders — turn the staged ``working`` tree into a distributable.

    lib               package-npm
    aws-microservice  package-aws
    api, container    package-container (default target)
    cli               package-container if any container target, else package-npm
    ui                not supported
"""

from __future__ import annotations

from collections.abc import Callable

from buildloom.core.builders.base import (
    CompositeTaskBuilder,
    ShellTaskBuilder,
    TaskBuilder,
    dir_globs,
    ensure_project,
    filesystem_action,
    shell_action,
)
from buildloom.core.builders.not_supported import NotSupportedTaskBuilder
from buildloom.core.errors import InvalidArgumentError
from buildloom.core.models.project import DEFAULT_TARGET, Project
from buildloom.core.models.schema import ProjectType
from buildloom.core.models.task import ActionTask, SeriesTask, Task

_AWS_WATCH_DIRS = ("src", "test", "infra")
_AWS_WATCH_EXTENSIONS = ("md", "html", "json", "js", "jsx", "ts", "tsx")


def package_file_name(project: Project, extension: str) -> str:
    """``<kebab name>-<version>.<extension>``, as written by ``npm pack``."""
    return f"{project.kebab_cased_name}-{project.version}.{extension}"


class PackageNpmTaskBuilder(TaskBuilder):
    """``npm pack`` in the js root, then move the tarball into ``dist``."""

    def __init__(self):
        super().__init__("package-npm", "Package a project for publishing to NPM")

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        package_dir = project.js_root_dir
        package_glob = package_dir.get_file_glob(package_file_name(project, "tgz"))

        return SeriesTask(
            steps=[
                ActionTask(
                    action=shell_action(
                        self._action_id("pack"), ["npm", "pack"], package_dir.absolute_path
                    )
                ),
                ActionTask(
                    action=filesystem_action(
                        self._action_id("copy"),
                        "copy",
                        patterns=[package_glob],
                        base_dir=package_dir.absolute_path,
                        dest_dir=project.root_dir.get_child("dist").absolute_path,
                    )
                ),
                ActionTask(
                    action=filesystem_action(
                        self._action_id("delete"), "delete", patterns=[package_glob]
                    )
                ),
            ]
        )


class PackageAwsTaskBuilder(TaskBuilder):
    """Production install and a zip bundle for a cloud deployment.

    Both steps tolerate failure: the bundle is a convenience artifact, the
    deployment itself runs from the js root.
    """

    def __init__(self):
        super().__init__("package-aws", "Create a distribution package for AWS")

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        js_root = project.js_root_dir
        patterns = [
            js_root.get_child("src").get_all_files_glob(),
            js_root.get_child("node_modules").get_all_files_glob(),
            js_root.get_file_glob("package.json"),
            js_root.get_file_glob(project.config_file_name),
        ]

        return SeriesTask(
            steps=[
                ActionTask(
                    action=shell_action(
                        self._action_id("install"),
                        ["npm", "install", "--production"],
                        js_root.absolute_path,
                    ),
                    ignore_failure=True,
                ),
                ActionTask(
                    action=filesystem_action(
                        self._action_id("archive"),
                        "archive",
                        patterns=patterns,
                        base_dir=js_root.absolute_path,
                        dest_file=project.root_dir.get_child("dist").get_file_path(
                            package_file_name(project, "zip")
                        ),
                    ),
                    ignore_failure=True,
                ),
            ]
        )

    def get_watch_paths(self, project: Project) -> list[str]:
        project = ensure_project(project)
        return dir_globs(project.js_root_dir, _AWS_WATCH_DIRS, _AWS_WATCH_EXTENSIONS)


class PackageContainerTaskBuilder(ShellTaskBuilder):
    """``docker build`` for one container target.

    Args:
        target: Container build key. The ``default`` target names the task
            ``package-container``; any other ``package-container-<target>``.
        repo: Image repository override. Defaults to the target's ``repo``.
    """

    def __init__(self, target: str = DEFAULT_TARGET, repo: str | None = None):
        if not isinstance(target, str) or not target:
            raise InvalidArgumentError("Invalid target (arg #1)")
        if repo is not None and (not isinstance(repo, str) or not repo):
            raise InvalidArgumentError("Invalid repo (arg #2)")

        suffix = "" if target == DEFAULT_TARGET else f"-{target}"
        super().__init__(
            f"package-container{suffix}",
            f"Package a project for publishing to a container registry ({target})",
        )
        self._target = target
        self._repo = repo

    @property
    def target(self) -> str:
        return self._target

    def _argv(self, project: Project) -> list[str]:
        definition = project.get_container_definition(self._target)
        repo = self._repo or definition.repo

        build_args = {
            "APP_NAME": project.unscoped_name,
            "APP_VERSION": project.version,
            "APP_DESCRIPTION": project.description,
            "CONFIG_FILE_NAME": project.config_file_name,
            **definition.build_args,
        }

        argv = [
            "docker",
            "build",
            "--rm",
            "--file",
            definition.build_file,
            "--tag",
            f"{repo}:latest",
        ]
        for key, value in build_args.items():
            argv += ["--build-arg", f"{key}={value}"]
        for secret_id, secret in definition.build_secrets.items():
            argv += ["--secret", f"id={secret_id},type={secret.type},src={secret.src}"]
        argv.append(".")
        return argv

    def _cwd(self, project: Project) -> str:
        return project.js_root_dir.absolute_path


class PackageTaskBuilder(CompositeTaskBuilder):
    """Selects the packaging variant for the project type."""

    def __init__(self):
        super().__init__("package", "Create a distribution package for the project")

    @staticmethod
    def _cli_variant(project: Project) -> TaskBuilder:
        if project.get_container_targets():
            return PackageContainerTaskBuilder(DEFAULT_TARGET)
        return PackageNpmTaskBuilder()

    _VARIANTS: dict[ProjectType, Callable[[Project], TaskBuilder]] = {
        ProjectType.LIB: lambda _: PackageNpmTaskBuilder(),
        ProjectType.AWS_MICROSERVICE: lambda _: PackageAwsTaskBuilder(),
        ProjectType.API: lambda _: PackageContainerTaskBuilder(DEFAULT_TARGET),
        ProjectType.CONTAINER: lambda _: PackageContainerTaskBuilder(DEFAULT_TARGET),
        ProjectType.CLI: lambda p: PackageTaskBuilder._cli_variant(p),
    }

    def _get_sub_builders(self, project: Project) -> list[TaskBuilder]:
        variant = self._VARIANTS.get(project.type)
        if variant is None:
            return [NotSupportedTaskBuilder()]
        return [variant(project)]
