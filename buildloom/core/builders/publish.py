"""
Publish builders — push a packaged artifact to its registry or cloud.

    lib               publish-npm
    aws-microservice  publish-aws (default stack), not supported without one
    api, container    publish-container (default target)
    cli               publish-container if any container target, else publish-npm
    ui                not supported (containers are added by the factory)
"""

from __future__ import annotations

from buildloom.core.builders.base import (
    CompositeTaskBuilder,
    ShellTaskBuilder,
    TaskBuilder,
    ensure_project,
    shell_action,
)
from buildloom.core.builders.not_supported import NotSupportedTaskBuilder
from buildloom.core.builders.package import package_file_name
from buildloom.core.errors import InvalidArgumentError
from buildloom.core.models.project import DEFAULT_TARGET, Project
from buildloom.core.models.schema import ProjectType
from buildloom.core.models.task import ActionTask, ParallelTask, SeriesTask, Task
from buildloom.core.utils.semver import semver_components


def _target_suffix(target: str) -> str:
    return "" if target == DEFAULT_TARGET else f"-{target}"


class PublishNpmTaskBuilder(ShellTaskBuilder):
    def __init__(self):
        super().__init__("publish-npm", "Publish a project to an NPM registry")

    def _argv(self, project: Project) -> list[str]:
        return ["npm", "publish", package_file_name(project, "tgz")]

    def _cwd(self, project: Project) -> str:
        return project.root_dir.get_child("dist").absolute_path


class PublishAwsTaskBuilder(ShellTaskBuilder):
    """``cdk deploy`` of one stack.

    The shell adapter loads ``infra/.env.<environment>`` and then
    ``infra/.env`` (first definition wins) and refuses to run while a
    required variable is still undefined.

    Args:
        target: CDK stack key.
        environment: Deployment environment, selects the env file.
        no_prompt: Skip the interactive approval of security changes.
    """

    def __init__(self, target: str, environment: str = "dev", no_prompt: bool = False):
        if not isinstance(target, str) or not target:
            raise InvalidArgumentError("Invalid target (arg #1)")
        if not isinstance(environment, str) or not environment:
            raise InvalidArgumentError("Invalid environment (arg #2)")
        if not isinstance(no_prompt, bool):
            raise InvalidArgumentError("Invalid noPrompt (arg #3)")

        super().__init__(
            f"publish-aws{_target_suffix(target)}",
            f"Publish a CDK project to AWS ({target})",
        )
        self._target = target
        self._environment = environment
        self._no_prompt = no_prompt

    @property
    def target(self) -> str:
        return self._target

    def _argv(self, project: Project) -> list[str]:
        definition = project.get_cdk_stack_definition(self._target)
        app = project.js_root_dir.get_child("infra").get_file_path("index")

        argv = ["cdk", "deploy"]
        if self._no_prompt:
            argv.append("--require-approval=never")
        argv += [definition["name"], "--app", app]
        return argv

    def _cwd(self, project: Project) -> str:
        return project.js_root_dir.absolute_path

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        infra_dir = project.root_dir.get_child("infra")
        return ActionTask(
            action=shell_action(
                self._action_id("deploy"),
                self._argv(project),
                self._cwd(project),
                env_files=[
                    infra_dir.get_file_path(f".env.{self._environment}"),
                    infra_dir.get_file_path(".env"),
                ],
                required_env=project.get_required_env(),
            )
        )


class PublishContainerTaskBuilder(TaskBuilder):
    """Tag the built image with every semver component and push each tag.

    Each tag is a ``docker tag`` / ``docker push`` series; the series for
    different tags run in parallel.

    Args:
        target: Container build key.
        tag: Version to publish. Defaults to the project version.
    """

    def __init__(self, target: str = DEFAULT_TARGET, tag: str | None = None):
        if not isinstance(target, str) or not target:
            raise InvalidArgumentError("Invalid target (arg #1)")
        if tag is not None and (not isinstance(tag, str) or not tag):
            raise InvalidArgumentError("Invalid tag (arg #2)")

        super().__init__(
            f"publish-container{_target_suffix(target)}",
            f"Publish container image for {target}:{tag or 'version'}",
        )
        self._target = target
        self._tag = tag

    @property
    def target(self) -> str:
        return self._target

    def _create_task(self, project: Project) -> Task:
        project = ensure_project(project)
        repo = project.get_container_definition(self._target).repo
        cwd = project.root_dir.absolute_path
        source = f"{repo}:latest"

        branches: list[Task] = []
        for tag in semver_components(self._tag or project.version):
            image = f"{repo}:{tag}"
            branches.append(
                SeriesTask(
                    name=f"{self.name}:{tag}",
                    description=f"Tag and push image {image}",
                    steps=[
                        ActionTask(
                            action=shell_action(
                                self._action_id(f"tag:{tag}"),
                                ["docker", "tag", source, image],
                                cwd,
                            )
                        ),
                        ActionTask(
                            action=shell_action(
                                self._action_id(f"push:{tag}"),
                                ["docker", "push", image],
                                cwd,
                            )
                        ),
                    ],
                )
            )
        return ParallelTask(branches=branches)


class PublishTaskBuilder(CompositeTaskBuilder):
    """Selects the publish variant for the project type.

    Args:
        environment: Deployment environment handed to ``publish-aws``.
        no_prompt: Handed to ``publish-aws``.
    """

    def __init__(self, environment: str = "dev", no_prompt: bool = False):
        super().__init__("publish", "Publish the project to its registry or cloud")
        self._environment = environment
        self._no_prompt = no_prompt

    def _get_sub_builders(self, project: Project) -> list[TaskBuilder]:
        project_type = project.type

        if project_type == ProjectType.LIB:
            return [PublishNpmTaskBuilder()]

        if project_type == ProjectType.AWS_MICROSERVICE:
            if DEFAULT_TARGET not in project.get_cdk_targets():
                return [
                    NotSupportedTaskBuilder(
                        "No default CDK stack defined. Use one of the publish-aws-<target> tasks."
                    )
                ]
            return [
                PublishAwsTaskBuilder(DEFAULT_TARGET, self._environment, self._no_prompt)
            ]

        if project_type in (ProjectType.API, ProjectType.CONTAINER):
            return [PublishContainerTaskBuilder(DEFAULT_TARGET)]

        if project_type == ProjectType.CLI:
            if project.get_container_targets():
                return [PublishContainerTaskBuilder(DEFAULT_TARGET)]
            return [PublishNpmTaskBuilder()]

        return [NotSupportedTaskBuilder()]
