"""
Per-type task factories.

Each factory returns a fixed, ordered builder list. Types that can build
several container images (or deploy several stacks) append one builder
per extra target after the generic ones.
"""

from __future__ import annotations

from buildloom.core.builders import (
    BuildTaskBuilder,
    CleanTaskBuilder,
    DocsTaskBuilder,
    FormatTaskBuilder,
    LintFixTaskBuilder,
    LintTaskBuilder,
    NotSupportedTaskBuilder,
    PackageTaskBuilder,
    PublishAwsTaskBuilder,
    PublishContainerTaskBuilder,
    PublishTaskBuilder,
    TaskBuilder,
    TestTaskBuilder,
    TestUiTaskBuilder,
)
from buildloom.core.factories.base import (
    TaskFactory,
    generate_additional_container_builders,
)
from buildloom.core.models.project import DEFAULT_TARGET


def _code_quality() -> list[TaskBuilder]:
    return [
        CleanTaskBuilder(),
        FormatTaskBuilder(),
        LintTaskBuilder(),
        LintFixTaskBuilder(),
    ]


class LibTaskFactory(TaskFactory):
    def _create_task_builders(self) -> list[TaskBuilder]:
        return [
            *_code_quality(),
            TestTaskBuilder("unit"),
            DocsTaskBuilder(),
            BuildTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
        ]


class CliTaskFactory(TaskFactory):
    """Library task set. Container targets, if any, replace npm packaging."""

    def _create_task_builders(self) -> list[TaskBuilder]:
        return [
            *_code_quality(),
            TestTaskBuilder("unit"),
            DocsTaskBuilder(),
            BuildTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
            *generate_additional_container_builders(self.project),
        ]


class ApiTaskFactory(TaskFactory):
    def _create_task_builders(self) -> list[TaskBuilder]:
        return [
            *_code_quality(),
            TestTaskBuilder("unit"),
            TestTaskBuilder("api"),
            DocsTaskBuilder(),
            BuildTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
            *generate_additional_container_builders(self.project),
        ]


class AwsMicroserviceTaskFactory(TaskFactory):
    """Generic tasks plus one ``publish-aws-<target>`` per extra CDK stack."""

    def _create_task_builders(self) -> list[TaskBuilder]:
        stack_builders: list[TaskBuilder] = [
            PublishAwsTaskBuilder(target, self.environment, self.no_prompt)
            for target in self.project.get_cdk_targets()
            if target != DEFAULT_TARGET
        ]
        return [
            *_code_quality(),
            TestTaskBuilder("unit"),
            TestTaskBuilder("api"),
            DocsTaskBuilder(),
            BuildTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
            *stack_builders,
        ]


class ContainerTaskFactory(TaskFactory):
    """Image-only projects: nothing to test or compile."""

    def _create_task_builders(self) -> list[TaskBuilder]:
        return [
            *_code_quality(),
            DocsTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
            *generate_additional_container_builders(self.project),
        ]


class UiTaskFactory(TaskFactory):
    """Web UI projects. A default container publish is added when declared."""

    def _create_task_builders(self) -> list[TaskBuilder]:
        builders: list[TaskBuilder] = [
            *_code_quality(),
            TestUiTaskBuilder(),
            DocsTaskBuilder(),
            BuildTaskBuilder(),
            PackageTaskBuilder(),
            PublishTaskBuilder(self.environment, self.no_prompt),
        ]
        if self.project.get_container_targets():
            builders.append(PublishContainerTaskBuilder(DEFAULT_TARGET))
        builders.extend(generate_additional_container_builders(self.project))
        return builders


class NotSupportedTaskFactory(TaskFactory):
    """Fallback for a type with no factory: a single not-supported notice."""

    def _create_task_builders(self) -> list[TaskBuilder]:
        return [
            NotSupportedTaskBuilder(
                f"No tasks defined for project type '{self.project.type.value}'"
            )
        ]
