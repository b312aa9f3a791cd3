"""
Tests for task factories — per-type task lists, extras and watch derivation.
"""

import pytest

from buildloom.core.errors import InvalidArgumentError
from buildloom.core.factories import (
    ApiTaskFactory,
    AwsMicroserviceTaskFactory,
    CliTaskFactory,
    ContainerTaskFactory,
    LibTaskFactory,
    NotSupportedTaskFactory,
    UiTaskFactory,
    create_task_factory,
    generate_additional_container_builders,
    resolve_factory_class,
)
from buildloom.core.models import NoticeTask, ParallelTask, WatchTask

CONTAINERS = {
    "default": {"repo": "registry.example.com/my-app"},
    "arm": {"repo": "registry.example.com/my-app-arm", "buildFile": "Dockerfile.arm"},
}

AWS = {"stacks": {"default": "my-stack", "eu": "my-stack-eu", "us": "my-stack-us"}}

QUALITY = ["clean", "format", "lint", "lint-fix"]


def task_names(factory) -> list[str]:
    return [t.name for t in factory.create_tasks()]


def task_by_name(tasks, name):
    return next(t for t in tasks if t.name == name)


class TestResolution:
    @pytest.mark.parametrize(
        "project_type,factory_class",
        [
            ("lib", LibTaskFactory),
            ("cli", CliTaskFactory),
            ("api", ApiTaskFactory),
            ("aws-microservice", AwsMicroserviceTaskFactory),
            ("container", ContainerTaskFactory),
            ("ui", UiTaskFactory),
        ],
    )
    def test_known_types(self, project_type, factory_class):
        assert resolve_factory_class(project_type) is factory_class

    @pytest.mark.parametrize("project_type", ["desktop", "", None, 42])
    def test_unknown_types_fall_back(self, project_type):
        assert resolve_factory_class(project_type) is NotSupportedTaskFactory

    def test_create_task_factory(self, lib_project):
        factory = create_task_factory(lib_project, env={})
        assert isinstance(factory, LibTaskFactory)
        assert factory.project is lib_project

    def test_create_task_factory_rejects_non_project(self):
        with pytest.raises(InvalidArgumentError):
            create_task_factory({"name": "x"})

    def test_not_supported_factory(self, lib_project):
        tasks = NotSupportedTaskFactory(lib_project, env={}).create_tasks()
        assert len(tasks) == 1
        assert isinstance(tasks[0], NoticeTask)
        assert tasks[0].message == "No tasks defined for project type 'lib'"


class TestEnvironment:
    def test_defaults(self, lib_project):
        factory = LibTaskFactory(lib_project, env={})
        assert factory.environment == "dev"
        assert factory.no_prompt is False

    def test_reads_infra_variables(self, lib_project):
        factory = LibTaskFactory(lib_project, env={"INFRA_ENV": "prod", "INFRA_NO_PROMPT": "true"})
        assert factory.environment == "prod"
        assert factory.no_prompt is True

    def test_no_prompt_requires_literal_true(self, lib_project):
        assert LibTaskFactory(lib_project, env={"INFRA_NO_PROMPT": "1"}).no_prompt is False

    def test_snapshot_taken_at_construction(self, lib_project, monkeypatch):
        monkeypatch.setenv("INFRA_ENV", "staging")
        factory = LibTaskFactory(lib_project)
        monkeypatch.setenv("INFRA_ENV", "prod")
        assert factory.environment == "staging"

    def test_deploy_uses_environment(self, make_project):
        project = make_project(type="aws-microservice", aws=AWS)
        tasks = AwsMicroserviceTaskFactory(
            project, env={"INFRA_ENV": "qa", "INFRA_NO_PROMPT": "true"}
        ).create_tasks()
        deploy = task_by_name(tasks, "publish-aws-eu")
        assert deploy.action.params["env_files"][0].endswith(".env.qa")
        assert "--require-approval=never" in deploy.action.params["argv"]


class TestAdditionalContainerBuilders:
    def test_one_pair_per_extra_target(self, make_project):
        project = make_project(type="api", container=CONTAINERS)
        builders = generate_additional_container_builders(project)
        assert [b.name for b in builders] == ["package-container-arm", "publish-container-arm"]

    def test_default_only_yields_nothing(self, make_project):
        project = make_project(type="api", container={"default": CONTAINERS["default"]})
        assert generate_additional_container_builders(project) == []

    def test_no_containers_yields_nothing(self, lib_project):
        assert generate_additional_container_builders(lib_project) == []

    def test_declaration_order(self, make_project):
        containers = {
            "zeta": {"repo": "r/z"},
            "default": {"repo": "r/d"},
            "alpha": {"repo": "r/a"},
        }
        project = make_project(type="container", container=containers)
        names = [b.name for b in generate_additional_container_builders(project)]
        assert names == [
            "package-container-zeta",
            "publish-container-zeta",
            "package-container-alpha",
            "publish-container-alpha",
        ]

    def test_custom_builders(self, make_project):
        from buildloom.core.builders import PublishContainerTaskBuilder

        project = make_project(type="api", container=CONTAINERS)
        builders = generate_additional_container_builders(
            project, lambda t: [PublishContainerTaskBuilder(t, "edge")]
        )
        assert [b.name for b in builders] == ["publish-container-arm"]


class TestTaskLists:
    def test_lib(self, lib_project):
        assert task_names(LibTaskFactory(lib_project, env={})) == [
            *QUALITY,
            "test-unit",
            "docs",
            "build",
            "package",
            "publish",
            "watch-lint",
            "watch-test-unit",
            "watch-docs",
            "watch-build",
        ]

    def test_cli_with_containers(self, make_project):
        project = make_project(type="cli", container=CONTAINERS)
        names = task_names(CliTaskFactory(project, env={}))
        assert names[:9] == [*QUALITY, "test-unit", "docs", "build", "package", "publish"]
        assert names[9:11] == ["package-container-arm", "publish-container-arm"]

    def test_api(self, make_project):
        project = make_project(type="api", container=CONTAINERS)
        names = task_names(ApiTaskFactory(project, env={}))
        assert names == [
            *QUALITY,
            "test-unit",
            "test-api",
            "docs",
            "build",
            "package",
            "publish",
            "package-container-arm",
            "publish-container-arm",
            "watch-lint",
            "watch-test-unit",
            "watch-test-api",
            "watch-docs",
            "watch-build",
        ]

    def test_aws_microservice(self, make_project):
        project = make_project(type="aws-microservice", aws=AWS)
        names = task_names(AwsMicroserviceTaskFactory(project, env={}))
        assert names[:10] == [
            *QUALITY, "test-unit", "test-api", "docs", "build", "package", "publish",
        ]
        assert names[10:12] == ["publish-aws-eu", "publish-aws-us"]
        assert "watch-package" in names

    def test_container_has_no_tests_or_build(self, make_project):
        project = make_project(type="container", container=CONTAINERS)
        names = task_names(ContainerTaskFactory(project, env={}))
        assert names == [
            *QUALITY,
            "docs",
            "package",
            "publish",
            "package-container-arm",
            "publish-container-arm",
            "watch-lint",
        ]

    def test_container_selects_registry_variants(self, make_project):
        project = make_project(type="container", container=CONTAINERS)
        tasks = ContainerTaskFactory(project, env={}).create_tasks()
        package = task_by_name(tasks, "package")
        publish = task_by_name(tasks, "publish")
        assert [c.name for c in package.children] == ["package-container"]
        assert [c.name for c in publish.children] == ["publish-container"]
        assert isinstance(publish.children[0], ParallelTask)

    def test_ui_without_containers(self, make_project):
        names = task_names(UiTaskFactory(make_project(type="ui"), env={}))
        assert "test-ui" in names
        assert "publish-container" not in names
        assert "watch-test-ui" in names

    def test_ui_with_containers(self, make_project):
        project = make_project(type="ui", container=CONTAINERS)
        names = task_names(UiTaskFactory(project, env={}))
        publish_at = names.index("publish")
        assert names[publish_at + 1 : publish_at + 4] == [
            "publish-container",
            "package-container-arm",
            "publish-container-arm",
        ]


class TestWatchDerivation:
    def test_watch_tasks_follow_primaries(self, make_project):
        project = make_project(type="api", container=CONTAINERS)
        tasks = ApiTaskFactory(project, env={}).create_tasks()
        kinds = [isinstance(t, WatchTask) for t in tasks]
        first_watch = kinds.index(True)
        assert all(kinds[first_watch:])
        assert not any(kinds[:first_watch])

    def test_watch_only_for_builders_with_paths(self, lib_project):
        factory = LibTaskFactory(lib_project, env={})
        with_paths = [
            b.name for b in factory.get_task_builders() if b.get_watch_paths(lib_project)
        ]
        watch_names = [t.name for t in factory.create_tasks() if isinstance(t, WatchTask)]
        assert watch_names == [f"watch-{n}" for n in with_paths]

    def test_watch_wraps_built_task(self, lib_project):
        tasks = LibTaskFactory(lib_project, env={}).create_tasks()
        lint = task_by_name(tasks, "lint")
        watch = task_by_name(tasks, "watch-lint")
        assert watch.task is lint
        assert watch.paths == lint.action.params["argv"][1:]

    def test_create_tasks_is_repeatable(self, lib_project):
        factory = LibTaskFactory(lib_project, env={})
        first = [t.to_dict() for t in factory.create_tasks()]
        second = [t.to_dict() for t in factory.create_tasks()]
        assert first == second
