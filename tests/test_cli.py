"""
Tests for CLI commands — info, tasks, env-check, run and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from buildloom.core.use_cases.run import RunResult, run_task
from buildloom.core.use_cases.status import InfoResult, check_environment
from buildloom.core.use_cases.tasks import list_tasks
from buildloom.main import cli

CONTAINERS = {"default": {"repo": "registry.example.com/my-lib"}}


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestCLIGlobal:
    def test_help(self):
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "build, test, package and publish" in result.output
        for command in ("info", "tasks", "env-check", "run"):
            assert command in result.output

    def test_version(self):
        result = _invoke("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config(self, tmp_path: Path):
        result = _invoke("--config", str(tmp_path / "nope.yml"), "info")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestInfoCommand:
    def test_human(self, write_package_json):
        path = write_package_json()
        result = _invoke("--config", str(path), "info")
        assert result.exit_code == 0
        assert "@scope/my-lib 1.2.3" in result.output
        assert "Type: lib (js)" in result.output
        assert ".myLibrc" in result.output

    def test_json(self, write_package_json):
        path = write_package_json(type="api", container=CONTAINERS)
        result = _invoke("--config", str(path), "info", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["type"] == "api"
        assert data["kebab_cased_name"] == "scope-my-lib"
        assert data["container_targets"] == ["default"]


class TestTasksCommand:
    def test_human(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "tasks")
        assert result.exit_code == 0
        assert "clean" in result.output
        assert "watch-lint" in result.output
        assert "[Monitor and execute] Lints all source files" in result.output

    def test_json(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "tasks", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        names = [t["name"] for t in data["tasks"]]
        assert names[0] == "clean"
        assert "publish" in names
        watch = next(t for t in data["tasks"] if t["name"] == "watch-lint")
        assert watch["kind"] == "watch"
        assert watch["paths"]

    def test_invalid_descriptor(self, tmp_path: Path):
        path = tmp_path / "buildloom.yml"
        path.write_text("name: x\nversion: nope\nbuildMetadata: {type: lib, language: js}\n")
        result = _invoke("--config", str(path), "tasks")
        assert result.exit_code == 1
        assert "version" in result.output


class TestEnvCheckCommand:
    def test_nothing_required(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "env-check")
        assert result.exit_code == 0
        assert "No required environment variables" in result.output

    def test_missing(self, write_package_json, monkeypatch):
        monkeypatch.delenv("BL_CLI_TOKEN", raising=False)
        path = write_package_json(requiredEnv=["BL_CLI_TOKEN"])
        result = _invoke("--config", str(path), "env-check")
        assert result.exit_code == 1
        assert "BL_CLI_TOKEN" in result.output

    def test_satisfied_by_env_file(self, write_package_json, root, monkeypatch):
        monkeypatch.delenv("BL_CLI_TOKEN", raising=False)
        monkeypatch.delenv("INFRA_ENV", raising=False)
        (root / "infra").mkdir()
        (root / "infra" / ".env.dev").write_text("BL_CLI_TOKEN=abc\n")
        path = write_package_json(requiredEnv=["BL_CLI_TOKEN"])
        result = _invoke("--config", str(path), "env-check", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["ok"] is True


class TestRunCommand:
    def test_mock_run(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "run", "build", "--mock")
        assert result.exit_code == 0
        assert "✓ build-js:copy" in result.output
        assert "build: ok" in result.output

    def test_mock_json(self, write_package_json):
        path = write_package_json(type="api", container=CONTAINERS)
        result = _invoke("--config", str(path), "run", "publish", "--mock", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["task"] == "publish"
        # One tag and one push per semver component
        assert data["report"]["succeeded"] == 8

    def test_dry_run(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "run", "clean", "--dry-run")
        assert result.exit_code == 0
        assert "⊘ clean:delete" in result.output

    def test_not_supported_is_not_a_failure(self, write_package_json):
        path = write_package_json(type="ui")
        result = _invoke("--config", str(path), "run", "package", "--mock")
        assert result.exit_code == 0
        assert "Task not defined for project" in result.output

    def test_unknown_task(self, write_package_json):
        result = _invoke("--config", str(write_package_json()), "run", "deploy")
        assert result.exit_code == 1
        assert "Unknown task 'deploy'" in result.output

    def test_clean_really_deletes(self, write_package_json, root):
        (root / "dist").mkdir()
        (root / "dist" / "old.tgz").write_text("")
        result = _invoke("--config", str(write_package_json()), "run", "clean")
        assert result.exit_code == 0
        assert not (root / "dist").exists()


class TestUseCases:
    def test_list_tasks_error(self, tmp_path: Path):
        result = list_tasks(tmp_path / "nope.yml")
        assert result.error
        assert result.to_dict() == {"error": result.error}

    def test_run_task_uses_given_registry(self, write_package_json):
        from buildloom.adapters.mock import MockAdapter
        from buildloom.adapters.registry import AdapterRegistry

        mock = MockAdapter()
        registry = AdapterRegistry(mock=mock)
        result = run_task("package", write_package_json(), registry=registry, env={})
        assert result.report.all_ok
        assert mock.executed_ids == ["package-npm:pack", "package-npm:copy", "package-npm:delete"]

    def test_info_result_without_project(self):
        assert InfoResult().to_dict() == {"error": "No project loaded"}

    def test_run_without_report_exits_nonzero(self, write_package_json, monkeypatch):
        monkeypatch.setattr(
            "buildloom.core.use_cases.run.run_task", lambda *args, **kwargs: RunResult()
        )
        result = _invoke("--config", str(write_package_json()), "run", "build")
        assert result.exit_code == 1
        assert "build: nothing was run" in result.output

    def test_check_environment_uses_infra_env(self, write_package_json, root):
        (root / "infra").mkdir()
        (root / "infra" / ".env.prod").write_text("BL_UC_KEY=1\n")
        path = write_package_json(requiredEnv=["BL_UC_KEY"])

        prod = check_environment(path, env={"INFRA_ENV": "prod"})
        dev = check_environment(path, env={})
        assert prod.ok
        assert prod.env_files[0].endswith(".env.prod")
        assert dev.missing == ["BL_UC_KEY"]
