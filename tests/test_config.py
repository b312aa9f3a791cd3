"""
Tests for configuration loading — descriptor discovery, parsing, env files and logging setup.
"""

import json
import logging
import textwrap
from pathlib import Path

import pytest

from buildloom.core.config.env_files import merge_env_files, missing_variables, parse_env_file
from buildloom.core.config.loader import (
    ConfigError,
    find_project_file,
    load_project,
    read_descriptor,
)
from buildloom.core.errors import ConfigurationError, SchemaValidationError
from buildloom.core.models.schema import ProjectType
from buildloom.core.observability.logging_config import resolve_level, setup_logging

BUILDLOOM_YML = textwrap.dedent("""\
    name: "@acme/orders-api"
    description: "Order service"
    version: 2.4.0
    buildMetadata:
      type: api
      language: ts
      requiredEnv:
        - DATABASE_URL
      container:
        default:
          repo: registry.example.com/orders
""")


@pytest.fixture
def buildloom_yml(tmp_path: Path) -> Path:
    path = tmp_path / "buildloom.yml"
    path.write_text(BUILDLOOM_YML)
    return path


class TestFindProjectFile:
    def test_finds_in_current_dir(self, buildloom_yml):
        assert find_project_file(buildloom_yml.parent) == buildloom_yml.resolve()

    def test_walks_up(self, buildloom_yml):
        nested = buildloom_yml.parent / "src" / "handlers"
        nested.mkdir(parents=True)
        assert find_project_file(nested) == buildloom_yml.resolve()

    def test_yml_preferred_over_package_json(self, buildloom_yml, write_package_json):
        write_package_json()
        assert find_project_file(buildloom_yml.parent).name == "buildloom.yml"

    def test_finds_package_json(self, write_package_json, root):
        path = write_package_json()
        assert find_project_file(root) == path.resolve()

    def test_not_found(self, tmp_path):
        # A bare tmp dir may still sit below a directory with a descriptor,
        # so only assert the search never returns something inside it.
        found = find_project_file(tmp_path)
        assert found is None or tmp_path.resolve() not in found.parents


class TestReadDescriptor:
    def test_yaml(self, buildloom_yml):
        data = read_descriptor(buildloom_yml)
        assert data["buildMetadata"]["type"] == "api"

    def test_json(self, write_package_json):
        data = read_descriptor(write_package_json())
        assert data["name"] == "@scope/my-lib"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            read_descriptor(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "buildloom.yml"
        path.write_text("name: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            read_descriptor(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "buildloom.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="Expected a mapping"):
            read_descriptor(path)


class TestLoadProject:
    def test_yaml_descriptor(self, buildloom_yml):
        project = load_project(buildloom_yml)
        assert project.name == "@acme/orders-api"
        assert project.type == ProjectType.API
        assert project.get_required_env() == ["DATABASE_URL"]

    def test_root_is_descriptor_dir(self, buildloom_yml):
        project = load_project(buildloom_yml)
        expected = str(buildloom_yml.parent.resolve())
        assert project.root_dir.absolute_path.rstrip("/\\") == expected

    def test_package_json(self, write_package_json):
        project = load_project(write_package_json(type="cli"))
        assert project.type == ProjectType.CLI

    def test_package_json_without_build_metadata(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"name": "plain", "version": "1.0.0"}))
        with pytest.raises(ConfigError, match="buildMetadata"):
            load_project(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_project(tmp_path / "nope.yml")

    def test_schema_error_propagates(self, tmp_path):
        path = tmp_path / "buildloom.yml"
        path.write_text("name: x\nversion: 1.0.0\nbuildMetadata: {type: desktop, language: js}\n")
        with pytest.raises(SchemaValidationError) as exc_info:
            load_project(path)
        assert exc_info.value.field_path == "buildMetadata.type"

    def test_incomplete_type_propagates(self, tmp_path):
        path = tmp_path / "buildloom.yml"
        path.write_text("name: x\nversion: 1.0.0\nbuildMetadata: {type: api, language: js}\n")
        with pytest.raises(ConfigurationError):
            load_project(path)

    def test_auto_detect_from_cwd(self, buildloom_yml, monkeypatch):
        monkeypatch.chdir(buildloom_yml.parent)
        assert load_project().name == "@acme/orders-api"


class TestEnvFiles:
    def test_parse(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text(
            textwrap.dedent("""\
                # comment
                PLAIN=value
                export EXPORTED=yes
                DOUBLE="quoted value"
                SINGLE='single'
                EMPTY=
                not a pair
                URL=postgres://u:p@host/db?x=1
            """)
        )
        assert parse_env_file(path) == {
            "PLAIN": "value",
            "EXPORTED": "yes",
            "DOUBLE": "quoted value",
            "SINGLE": "single",
            "EMPTY": "",
            "URL": "postgres://u:p@host/db?x=1",
        }

    def test_missing_file_is_empty(self, tmp_path):
        assert parse_env_file(tmp_path / ".env.prod") == {}

    def test_merge_first_definition_wins(self, tmp_path):
        (tmp_path / ".env.prod").write_text("REGION=eu-west-1\n")
        (tmp_path / ".env").write_text("REGION=us-east-1\nSTAGE=base\nUSER=ignored\n")
        base = {"USER": "ci"}
        merged = merge_env_files([tmp_path / ".env.prod", tmp_path / ".env"], base)
        assert merged == {"USER": "ci", "REGION": "eu-west-1", "STAGE": "base"}
        assert base == {"USER": "ci"}

    def test_merge_expands_references(self, tmp_path):
        (tmp_path / ".env.prod").write_text(
            "API_URL=https://${HOST}:$PORT/v1\nBUCKET=${STAGE}-assets\n"
        )
        (tmp_path / ".env").write_text(
            "HOST=example.com\nPORT=443\nSTAGE=${NAME:-dev}\nPRICE=\\$5\nLOOP=${LOOP}x\n"
        )
        merged = merge_env_files([tmp_path / ".env.prod", tmp_path / ".env"], {"PORT": "8443"})
        assert merged["API_URL"] == "https://example.com:8443/v1"
        assert merged["BUCKET"] == "dev-assets"
        assert merged["PRICE"] == "$5"
        assert merged["LOOP"] == "x"

    def test_merge_leaves_base_values_alone(self, tmp_path):
        (tmp_path / ".env").write_text("STAGE=prod\n")
        merged = merge_env_files([tmp_path / ".env"], {"PS1": "$STAGE> "})
        assert merged["PS1"] == "$STAGE> "

    def test_missing_variables(self):
        env = {"A": "1", "B": ""}
        assert missing_variables(["A", "B", "C"], env) == ["B", "C"]


class TestLogging:
    @pytest.mark.parametrize(
        "flags,expected",
        [
            ({"debug": True, "verbose": True}, "DEBUG"),
            ({"verbose": True}, "INFO"),
            ({"quiet": True}, "ERROR"),
            ({}, "WARNING"),
        ],
    )
    def test_resolve_level_flags(self, flags, expected):
        assert resolve_level(env={}, **flags) == expected

    def test_resolve_level_env(self):
        assert resolve_level(env={"BUILDLOOM_LOG_LEVEL": "INFO"}) == "INFO"

    def test_setup_console(self):
        setup_logging(level="INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_setup_file(self, tmp_path):
        log_file = tmp_path / "buildloom.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        logging.getLogger("buildloom.test").debug("written to file")
        for handler in root.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()

    def test_unknown_level_falls_back(self):
        setup_logging(level="CHATTY")
        assert logging.getLogger().level == logging.WARNING
