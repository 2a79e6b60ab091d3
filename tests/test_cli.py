"""
Tests for CLI commands.

Uses typer's CliRunner; the environment is passed explicitly via ``env=``.
"""

import importlib
import json

import pytest
from typer.testing import CliRunner

from envcascade.cli.main import app

runner = CliRunner()

SPEC_YAML = """\
keys:
  TEST1: {type: string, required: true}
  TEST2: {type: number, required: true}
  TEST3: {type: number, default: 3333}
"""


@pytest.fixture
def project(root):
    (root / "spec.yaml").write_text(SPEC_YAML)
    return root


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "envcascade version" in result.output


class TestHelp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "envcascade" in result.output.lower()

    @pytest.mark.parametrize("command", ["trace", "check"])
    def test_subcommand_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0
        assert "--spec" in result.output


class TestTrace:
    def test_json_output(self, project):
        result = runner.invoke(
            app,
            ["trace", "-s", str(project / "spec.yaml"), "-f", "testconfigs/config/test1.env", "-d", str(project), "--json"],
            env={"TEST1": "def"},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["TEST1"]["resolvedFrom"] == "env"
        assert data["TEST1"]["dotenv"] == "abc"
        assert data["TEST2"]["resolvedFrom"] == "dotenv"
        assert data["TEST3"] == {
            "default": 3333,
            "dotenv": "--",
            "env": "--",
            "isExtra": False,
            "resolvedFrom": "default",
            "resolvedValue": 3333,
        }

    def test_table_output(self, project):
        result = runner.invoke(
            app,
            ["trace", "-s", str(project / "spec.yaml"), "-e", "testconfigs", "-d", str(project)],
            env={"NODE_ENV": "test1"},
        )
        assert result.exit_code == 0, result.output
        assert "Configuration trace" in result.output
        assert "TEST3" in result.output

    def test_invalid_configuration_exits_1(self, project):
        result = runner.invoke(
            app,
            ["trace", "-s", str(project / "spec.yaml"), "-f", "testconfigs/config/test5.env", "-d", str(project)],
        )
        assert result.exit_code == 1
        assert "Invalid Configuration" in result.output
        assert '"TEST1" is required, but missing' in result.output

    def test_bad_environment_key_exits_1(self, project):
        result = runner.invoke(
            app,
            ["trace", "-s", str(project / "spec.yaml"), "-e", "testconfigs", "-k", "NO_SUCH_KEY", "-d", str(project)],
        )
        assert result.exit_code == 1
        assert "Bad environment key: NO_SUCH_KEY" in result.output

    def test_conflicting_sources(self, project):
        result = runner.invoke(
            app,
            ["trace", "-s", str(project / "spec.yaml"), "-f", "a.env", "-e", "testconfigs", "-d", str(project)],
        )
        assert result.exit_code == 2


class TestCheck:
    def test_ok(self, project):
        result = runner.invoke(
            app,
            ["check", "-s", str(project / "spec.yaml"), "-f", "testconfigs/config/test1.env", "-d", str(project)],
        )
        assert result.exit_code == 0, result.output
        assert "Configuration OK" in result.output

    def test_extras_rejected(self, project):
        result = runner.invoke(
            app,
            ["check", "-s", str(project / "spec.yaml"), "-f", "testconfigs/config/test7.env", "-d", str(project)],
        )
        assert result.exit_code == 1
        assert '"EXTRA" is not allowed' in result.output

    def test_extras_allowed(self, project):
        result = runner.invoke(
            app,
            [
                "check",
                "-s",
                str(project / "spec.yaml"),
                "-f",
                "testconfigs/config/test7.env",
                "-d",
                str(project),
                "--allow-extras",
            ],
        )
        assert result.exit_code == 0, result.output

    def test_missing_file(self, project):
        result = runner.invoke(
            app,
            ["check", "-s", str(project / "spec.yaml"), "-f", "nonsense.env", "-d", str(project)],
        )
        assert result.exit_code == 1
        assert "The following file is missing" in result.output

    def test_unreadable_file_exits_1(self, project, monkeypatch):
        def deny(path):
            raise PermissionError(f"Permission denied reading environment file: {path}")

        monkeypatch.setattr(importlib.import_module("envcascade.config.loader"), "read_env_file", deny)
        result = runner.invoke(
            app,
            ["check", "-s", str(project / "spec.yaml"), "-f", "testconfigs/config/test1.env", "-d", str(project)],
        )
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Permission denied reading environment file" in result.output
