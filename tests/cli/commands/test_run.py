"""Tests for the run and shell commands against an in-memory runtime."""

from unittest.mock import patch

import pytest

from viber00t.cli.main import cli
from viber00t.services.exceptions import DockerServiceError


@pytest.fixture
def in_project(home_dir, project_dir, monkeypatch):
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def runtime(fake_docker):
    with patch('viber00t.cli.helpers.DockerService', return_value=fake_docker):
        yield fake_docker


class TestRunCommand:
    """Test suite for `viber00t run`."""

    def test_first_run_builds_and_launches(self, cli_runner, in_project, runtime):
        result = cli_runner.invoke(cli, ["--resume"])

        assert result.exit_code == 0, result.output
        assert runtime.builds[0] == "viber00t:python-base"
        assert runtime.builds[1].startswith("viber00t/demo:")
        assert "Building project image" in result.output
        assert "Starting viber00t for demo" in result.output

        args = runtime.launches[0]
        assert args[-3:] == ["claude", "--dangerously-skip-permissions", "--resume"]
        assert any(arg.endswith("demo-project:/c0de/project") for arg in args)
        assert "VIBER00T_PROJECT=demo" in args
        assert "--userns=keep-id:uid=0,gid=0" in args

    def test_second_run_reuses_image(self, cli_runner, in_project, runtime):
        cli_runner.invoke(cli, [])
        builds = list(runtime.builds)

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 0, result.output
        assert runtime.builds == builds
        assert "Using cached image" in result.output
        assert len(runtime.launches) == 2

    def test_config_change_rebuilds(self, cli_runner, in_project, runtime):
        cli_runner.invoke(cli, [])
        old_image = runtime.builds[-1]

        config_path = in_project / "Viber00t.toml"
        config_path.write_text(config_path.read_text().replace('["jq"]', '["jq", "htop"]'))
        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 0, result.output
        assert "Config changed" in result.output
        assert old_image in runtime.removed_images
        assert runtime.builds[-1] != old_image
        assert "htop" in runtime.dockerfiles[runtime.builds[-1]]

    def test_missing_config(self, cli_runner, home_dir, tmp_path, monkeypatch, runtime):
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "viber00t init" in result.output
        assert runtime.launches == []

    def test_missing_project_name(self, cli_runner, home_dir, tmp_path, monkeypatch, runtime):
        (tmp_path / "Viber00t.toml").write_text("[project]\nagent = \"claude\"\n")
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "[project] name" in result.output
        assert runtime.builds == []

    def test_unknown_environment(self, cli_runner, home_dir, tmp_path, monkeypatch, runtime):
        (tmp_path / "Viber00t.toml").write_text(
            '[project]\nname = "demo"\n\n[[install]]\nenvs = ["cobol"]\n'
        )
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 1
        assert runtime.builds == []

    def test_build_failure(self, cli_runner, in_project, runtime):
        runtime.fail_build = True

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "Failed to build image" in result.output
        assert runtime.launches == []

    def test_container_exit_code_propagates(self, cli_runner, in_project, runtime):
        runtime.launch_returncode = 42

        result = cli_runner.invoke(cli, [])

        assert result.exit_code == 42
        assert "Container failed" in result.output

    def test_runtime_unavailable(self, cli_runner, in_project):
        with patch('viber00t.cli.helpers.DockerService',
                   side_effect=DockerServiceError("Container runtime is not running.")):
            result = cli_runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "not running" in result.output


class TestShellCommand:

    def test_shell_launches_bash(self, cli_runner, in_project, runtime):
        result = cli_runner.invoke(cli, ["shell"])

        assert result.exit_code == 0, result.output
        args = runtime.launches[0]
        assert args[-1] == "/bin/bash"
        assert "viber00t-shell-demo-project" in args
        assert "claude" not in args
