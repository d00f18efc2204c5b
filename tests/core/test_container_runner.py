import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

from viber00t.core.container_runner import ContainerRunner, LaunchSpecBuilder
from viber00t.models.config import EffectiveConfig, GlobalConfig, PortMapping, VolumeMount
from viber00t.models.environment import EnvironmentName
from viber00t.models.image import ImageReference, LaunchSpec
from viber00t.services.exceptions import ContainerLaunchError, DockerServiceError

IMAGE = ImageReference(repository="viber00t/demo", tag="abc123def456")


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def cwd(tmp_path):
    path = tmp_path / "my-app"
    path.mkdir()
    return path


def _builder(home, cwd, global_config=None, socket_path="/nonexistent/docker.sock"):
    return LaunchSpecBuilder(global_config or GlobalConfig(), cwd=cwd, home=home, socket_path=socket_path)


def _config(**overrides):
    values = dict(project_name="demo", agent="claude")
    values.update(overrides)
    return EffectiveConfig(**values)


class TestLaunchSpecBuilder:
    """Tests for launch spec assembly."""

    def test_container_name_and_project_mount(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE)

        assert spec.name == "viber00t-my-app"
        assert spec.hostname == "viber00t"
        assert spec.image == "viber00t/demo:abc123def456"
        assert spec.mounts[0].source == str(cwd)
        assert spec.mounts[0].target == "/c0de/project"

    def test_volume_home_expansion(self, home, cwd):
        config = _config(volumes=[VolumeMount(source="~/data", target="/c0de/data")])

        spec = _builder(home, cwd).build(config, IMAGE)

        data_mounts = [m for m in spec.mounts if m.target == "/c0de/data"]
        assert len(data_mounts) == 1
        assert data_mounts[0].source == str(home / "data")
        assert data_mounts[0].mode == "Z"

    def test_incomplete_volumes_are_skipped(self, home, cwd):
        config = _config(volumes=[VolumeMount(), VolumeMount(source="/srv")])

        spec = _builder(home, cwd).build(config, IMAGE)

        assert len(spec.mounts) == 1

    def test_missing_credentials_are_not_mounted(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE)

        targets = [m.target for m in spec.mounts]
        assert "/root/.ssh" not in targets
        assert "/root/.claude" not in targets
        assert "/root/.gitconfig" not in targets

    def test_existing_credentials_are_mounted(self, home, cwd):
        (home / ".ssh").mkdir()
        (home / ".gitconfig").write_text("[user]\n")

        spec = _builder(home, cwd).build(_config(), IMAGE)

        mounts = {m.target: m for m in spec.mounts}
        assert mounts["/root/.ssh"].source == str(home / ".ssh")
        assert mounts["/root/.ssh"].mode == "ro"
        assert mounts["/root/.gitconfig"].mode == "ro"
        assert "/root/.claude.json" not in mounts

    def test_filesystem_errors_omit_mount(self, home, cwd):
        with patch.object(Path, "exists", side_effect=PermissionError("denied")):
            spec = _builder(home, cwd).build(_config(), IMAGE)

        assert [m.target for m in spec.mounts] == ["/c0de/project"]

    def test_privileged(self, home, cwd, tmp_path):
        socket_path = tmp_path / "docker.sock"
        socket_path.write_text("")

        spec = _builder(home, cwd, socket_path=str(socket_path)).build(_config(privileged=True), IMAGE)

        assert spec.privileged is True
        assert spec.security_opts == ["label=disable"]
        assert any(m.target == "/var/run/docker.sock" for m in spec.mounts)
        args = spec.to_cli_args()
        assert "--privileged" in args
        assert "label=disable" in args

    def test_unprivileged_has_no_socket(self, home, cwd, tmp_path):
        socket_path = tmp_path / "docker.sock"
        socket_path.write_text("")

        spec = _builder(home, cwd, socket_path=str(socket_path)).build(_config(), IMAGE)

        assert spec.privileged is False
        assert spec.security_opts == []
        assert not any(m.target == "/var/run/docker.sock" for m in spec.mounts)
        assert "--privileged" not in spec.to_cli_args()

    def test_ports(self, home, cwd):
        config = _config(ports=[
            PortMapping(host=3000, container=3000),
            PortMapping(host=8080, container=80),
            PortMapping(),
        ])

        spec = _builder(home, cwd).build(config, IMAGE)

        assert spec.ports == ["3000:3000", "8080:80"]

    def test_environment(self, home, cwd):
        config = _config(packages=["jq"], envs=[EnvironmentName.GO])

        spec = _builder(home, cwd).build(config, IMAGE)

        assert spec.environment["TERM"] == "xterm-256color"
        assert spec.environment["VIBER00T_PROJECT"] == "demo"
        assert spec.environment["IS_SANDBOX"] == "true"
        assert spec.environment["VIBER00T_INSTALL"] == "jq golang gopls"

    def test_no_install_variable_without_packages(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE)

        assert "VIBER00T_INSTALL" not in spec.environment

    def test_agent_command_with_passthrough(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE, ["--resume", "a b"])

        assert spec.command == ["claude", "--dangerously-skip-permissions", "--resume", "a b"]
        assert spec.to_cli_args()[-4:] == spec.command

    def test_agent_flags_for_other_agents(self, home, cwd):
        global_config = GlobalConfig(agent_flags={"codex": ["--full-auto"]})

        spec = _builder(home, cwd, global_config).build(_config(agent="codex"), IMAGE, ["fix it"])
        assert spec.command == ["codex", "--full-auto", "fix it"]

        spec = _builder(home, cwd).build(_config(agent="aider"), IMAGE)
        assert spec.command == ["aider"]

    def test_command_override(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE, command=["/bin/bash"], name_prefix="viber00t-shell")

        assert spec.command == ["/bin/bash"]
        assert spec.name == "viber00t-shell-my-app"

    def test_podman_userns(self, home, cwd):
        podman_spec = _builder(home, cwd).build(_config(), IMAGE)
        docker_spec = _builder(home, cwd, GlobalConfig(container_cli="docker")).build(_config(), IMAGE)

        assert "--userns=keep-id:uid=0,gid=0" in podman_spec.to_cli_args()
        assert "--userns=keep-id:uid=0,gid=0" not in docker_spec.to_cli_args()

    def test_cli_args_layout(self, home, cwd):
        spec = _builder(home, cwd).build(_config(), IMAGE)

        args = spec.to_cli_args()
        assert args[:6] == ["run", "-it", "--name", "viber00t-my-app", "--hostname", "viber00t"]
        assert "-v" in args
        assert f"{cwd}:/c0de/project" in args
        assert args.index(spec.image) < args.index("claude")


class TestContainerRunner:
    """Tests for launching containers."""

    def _spec(self):
        return LaunchSpec(name="viber00t-app", hostname="viber00t", image="viber00t/demo:x", command=["claude"])

    def test_launch_removes_existing_container(self):
        docker_service = MagicMock()
        docker_service.run_interactive.return_value = 0

        ContainerRunner(docker_service).launch(self._spec())

        docker_service.remove_container.assert_called_once_with("viber00t-app")
        args = docker_service.run_interactive.call_args[0][0]
        assert args[0] == "run"
        assert args[-2:] == ["viber00t/demo:x", "claude"]

    def test_launch_continues_when_removal_fails(self):
        docker_service = MagicMock()
        docker_service.remove_container.side_effect = DockerServiceError("busy")
        docker_service.run_interactive.return_value = 0

        ContainerRunner(docker_service).launch(self._spec())

        docker_service.run_interactive.assert_called_once()

    def test_launch_failure(self):
        docker_service = MagicMock()
        docker_service.run_interactive.return_value = 125

        with pytest.raises(ContainerLaunchError) as exc_info:
            ContainerRunner(docker_service).launch(self._spec())

        assert exc_info.value.returncode == 125
