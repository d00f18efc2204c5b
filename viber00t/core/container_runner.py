"""Container launch assembly and execution."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..models.config import EffectiveConfig, GlobalConfig
from ..models.image import ImageReference, LaunchSpec, Mount
from ..services.docker_service import DockerService
from ..services.exceptions import ContainerLaunchError, ContainerNotFoundError, DockerServiceError
from ..utils.paths import expand_home
from .constants import (
    CONTAINER_HOSTNAME,
    CONTAINER_PREFIX,
    CREDENTIAL_MOUNTS,
    DOCKER_SOCKET,
    ENV_INSTALL,
    ENV_PROJECT,
    ENV_SANDBOX,
    PODMAN_USERNS,
    PROJECT_WORKDIR,
)

logger = logging.getLogger(__name__)


def _host_path_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError as e:
        logger.debug(f"Skipping mount of {path}: {e}")
        return False


class LaunchSpecBuilder:
    """Assembles the launch specification for a project container."""

    def __init__(self, global_config: GlobalConfig, cwd: Optional[Path] = None, home: Optional[Path] = None,
                 socket_path: str = DOCKER_SOCKET):
        self.global_config = global_config
        self.cwd = cwd or Path.cwd()
        self.home = home or Path.home()
        self.socket_path = socket_path

    def container_name(self, prefix: str = CONTAINER_PREFIX) -> str:
        return f"{prefix}-{self.cwd.name}"

    def _get_mounts(self, config: EffectiveConfig) -> List[Mount]:
        mounts = [Mount(source=str(self.cwd), target=PROJECT_WORKDIR)]

        for relative, target, mode in CREDENTIAL_MOUNTS:
            host_path = self.home / relative
            if _host_path_exists(host_path):
                mounts.append(Mount(source=str(host_path), target=target, mode=mode))

        if config.privileged and _host_path_exists(Path(self.socket_path)):
            mounts.append(Mount(source=self.socket_path, target=DOCKER_SOCKET))

        for volume in config.volumes:
            if volume.source and volume.target:
                source = expand_home(volume.source, self.home)
                mounts.append(Mount(source=source, target=volume.target, mode="Z"))

        return mounts

    def _get_environment(self, config: EffectiveConfig) -> Dict[str, str]:
        env = {
            'TERM': 'xterm-256color',
            ENV_PROJECT: config.project_name,
            ENV_SANDBOX: 'true',
        }
        packages = config.install_packages()
        if packages:
            env[ENV_INSTALL] = " ".join(packages)
        return env

    def agent_command(self, config: EffectiveConfig, passthrough_args: Sequence[str] = ()) -> List[str]:
        """Agent executable, its configured flags, then the pass-through args verbatim."""
        return [config.agent, *self.global_config.flags_for(config.agent), *passthrough_args]

    def build(self, config: EffectiveConfig, image: ImageReference,
              passthrough_args: Sequence[str] = (), command: Optional[List[str]] = None,
              name_prefix: str = CONTAINER_PREFIX) -> LaunchSpec:
        """Build the launch spec.

        Args:
            config: Effective project configuration
            image: Project image to run
            passthrough_args: Extra arguments appended to the agent command
            command: Run this instead of the agent (e.g. a shell)
            name_prefix: Prefix of the container name

        Returns:
            The assembled LaunchSpec
        """
        extra_args = []
        if Path(self.global_config.container_cli).name == "podman":
            extra_args.append(PODMAN_USERNS)

        ports = [
            f"{port.host}:{port.container}"
            for port in config.ports
            if port.host and port.container
        ]

        return LaunchSpec(
            name=self.container_name(name_prefix),
            hostname=CONTAINER_HOSTNAME,
            image=str(image),
            mounts=self._get_mounts(config),
            ports=ports,
            environment=self._get_environment(config),
            privileged=config.privileged,
            security_opts=["label=disable"] if config.privileged else [],
            extra_args=extra_args,
            command=command if command is not None else self.agent_command(config, passthrough_args),
        )


class ContainerRunner:
    """Starts a container from a LaunchSpec."""

    def __init__(self, docker_service: DockerService):
        self.docker_service = docker_service

    def launch(self, spec: LaunchSpec) -> None:
        """Replace any container with the same name and run attached to the terminal.

        Raises:
            ContainerLaunchError: If the runtime cannot start or the container fails
        """
        try:
            self.docker_service.remove_container(spec.name)
            print(f"⟳ Removed existing container {spec.name}")
        except ContainerNotFoundError:
            pass
        except DockerServiceError as e:
            logger.warning(f"Could not remove existing container {spec.name}: {e}")

        returncode = self.docker_service.run_interactive(spec.to_cli_args())
        if returncode != 0:
            raise ContainerLaunchError(
                f"Container {spec.name} exited with code {returncode}", returncode=returncode
            )
