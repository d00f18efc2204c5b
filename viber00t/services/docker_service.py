"""Container runtime service for abstracting Docker/Podman operations."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Optional

import docker
import docker.errors
from docker.models.images import Image

from .exceptions import (
    ContainerLaunchError,
    ContainerNotFoundError,
    DockerServiceError,
    ImageBuildError,
    ImageNotFoundError,
)

logger = logging.getLogger(__name__)


ROOTFUL_PODMAN_SOCKET = "/run/podman/podman.sock"


def podman_socket_url() -> Optional[str]:
    """URL of the podman API socket, rootless first, then rootful."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR") or f"/run/user/{os.getuid()}"
    for socket_path in (Path(runtime_dir) / "podman" / "podman.sock", Path(ROOTFUL_PODMAN_SOCKET)):
        if socket_path.exists():
            return f"unix://{socket_path}"
    return None


class DockerService:
    """Service for container runtime operations with clean abstractions.

    Image queries, builds and removals go through the Docker API (which podman
    also serves); interactive launches shell out to the runtime CLI so the
    terminal is attached directly.
    """

    def __init__(self, cli: str = "podman", base_url: Optional[str] = None):
        """Initialize the service and test the connection.

        Args:
            cli: Runtime CLI used for interactive launches
            base_url: Explicit API endpoint; defaults to the environment
        """
        self.cli = cli
        if base_url is None and not os.environ.get("DOCKER_HOST") and self.is_podman:
            base_url = podman_socket_url()
            # The docker daemon holds a different image store than podman run
            if base_url is None:
                raise DockerServiceError(
                    "No podman API socket found. Enable it with "
                    "'systemctl --user enable --now podman.socket' or set DOCKER_HOST."
                )
        try:
            if base_url:
                self.client = docker.DockerClient(base_url=base_url)
            else:
                self.client = docker.from_env()
            self.client.ping()
        except docker.errors.DockerException as e:
            if "connection refused" in str(e).lower() or "cannot connect" in str(e).lower():
                raise DockerServiceError(
                    f"Container runtime is not running. Please start the {self.cli} service."
                ) from e
            else:
                raise DockerServiceError(f"Failed to connect to container runtime: {e}") from e

    @property
    def is_podman(self) -> bool:
        return Path(self.cli).name == "podman"

    def image_exists(self, image_name: str) -> bool:
        """Check if an image exists.

        Args:
            image_name: Name of the image

        Returns:
            True if image exists, False otherwise
        """
        try:
            self.client.images.get(image_name)
            return True
        except docker.errors.ImageNotFound:
            return False
        except docker.errors.APIError as e:
            logger.warning(f"Error checking image existence: {e}")
            return False

    def build_image(
        self,
        path: str,
        tag: str,
        dockerfile: str = "Dockerfile",
        rm: bool = True,
        nocache: bool = False,
    ) -> tuple[Image, list[dict[str, Any]]]:
        """Build an image.

        Args:
            path: Path to the build context
            tag: Tag for the image
            dockerfile: Dockerfile name relative to the build context
            rm: Remove intermediate containers after build
            nocache: Do not use cache when building

        Returns:
            Tuple of (built image, build logs)

        Raises:
            ImageBuildError: If build fails
        """
        try:
            image, logs = self.client.images.build(
                path=path,
                dockerfile=dockerfile,
                tag=tag,
                rm=rm,
                nocache=nocache,
            )
            return image, list(logs)
        except docker.errors.BuildError as e:
            for entry in e.build_log or []:
                if "stream" in entry:
                    logger.debug(entry["stream"].rstrip())
            raise ImageBuildError(f"Failed to build image {tag}: {e}") from e
        except docker.errors.APIError as e:
            raise ImageBuildError(f"Failed to build image {tag}: {e}") from e
        except Exception as e:
            raise ImageBuildError(f"Unexpected error building image {tag}: {e}") from e

    def remove_image(self, image_name: str, force: bool = True) -> None:
        """Remove an image.

        Args:
            image_name: Name of the image
            force: Force removal

        Raises:
            ImageNotFoundError: If image not found
            DockerServiceError: If removal fails
        """
        try:
            self.client.images.remove(image_name, force=force)
        except docker.errors.ImageNotFound as e:
            raise ImageNotFoundError(f"Image '{image_name}' not found") from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove image: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error removing image: {e}") from e

    def list_image_tags(self, repository: str) -> list[str]:
        """List every repository:tag reference of a repository.

        Raises:
            DockerServiceError: If listing fails
        """
        try:
            images = self.client.images.list(name=repository)
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to list images: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error listing images: {e}") from e

        tags = []
        for image in images:
            for tag in image.tags:
                # podman reports local images with a localhost/ prefix
                name = tag[len("localhost/"):] if tag.startswith("localhost/") else tag
                if name.rpartition(":")[0] == repository and name not in tags:
                    tags.append(name)
        return tags

    def remove_containers_for_image(self, image_name: str) -> int:
        """Force-remove every container created from an image.

        Returns:
            Number of containers removed

        Raises:
            DockerServiceError: If listing or removal fails
        """
        try:
            containers = self.client.containers.list(all=True, filters={"ancestor": image_name})
            for container in containers:
                container.remove(force=True)
            return len(containers)
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove containers of {image_name}: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error removing containers of {image_name}: {e}") from e

    def remove_container(self, name: str) -> None:
        """Force-remove a container by name.

        Raises:
            ContainerNotFoundError: If container not found
            DockerServiceError: If removal fails
        """
        try:
            self.client.containers.get(name).remove(force=True)
        except docker.errors.NotFound as e:
            raise ContainerNotFoundError(f"Container '{name}' not found") from e
        except docker.errors.APIError as e:
            raise DockerServiceError(f"Failed to remove container: {e}") from e
        except Exception as e:
            raise DockerServiceError(f"Unexpected error removing container: {e}") from e

    def run_interactive(self, args: list[str]) -> int:
        """Run the runtime CLI attached to the current terminal.

        Args:
            args: Arguments following the CLI name, e.g. ["run", "-it", ...]

        Returns:
            Exit code of the container process

        Raises:
            ContainerLaunchError: If the CLI cannot be started
        """
        executable = shutil.which(self.cli) or self.cli
        try:
            result = subprocess.run([executable, *args])
        except OSError as e:
            raise ContainerLaunchError(f"Failed to start {self.cli}: {e}") from e
        return result.returncode
