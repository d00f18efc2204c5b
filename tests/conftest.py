import pytest
from click.testing import CliRunner
from pathlib import Path

from viber00t.services.exceptions import (
    ContainerNotFoundError,
    DockerServiceError,
    ImageBuildError,
    ImageNotFoundError,
)


class FakeDockerService:
    """In-memory container runtime recording every call."""

    def __init__(self, images=()):
        self.cli = "podman"
        self.images = set(images)
        self.builds = []
        self.dockerfiles = {}
        self.removed_images = []
        self.removed_containers = []
        self.launches = []
        self.fail_build = False
        self.fail_remove = False
        self.launch_returncode = 0

    def image_exists(self, image_name):
        return image_name in self.images

    def build_image(self, path, tag, dockerfile="Dockerfile", rm=True, nocache=False):
        self.builds.append(tag)
        self.dockerfiles[tag] = (Path(path) / dockerfile).read_text()
        if self.fail_build:
            raise ImageBuildError(f"Failed to build image {tag}: boom")
        self.images.add(tag)
        return object(), [{"stream": f"Successfully built {tag}\n"}]

    def remove_image(self, image_name, force=True):
        self.removed_images.append(image_name)
        if self.fail_remove:
            raise DockerServiceError("image is in use")
        if image_name not in self.images:
            raise ImageNotFoundError(f"Image '{image_name}' not found")
        self.images.discard(image_name)

    def list_image_tags(self, repository):
        return sorted(t for t in self.images if t.rpartition(":")[0] == repository)

    def remove_containers_for_image(self, image_name):
        return 0

    def remove_container(self, name):
        if name not in self.removed_containers:
            self.removed_containers.append(name)
        raise ContainerNotFoundError(f"Container '{name}' not found")

    def run_interactive(self, args):
        self.launches.append(list(args))
        return self.launch_returncode


@pytest.fixture
def cli_runner():
    """Provides a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def fake_docker():
    """Provides an in-memory container runtime."""
    return FakeDockerService()


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    """Points HOME and the XDG base directories at a temporary tree."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / ".local" / "state"))
    monkeypatch.delenv("DOCKER_HOST", raising=False)
    return home


@pytest.fixture
def project_dir(tmp_path):
    """Creates a project directory with a small Viber00t.toml."""
    project_path = tmp_path / "demo-project"
    project_path.mkdir()
    (project_path / "Viber00t.toml").write_text(
        '[project]\n'
        'name = "demo"\n'
        '\n'
        '[[install]]\n'
        'packages = ["jq"]\n'
        'envs = ["python"]\n'
    )
    return project_path
