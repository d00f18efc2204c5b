"""Base and project image caching and building."""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from ..models.config import EffectiveConfig, GlobalConfig, is_valid_project_name
from ..models.environment import NEUTRAL_TIER, EnvironmentName
from ..models.image import BuildStateRecord, CleanupResult, ImageReference
from ..services.docker_service import DockerService
from ..services.exceptions import ConfigParseError, DockerServiceError, ImageNotFoundError
from ..utils.paths import cache_home
from .build_state import BuildStateStore
from .constants import BASE_IMAGES_DIR, DOCKERFILE_NAME, PROJECT_BUILDS_DIR
from .dockerfile_template import generate_base_dockerfile, generate_project_dockerfile
from .fingerprint import compute_fingerprint

logger = logging.getLogger(__name__)


def best_effort(target: str, action: Callable[[], object]) -> CleanupResult:
    """Run a removal whose failure leaves only harmless residue."""
    try:
        action()
        return CleanupResult.ok(target)
    except ImageNotFoundError:
        return CleanupResult.ok(target)
    except (DockerServiceError, OSError) as e:
        logger.warning(f"Could not remove {target}: {e}")
        return CleanupResult.failed(target, e)


def write_build_context(build_dir: Path, dockerfile: str) -> Path:
    """Write a Dockerfile into a fresh build directory."""
    build_dir.mkdir(parents=True, exist_ok=True)
    (build_dir / DOCKERFILE_NAME).write_text(dockerfile)
    return build_dir


def _print_build_logs(logs) -> None:
    for entry in logs:
        if 'stream' in entry:
            print(entry['stream'], end='')


class BaseImageCache:
    """Ensures the shared per-environment base images exist.

    Base images are never invalidated here; they are only removed by an
    explicit external cleanup.
    """

    def __init__(self, docker_service: DockerService, cache_dir: Optional[Path] = None):
        self.docker_service = docker_service
        self.cache_dir = cache_dir or cache_home()

    def build_dir(self, tier: str) -> Path:
        return self.cache_dir / BASE_IMAGES_DIR / tier

    def ensure_base(self, env: Optional[EnvironmentName], global_config: GlobalConfig) -> ImageReference:
        """Return the base image for ``env``, building it if it is missing."""
        tier = env.value if env is not None else NEUTRAL_TIER
        reference = ImageReference.for_base(tier)
        image_name = str(reference)

        if self.docker_service.image_exists(image_name):
            logger.debug(f"Base image {image_name} present")
            return reference

        print(f"◉ Building base image: {image_name}")
        build_dir = write_build_context(
            self.build_dir(tier), generate_base_dockerfile(env, global_config)
        )
        _image, logs = self.docker_service.build_image(path=str(build_dir), tag=image_name)
        _print_build_logs(logs)
        return reference


class ProjectImageCache:
    """Decides between reusing and rebuilding a project's image.

    State transitions:

        no record            -> build
        record matches, image present  -> reuse
        record matches, image missing  -> build
        record differs       -> remove old image, build

    A record is only written after a successful build, so a failed build
    leaves the next run in the same state.
    """

    def __init__(
        self,
        docker_service: DockerService,
        base_cache: Optional[BaseImageCache] = None,
        state_store: Optional[BuildStateStore] = None,
        cache_dir: Optional[Path] = None,
    ):
        self.docker_service = docker_service
        self.cache_dir = cache_dir or cache_home()
        self.base_cache = base_cache or BaseImageCache(docker_service, self.cache_dir)
        self.state_store = state_store or BuildStateStore()

    def build_dir(self, project_name: str) -> Path:
        return self.cache_dir / PROJECT_BUILDS_DIR / project_name

    def image_for(self, config: EffectiveConfig) -> ImageReference:
        """Reference the project image would carry for the current config."""
        fingerprint = compute_fingerprint(config, config.config_mtime)
        return ImageReference.for_project(config.project_name, fingerprint)

    def ensure_project_image(self, config: EffectiveConfig, global_config: GlobalConfig) -> ImageReference:
        """Return an up-to-date project image, building it only when needed."""
        if not config.project_name:
            raise ConfigParseError("[project] name must be set before building an image")
        if not is_valid_project_name(config.project_name):
            raise ConfigParseError(f"Invalid [project] name '{config.project_name}'")

        with self.state_store.lock(config.project_name):
            return self._ensure_locked(config, global_config)

    def _ensure_locked(self, config: EffectiveConfig, global_config: GlobalConfig) -> ImageReference:
        fingerprint = compute_fingerprint(config, config.config_mtime)
        reference = ImageReference.for_project(config.project_name, fingerprint)
        image_name = str(reference)

        record = self.state_store.read(config.project_name)
        if record is not None:
            if record.fingerprint == fingerprint:
                if self.docker_service.image_exists(record.image_reference):
                    print(f"◉ Using cached image: {record.image_reference}")
                    return record.image
                logger.info(f"Cached image {record.image_reference} is missing, rebuilding")
            else:
                print(f"⟳ Config changed, removing old image: {record.image_reference}")
                best_effort(
                    record.image_reference,
                    lambda: self.docker_service.remove_image(record.image_reference),
                )

        base = self.base_cache.ensure_base(config.primary_env, global_config)

        # Clear leftovers from an interrupted run that used the same tag
        best_effort(
            f"containers of {image_name}",
            lambda: self.docker_service.remove_containers_for_image(image_name),
        )
        best_effort(image_name, lambda: self.docker_service.remove_image(image_name))

        print(f"◉ Building project image: {image_name} (from {base})")
        build_dir = write_build_context(
            self.build_dir(config.project_name),
            generate_project_dockerfile(config, str(base)),
        )
        _image, logs = self.docker_service.build_image(path=str(build_dir), tag=image_name)
        _print_build_logs(logs)

        self.state_store.write(BuildStateRecord(
            project_name=config.project_name,
            image_reference=image_name,
            fingerprint=fingerprint,
        ))
        return reference

    def clean(self, project_name: str) -> list[CleanupResult]:
        """Remove every image, build context and state record of a project."""
        results = []
        repository = ImageReference.for_project(project_name, "latest").repository
        try:
            tags = self.docker_service.list_image_tags(repository)
        except DockerServiceError as e:
            logger.warning(f"Could not list images of {repository}: {e}")
            results.append(CleanupResult.failed(repository, e))
            tags = []

        for tag in tags:
            print(f"⟳ Removing image: {tag}")
            results.append(best_effort(tag, lambda tag=tag: self.docker_service.remove_image(tag)))

        build_dir = self.build_dir(project_name)
        results.append(best_effort(
            str(build_dir), lambda: shutil.rmtree(build_dir) if build_dir.exists() else None
        ))
        results.append(self.state_store.delete(project_name))
        return results
