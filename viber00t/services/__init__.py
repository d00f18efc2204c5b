"""Service layer for abstracting container runtime operations."""

from .docker_service import DockerService
from .exceptions import (
    ServiceError,
    DockerServiceError,
    ImageNotFoundError,
    ContainerNotFoundError,
    ImageBuildError,
    ContainerLaunchError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
)

__all__ = [
    "DockerService",
    "ServiceError",
    "DockerServiceError",
    "ImageNotFoundError",
    "ContainerNotFoundError",
    "ImageBuildError",
    "ContainerLaunchError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
]
