"""Custom exceptions for service layer."""


class ServiceError(Exception):
    """Base exception for all service-related errors."""

    pass


class DockerServiceError(ServiceError):
    """Exception raised for container runtime operations."""

    pass


class ImageNotFoundError(DockerServiceError):
    """Exception raised when an image is not found."""

    pass


class ContainerNotFoundError(DockerServiceError):
    """Exception raised when a container is not found."""

    pass


class ImageBuildError(DockerServiceError):
    """Exception raised when an image build fails."""

    pass


class ContainerLaunchError(DockerServiceError):
    """Exception raised when the container cannot be started or exits with an error."""

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode


class ConfigError(ServiceError):
    """Base exception for configuration problems."""

    pass


class ConfigNotFoundError(ConfigError):
    """Exception raised when the project has no Viber00t.toml."""

    pass


class ConfigParseError(ConfigError):
    """Exception raised for malformed or invalid configuration."""

    pass
