"""Image, build-state and launch models."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.constants import IMAGE_NAMESPACE, PROJECT_REPOSITORY_PREFIX


class ImageReference(BaseModel):
    """A repository:tag pair."""
    repository: str
    tag: str

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """Split a reference on its last colon; a missing tag means 'latest'."""
        repository, sep, tag = reference.rpartition(":")
        if not sep or "/" in tag:
            return cls(repository=reference, tag="latest")
        return cls(repository=repository, tag=tag)

    @classmethod
    def for_base(cls, tier: str) -> "ImageReference":
        """Base image shared by every project using the same environment tier."""
        return cls(repository=IMAGE_NAMESPACE, tag=f"{tier}-base")

    @classmethod
    def for_project(cls, project_name: str, fingerprint: str) -> "ImageReference":
        return cls(repository=f"{PROJECT_REPOSITORY_PREFIX}{project_name}", tag=fingerprint)


class BuildStateRecord(BaseModel):
    """Last successful project build, persisted per project."""
    project_name: str
    image_reference: str
    fingerprint: str

    @property
    def image(self) -> ImageReference:
        return ImageReference.parse(self.image_reference)


@dataclass
class CleanupResult:
    """Outcome of a best-effort removal."""

    target: str
    success: bool
    cause: Optional[str] = None

    @classmethod
    def ok(cls, target: str) -> "CleanupResult":
        return cls(target=target, success=True)

    @classmethod
    def failed(cls, target: str, cause) -> "CleanupResult":
        return cls(target=target, success=False, cause=str(cause))


class Mount(BaseModel):
    """Bind mount for a container launch."""
    source: str
    target: str
    mode: Optional[str] = None

    def to_cli(self) -> str:
        if self.mode:
            return f"{self.source}:{self.target}:{self.mode}"
        return f"{self.source}:{self.target}"


class LaunchSpec(BaseModel):
    """Everything needed to start a project container."""
    name: str
    hostname: str
    image: str
    mounts: List[Mount] = Field(default_factory=list)
    ports: List[str] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)
    privileged: bool = False
    security_opts: List[str] = Field(default_factory=list)
    extra_args: List[str] = Field(default_factory=list)
    command: List[str] = Field(default_factory=list)

    def to_cli_args(self) -> List[str]:
        """Render as arguments for `<runtime> run`."""
        args = ["run", "-it", "--name", self.name, "--hostname", self.hostname]
        args.extend(self.extra_args)
        for mount in self.mounts:
            args.extend(["-v", mount.to_cli()])
        if self.privileged:
            args.append("--privileged")
        for opt in self.security_opts:
            args.extend(["--security-opt", opt])
        for port in self.ports:
            args.extend(["-p", port])
        for key, value in self.environment.items():
            args.extend(["-e", f"{key}={value}"])
        args.append(self.image)
        args.extend(self.command)
        return args
