"""Configuration models for viber00t."""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .environment import EnvironmentName

# Used as a file name and as an image repository component
PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


def is_valid_project_name(name: str) -> bool:
    return PROJECT_NAME_PATTERN.fullmatch(name) is not None


class ProjectSection(BaseModel):
    """The [project] table of Viber00t.toml."""
    name: str = ""
    agent: str = ""
    privileged: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        # Empty is reported later as a missing name
        if value and not is_valid_project_name(value):
            raise ValueError(
                "must be lowercase letters, digits, '.', '_' or '-' and start with a letter or digit"
            )
        return value


class InstallBlock(BaseModel):
    """One [[install]] block."""
    packages: List[str] = Field(default_factory=list)
    envs: List[EnvironmentName] = Field(default_factory=list)


class VolumeMount(BaseModel):
    """Extra bind mount declared by the project."""
    source: str = ""
    target: str = ""


class PortMapping(BaseModel):
    """Host to container port binding."""
    host: int = 0
    container: int = 0


class ProjectConfig(BaseModel):
    """Parsed Viber00t.toml."""
    project: ProjectSection = Field(default_factory=ProjectSection)
    install: List[InstallBlock] = Field(default_factory=list)
    volumes: List[VolumeMount] = Field(default_factory=list)
    ports: List[PortMapping] = Field(default_factory=list)

    @property
    def primary_install(self) -> InstallBlock:
        """The first install block, which is the only one that affects the image."""
        if self.install:
            return self.install[0]
        return InstallBlock()


class GlobalConfig(BaseModel):
    """Process-wide defaults from ~/.config/viber00t/config.toml."""

    model_config = ConfigDict(frozen=True)

    default_agent: str = "claude"
    default_privileged: bool = False
    default_image: str = "viber00t/base:latest"
    claude_flags: List[str] = Field(default_factory=lambda: ["--dangerously-skip-permissions"])
    agent_flags: Dict[str, List[str]] = Field(default_factory=dict)
    default_envs: List[EnvironmentName] = Field(default_factory=list)
    default_packages: List[str] = Field(default_factory=list)
    base_packages: List[str] = Field(default_factory=list)
    container_cli: str = "podman"

    def flags_for(self, agent: str) -> List[str]:
        """Return the invocation flags configured for an agent."""
        if agent in self.agent_flags:
            return list(self.agent_flags[agent])
        if agent == "claude":
            return list(self.claude_flags)
        return []


class EffectiveConfig(BaseModel):
    """Project configuration after global defaults have been applied."""
    project_name: str
    agent: str
    privileged: bool = False
    packages: List[str] = Field(default_factory=list)
    envs: List[EnvironmentName] = Field(default_factory=list)
    volumes: List[VolumeMount] = Field(default_factory=list)
    ports: List[PortMapping] = Field(default_factory=list)
    config_mtime: Optional[int] = None

    @property
    def primary_env(self) -> Optional[EnvironmentName]:
        return self.envs[0] if self.envs else None

    @property
    def secondary_envs(self) -> List[EnvironmentName]:
        return self.envs[1:]

    def install_packages(self) -> List[str]:
        """Flat package list: explicit packages followed by every environment's packages."""
        packages = list(self.packages)
        for env in self.envs:
            packages.extend(env.profile.packages)
        return packages
