"""Dockerfile templates for base and project images."""

from typing import List, Optional, Sequence

from ..models.config import EffectiveConfig, GlobalConfig
from ..models.environment import EnvironmentName
from .constants import BASE_OS_IMAGE, CORE_PACKAGES, PROJECT_WORKDIR

BASE_DOCKERFILE = """FROM {from_image}

ENV DEBIAN_FRONTEND=noninteractive

# Install base packages
{base_install}

# Install Claude Code
RUN curl -fsSL https://claude.ai/install.sh | bash
{environment}
ENV PATH="/root/.local/bin:${{PATH}}"
WORKDIR {workdir}
CMD ["claude"]
"""

PROJECT_DOCKERFILE = """FROM {base_image}

ENV DEBIAN_FRONTEND=noninteractive
{packages}
# Project environment setup
WORKDIR {workdir}
CMD ["claude"]
"""


def apt_install(packages: Sequence[str]) -> str:
    """RUN step installing apt packages and clearing the package lists."""
    lines = " \\\n    ".join(packages)
    return (
        "RUN apt-get update && \\\n"
        "    apt-get install -y --no-install-recommends \\\n"
        f"    {lines} && \\\n"
        "    rm -rf /var/lib/apt/lists/*"
    )


def environment_steps(env: EnvironmentName) -> str:
    """Dockerfile steps installing one environment's toolchain."""
    profile = env.profile
    steps = [f"# Install {env.value} environment", apt_install(profile.packages)]
    if profile.setup:
        steps.append(profile.setup)
    return "\n\n".join(steps)


def generate_base_dockerfile(env: Optional[EnvironmentName], global_config: GlobalConfig) -> str:
    """Render the Dockerfile for an environment's base image.

    ``env`` of None renders the neutral tier with no language tooling.
    """
    packages: List[str] = list(CORE_PACKAGES) + list(global_config.base_packages)
    environment = f"\n{environment_steps(env)}\n" if env is not None else ""
    return BASE_DOCKERFILE.format(
        from_image=BASE_OS_IMAGE,
        base_install=apt_install(packages),
        environment=environment,
        workdir=PROJECT_WORKDIR,
    )


def generate_project_dockerfile(config: EffectiveConfig, base_image: str) -> str:
    """Render the Dockerfile layering project packages on a base image.

    ``config.packages`` already starts with the global default packages.
    Environments after the first are installed here since the base image only
    covers the primary one.
    """
    sections = []
    if config.packages:
        sections.append("# Install project-specific packages\n" + apt_install(config.packages))
    for env in config.secondary_envs:
        sections.append(environment_steps(env))

    packages = "".join(f"\n{section}\n" for section in sections)
    return PROJECT_DOCKERFILE.format(
        base_image=base_image,
        packages=packages,
        workdir=PROJECT_WORKDIR,
    )
