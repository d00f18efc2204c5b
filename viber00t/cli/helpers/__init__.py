"""CLI helper functions for viber00t.

This module provides reusable helpers for CLI commands:
- Coloured status output
- Configuration loading with consistent error handling
- Container runtime initialization
- The shared ensure-image-then-launch flow used by `run` and `shell`
"""

import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from viber00t.core.config_resolver import ConfigResolver
from viber00t.core.constants import APP_NAME, CONTAINER_PREFIX, VERSION
from viber00t.core.container_runner import ContainerRunner, LaunchSpecBuilder
from viber00t.core.image_builder import ProjectImageCache
from viber00t.models.config import EffectiveConfig, GlobalConfig
from viber00t.models.environment import EnvironmentName
from viber00t.services.docker_service import DockerService
from viber00t.services.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ContainerLaunchError,
    DockerServiceError,
)

console = Console(highlight=False)

BANNER = r"""
╦  ╦╦╔╗ ╔═╗╦═╗╔═╗╔═╗╔╦╗
╚╗╔╝║╠╩╗║╣ ╠╦╝║ ║║ ║ ║
 ╚╝ ╩╚═╝╚═╝╩╚═╚═╝╚═╝ ╩
      [ FULL SPECTRUM CYBER ]
"""


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def warn(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {message}")


def error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def info(message: str) -> None:
    console.print(f"[magenta]◉[/magenta] {message}")


def show_help() -> None:
    """Print the banner and usage summary."""
    console.print(f"[magenta]{BANNER}[/magenta]")
    console.print("[cyan]Containerized Development Environments[/cyan]")
    console.print("[bright_black]═══════════════════════════════════════[/bright_black]")
    console.print()
    console.print("[yellow]USAGE:[/yellow]")
    console.print(f"  {APP_NAME}              [bright_black]# Run container (default)[/bright_black]")
    console.print(f"  {APP_NAME} init         [bright_black]# Create Viber00t.toml[/bright_black]")
    console.print(f"  {APP_NAME} shell        [bright_black]# Interactive bash shell[/bright_black]")
    console.print(f"  {APP_NAME} clean        [bright_black]# Clean cached images[/bright_black]")
    console.print()
    console.print("[yellow]ENVIRONMENTS:[/yellow]")
    console.print("  " + ", ".join(env.value for env in EnvironmentName))
    console.print()
    console.print("[magenta]» vibec0re.github.io[/magenta]")


def show_version() -> None:
    console.print(f"[magenta]{APP_NAME} v{VERSION}[/magenta] - Full Spectrum Cyber")
    console.print("[bright_black]vibec0re.github.io[/bright_black]")


def load_project_context(project_root: Optional[Path] = None) -> Tuple[ConfigResolver, GlobalConfig, EffectiveConfig]:
    """Load global and project configuration, exiting on failure.

    Returns:
        Tuple of (resolver, global_config, effective_config)
    """
    resolver = ConfigResolver(project_root)
    try:
        global_config = resolver.load_global()
        config = resolver.resolve()
    except ConfigNotFoundError:
        error(f"No Viber00t.toml found. Run '{APP_NAME} init' first.")
        sys.exit(1)
    except ConfigError as e:
        error(escape(str(e)))
        sys.exit(1)
    if not config.project_name:
        error(escape("Viber00t.toml is missing [project] name."))
        sys.exit(1)
    return resolver, global_config, config


def get_docker_service(global_config: GlobalConfig) -> DockerService:
    """Connect to the container runtime, exiting with an error if unavailable."""
    try:
        return DockerService(cli=global_config.container_cli)
    except DockerServiceError as e:
        error(escape(str(e)))
        sys.exit(1)


def ensure_image_and_launch(
    passthrough_args: Sequence[str] = (),
    command: Optional[List[str]] = None,
    name_prefix: str = CONTAINER_PREFIX,
    label: str = APP_NAME,
) -> None:
    """Ensure the project image is current, then launch it."""
    _resolver, global_config, config = load_project_context()
    docker_service = get_docker_service(global_config)

    try:
        image = ProjectImageCache(docker_service).ensure_project_image(config, global_config)
    except (DockerServiceError, ConfigError) as e:
        error(f"Failed to build image: {escape(str(e))}")
        sys.exit(1)

    spec = LaunchSpecBuilder(global_config).build(
        config, image, passthrough_args, command=command, name_prefix=name_prefix
    )

    info(f"Starting {label} for [cyan]{config.project_name}[/cyan]...")
    console.print("[bright_black]───────────────────────────────────[/bright_black]")

    try:
        ContainerRunner(docker_service).launch(spec)
    except ContainerLaunchError as e:
        error(f"Container failed: {escape(str(e))}")
        sys.exit(e.returncode or 1)
