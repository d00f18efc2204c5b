"""Clean command for viber00t."""

import click
from rich.markup import escape

from viber00t.cli.helpers import console, get_docker_service, info, load_project_context, success, warn
from viber00t.core.image_builder import ProjectImageCache


@click.command()
def clean():
    """Remove this project's cached images, build files and state"""
    _resolver, global_config, config = load_project_context()
    docker_service = get_docker_service(global_config)

    info(f"Cleaning images for project: [cyan]{config.project_name}[/cyan]")
    results = ProjectImageCache(docker_service).clean(config.project_name)

    for result in results:
        if not result.success:
            warn(escape(f"Failed to clean {result.target}: {result.cause}"))

    success("Project cleanup complete!")
