"""Init command for viber00t."""

import sys

import click
from rich.markup import escape

from viber00t.cli.helpers import error, success, warn
from viber00t.core.config_resolver import ConfigResolver
from viber00t.core.constants import PROJECT_CONFIG_NAME


@click.command()
def init():
    """Create Viber00t.toml (and the global config if missing)"""
    resolver = ConfigResolver()
    try:
        if resolver.ensure_global_config():
            success(f"Created global config at {resolver.global_config_path}")
        created = resolver.ensure_project_config()
    except OSError as e:
        error(escape(f"Failed to create config: {e}"))
        sys.exit(1)

    if created:
        success(f"Created {PROJECT_CONFIG_NAME}")
    else:
        warn(f"{PROJECT_CONFIG_NAME} already exists")
