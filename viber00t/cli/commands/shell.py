"""Shell command for viber00t."""

import click

from viber00t.cli.helpers import ensure_image_and_launch
from viber00t.core.constants import SHELL_COMMAND, SHELL_CONTAINER_PREFIX


@click.command()
def shell():
    """Start an interactive bash shell in the project container"""
    ensure_image_and_launch(command=list(SHELL_COMMAND), name_prefix=SHELL_CONTAINER_PREFIX, label="shell")
