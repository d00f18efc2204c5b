"""Version command for viber00t."""

import click

from viber00t.cli.helpers import show_version


@click.command()
def version():
    """Show version information"""
    show_version()
