"""Run command for viber00t."""

import click

from viber00t.cli.helpers import ensure_image_and_launch


@click.command(context_settings=dict(ignore_unknown_options=True, allow_extra_args=True))
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
def run(args):
    """Build the project image if needed and start the agent (default)"""
    ensure_image_and_launch(passthrough_args=list(args))
