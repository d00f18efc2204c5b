"""Main CLI entry point for viber00t."""

import logging

import click

from .commands.clean import clean
from .commands.init import init
from .commands.run import run
from .commands.shell import shell
from .commands.version import version
from .helpers import show_help, show_version

HELP_ARGS = {'help', '-h', '--help'}
VERSION_ARGS = {'version', '-v', '--version'}
GROUP_OPTIONS = {'--verbose'}


class DefaultRunGroup(click.Group):
    """Group that sends anything that is not a known command to `run`.

    `viber00t` alone starts the agent, and `viber00t --resume` forwards
    `--resume` to it. Help and version requests are answered wherever they
    appear on the command line.
    """

    def parse_args(self, ctx, args):
        if any(arg in HELP_ARGS for arg in args):
            show_help()
            ctx.exit()
        if any(arg in VERSION_ARGS for arg in args):
            show_version()
            ctx.exit()

        args = list(args)
        leading = []
        while args and args[0] in GROUP_OPTIONS:
            leading.append(args.pop(0))
        if not args or args[0] not in self.commands:
            args.insert(0, 'run')
        return super().parse_args(ctx, leading + args)


@click.group(cls=DefaultRunGroup)
@click.option('--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """viber00t - Containerized development environments"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
cli.add_command(run)
cli.add_command(init)
cli.add_command(clean)
cli.add_command(shell)
cli.add_command(version)


def main():
    cli()


if __name__ == '__main__':
    main()
