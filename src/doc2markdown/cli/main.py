"""Main CLI entry point for doc2markdown."""

import click

from .. import __version__
from .commands.convert import convert_command


@click.group()
@click.version_option(version=__version__)
def cli():
    """Convert Feishu/Lark documents to Markdown."""
    pass


# Register commands
cli.add_command(convert_command)


if __name__ == "__main__":
    cli()
