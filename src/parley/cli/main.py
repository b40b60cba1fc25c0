"""
Parley CLI: `parley` command.

Commands:
  parley chat              Interactive chat session
  parley config show       Print the server settings
  parley config set        Change host and/or port
  parley config reset      Restore the default settings
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install parley[cli]")

from parley import __version__

console = Console()


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log connection and routing details")
def main(verbose: bool):
    """Parley: a terminal client for the chat server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# Register subcommands from separate modules
from parley.cli.chat import chat_cmd
from parley.cli.config import config

main.add_command(chat_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()
