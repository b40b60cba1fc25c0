"""CLI: parley chat"""

import asyncio
from pathlib import Path

import click
from rich.console import Console

from parley.cli.config import settings_option
from parley.cli.presenter import RichPresenter
from parley.client import AsyncChatClient
from parley.presentation import Presenter

console = Console()

HELP = """[cyan]Commands:[/cyan]
  /login, /register     authenticate
  /open <channel>       switch channel (MAIN, NOTES or a user)
  /notes                open your notes
  /dm <username>        talk privately to someone from the current view
  /channels             list channels
  /reconnect            dial the server again
  /quit                 leave
Anything else is sent to the open channel."""


def _run(coro):
    from parley.cli.main import _run
    return _run(coro)


async def handle_line(client: AsyncChatClient, presenter: Presenter, line: str) -> bool:
    """Act on one line of input. Returns False when the user wants to leave."""
    command, _, arg = line.strip().partition(" ")
    arg = arg.strip()
    if command in ("/quit", "/exit"):
        return False
    if command == "/help":
        console.print(HELP)
    elif command == "/login":
        await client.request_login()
    elif command == "/register":
        await client.request_registration()
    elif command == "/open" and arg:
        client.select_channel(arg)
    elif command == "/notes":
        client.open_notes()
    elif command == "/dm" and arg:
        author = next((m.author for m in reversed(client.displayed_messages) if m.author.username == arg), None)
        if author is None:
            presenter.notify(f"No message from {arg} in this channel.")
        else:
            client.open_channel_by_user(author)
    elif command == "/channels":
        presenter.refresh_channel_selector(
            client.directory.titles(), client.directory.title_of(client.session.current_channel_id))
    elif command == "/reconnect":
        with console.status("Connecting..."):
            await client.reconnect()
    elif command.startswith("/"):
        presenter.notify(f"Unknown command {command}. Type /help.")
    else:
        client.send_message(line)
    await client.drain()
    return True


@click.command("chat")
@settings_option
def chat_cmd(settings_path: Path):
    """Interactive chat session."""

    async def _chat():
        presenter = RichPresenter(console)
        client = AsyncChatClient(presenter, settings_path=settings_path)
        with console.status("Connecting..."):
            await client.start()
        console.print(HELP + "\n")
        try:
            while True:
                presenter.reading_input = True
                try:
                    line = await asyncio.to_thread(
                        click.prompt, "", prompt_suffix="> ", default="", show_default=False)
                finally:
                    presenter.reading_input = False
                if not await handle_line(client, presenter, line):
                    break
        except (KeyboardInterrupt, EOFError, click.Abort):
            pass
        finally:
            await client.close()

    _run(_chat())
