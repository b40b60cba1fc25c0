"""
Terminal presenter: renders the chat session with rich.
"""

import asyncio
from typing import Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from parley.models.message import Message


def format_message(message: Message) -> str:
    stamp = f"[dim]{message.timestamp:%H:%M}[/dim] " if message.timestamp else ""
    return f"{stamp}[bold cyan]{escape(message.author.username)}[/bold cyan]: {escape(message.text)}"


class RichPresenter:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        # Set while the chat prompt owns stdin; credential prompts must not compete for it.
        self.reading_input = False
        self._shown = 0

    def notify(self, description: str) -> None:
        self.console.print(f"[yellow]{escape(description)}[/yellow]")

    def update_profile(self, text: str) -> None:
        self.console.print(f"[bold]{escape(text)}[/bold]")

    def refresh_displayed_messages(self, messages: Sequence[Message], scroll_to_top: bool = False) -> None:
        if scroll_to_top or len(messages) < self._shown:
            self.console.rule()
            self._shown = 0
        for message in messages[self._shown:]:
            self.console.print(format_message(message))
        self._shown = len(messages)

    def refresh_channel_selector(self, titles: Sequence[str], selected: Optional[str] = None) -> None:
        shown = [f"[reverse]{escape(t)}[/reverse]" if t == selected else escape(t) for t in titles]
        self.console.print("[dim]Channels:[/dim] " + " | ".join(shown))

    async def prompt_credentials(self, title: str) -> Optional[tuple[str, str]]:
        if self.reading_input:
            self.notify(f"{title}\nType /login or /register to try again.")
            return None
        self.console.print(f"[bold]{escape(title)}[/bold]")
        username = await asyncio.to_thread(click.prompt, "username", default="", show_default=False)
        if not username:
            return None
        password = await asyncio.to_thread(click.prompt, "password", hide_input=True)
        return username, password
