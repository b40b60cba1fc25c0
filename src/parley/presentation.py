"""
Presentation contract: what the session core asks of a UI, and the effects
handlers return for the client to carry out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence, Union

from parley.models.message import Message


class Presenter(Protocol):
    def notify(self, description: str) -> None: ...

    def refresh_displayed_messages(self, messages: Sequence[Message], scroll_to_top: bool = False) -> None: ...

    def refresh_channel_selector(self, titles: Sequence[str], selected: Optional[str] = None) -> None: ...

    def update_profile(self, text: str) -> None: ...

    async def prompt_credentials(self, title: str) -> Optional[tuple[str, str]]:
        """Ask for (username, password). None means the user cancelled."""
        ...


class PromptKind(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


@dataclass(frozen=True)
class Notify:
    description: str


@dataclass(frozen=True)
class UpdateProfile:
    text: str


@dataclass(frozen=True)
class RefreshMessages:
    scroll_to_top: bool = False


@dataclass(frozen=True)
class RefreshChannels:
    selected: Optional[str] = None


@dataclass(frozen=True)
class PromptCredentials:
    kind: PromptKind
    title: str


@dataclass(frozen=True)
class Emit:
    event: str
    payload: Any


Effect = Union[Notify, UpdateProfile, RefreshMessages, RefreshChannels, PromptCredentials, Emit]
