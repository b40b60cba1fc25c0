"""
Session state: who is logged in, which channel is open, what is on screen.

Mutated only from the client's event-processing task. Everything else reads
a SessionSnapshot.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from parley.models.channel import GROUP_CHAT_ID
from parley.models.identity import User
from parley.models.message import Message


@dataclass(frozen=True)
class SessionSnapshot:
    current_user: Optional[User]
    logged_in: bool
    current_channel_id: int


@dataclass
class SessionState:
    current_user: Optional[User] = None
    logged_in: bool = False
    current_channel_id: int = GROUP_CHAT_ID

    @property
    def viewer_id(self) -> Optional[int]:
        return self.current_user.id if self.current_user else None

    def log_in(self, user: User) -> None:
        self.current_user = user
        self.logged_in = True
        self.current_channel_id = GROUP_CHAT_ID

    def log_out(self) -> None:
        self.logged_in = False

    def switch_channel(self, channel_id: int) -> None:
        self.current_channel_id = channel_id

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_user=self.current_user,
            logged_in=self.logged_in,
            current_channel_id=self.current_channel_id,
        )


@dataclass
class DisplayedMessages:
    """Messages shown for the open channel, oldest first."""
    _items: list[Message] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    @property
    def items(self) -> tuple[Message, ...]:
        return tuple(self._items)

    def append(self, message: Message) -> None:
        self._items.append(message)

    def replace(self, messages: Iterable[Message]) -> None:
        self._items = list(messages)

    def clear(self) -> None:
        self._items = []
