"""
Channel directory: known channels in display order.

The group and notes entries are implicit and always come first; ad-hoc
private channels are appended after them, never duplicated.
"""

import logging
from typing import Iterable, Optional

from parley.models.channel import GROUP_CHAT_ID, GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE, Channel
from parley.models.identity import PublicIdentity

logger = logging.getLogger(__name__)


class ChannelDirectory:
    def __init__(self, owner_id: Optional[int] = None):
        self.owner_id = owner_id
        self._channels: list[Channel] = []

    def __len__(self) -> int:
        return 2 + len(self._channels)

    @property
    def ad_hoc(self) -> tuple[Channel, ...]:
        return tuple(self._channels)

    def entries(self) -> list[Channel]:
        """All channels in display order. The notes entry carries the owner's id once known."""
        notes_id = self.owner_id if self.owner_id is not None else GROUP_CHAT_ID
        return [
            Channel(id=GROUP_CHAT_ID, title=GROUP_CHANNEL_TITLE),
            Channel(id=notes_id, title=NOTES_CHANNEL_TITLE),
            *self._channels,
        ]

    def titles(self) -> list[str]:
        return [GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE] + [c.title for c in self._channels]

    def title_of(self, channel_id: int) -> str:
        if channel_id == GROUP_CHAT_ID:
            return GROUP_CHANNEL_TITLE
        if channel_id == self.owner_id:
            return NOTES_CHANNEL_TITLE
        for channel in self._channels:
            if channel.id == channel_id:
                return channel.title
        return GROUP_CHANNEL_TITLE

    def resolve_id(self, title: str) -> int:
        """Map a selector title to a channel id. Unknown titles fall back to the group."""
        if title == GROUP_CHANNEL_TITLE:
            return GROUP_CHAT_ID
        if title == NOTES_CHANNEL_TITLE and self.owner_id is not None:
            return self.owner_id
        for channel in self._channels:
            if channel.title == title:
                return channel.id
        return GROUP_CHAT_ID

    def contains(self, channel_id: int) -> bool:
        if channel_id == GROUP_CHAT_ID or channel_id == self.owner_id:
            return True
        return any(c.id == channel_id for c in self._channels)

    def ensure_channel(self, identity: PublicIdentity) -> bool:
        """Make sure a private channel with `identity` exists. Returns True if one was appended."""
        if identity.id == self.owner_id or self.contains(identity.id):
            return False
        self._channels.append(Channel(id=identity.id, title=identity.username))
        logger.debug("Added ad-hoc channel %s (%d)", identity.username, identity.id)
        return True

    def replace_all(self, channels: Iterable[Channel]) -> None:
        """Adopt the server's channel list in place of every ad-hoc entry."""
        seen: set[int] = set()
        replaced: list[Channel] = []
        for channel in channels:
            if channel.id == GROUP_CHAT_ID or channel.id == self.owner_id or channel.id in seen:
                continue
            seen.add(channel.id)
            replaced.append(channel)
        self._channels = replaced

    def reset(self, owner_id: Optional[int] = None) -> None:
        self.owner_id = owner_id
        self._channels = []
