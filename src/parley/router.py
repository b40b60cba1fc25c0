"""
Message routing: does an inbound message belong in the viewer's current view?
"""

from typing import Optional, Protocol

from parley.models.channel import GROUP_CHAT_ID
from parley.models.identity import User
from parley.models.message import ChatKind, Message


class Viewer(Protocol):
    @property
    def current_user(self) -> Optional[User]: ...

    @property
    def current_channel_id(self) -> int: ...


def is_visible(message: Message, viewer: Viewer) -> bool:
    """Pure visibility predicate for `message` given the viewer's identity and open channel.

    Private messages addressed to neither the viewer nor written by them are
    never visible. Without a logged-in user only group messages can be.
    """
    if message.chat_kind is ChatKind.GROUP:
        return viewer.current_channel_id == GROUP_CHAT_ID

    user = viewer.current_user
    if user is None:
        return False

    from_me = message.author.id == user.id
    to_me = message.chat_id == user.id

    # A notes message is both from and to the viewer; it must be checked first.
    if from_me and to_me:
        return viewer.current_channel_id == user.id
    if from_me:
        return viewer.current_channel_id == message.chat_id
    if to_me:
        return viewer.current_channel_id == message.author.id
    return False
