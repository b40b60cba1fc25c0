"""
Inbound event handlers: one per S2C event.
"""

import logging
from typing import Optional

from parley.dispatcher import EventDispatcher, SessionContext
from parley.models.channel import GROUP_CHAT_ID, GROUP_CHANNEL_TITLE, Channel
from parley.models.events import C2SEvent, S2CEvent
from parley.models.identity import User
from parley.models.message import (
    ChannelsRequest,
    ChatKind,
    ErrorDescription,
    Message,
    MessagesRequest,
)
from parley.presentation import (
    Effect,
    Emit,
    PromptCredentials,
    PromptKind,
    RefreshChannels,
    RefreshMessages,
    UpdateProfile,
)
from parley.router import is_visible

logger = logging.getLogger(__name__)

FAILED_LOGIN_PROFILE = "FAILED LOGIN"


def on_login_failed(ctx: SessionContext, payload: ErrorDescription) -> list[Effect]:
    error = payload.to_error("login_failed")
    logger.warning("Login rejected: %s", error)
    ctx.state.log_out()
    return [
        PromptCredentials(PromptKind.LOGIN, payload.description),
        UpdateProfile(FAILED_LOGIN_PROFILE),
    ]


def on_register_failed(ctx: SessionContext, payload: ErrorDescription) -> list[Effect]:
    error = payload.to_error("register_failed")
    logger.warning("Registration rejected: %s", error)
    ctx.state.log_out()
    return [
        PromptCredentials(PromptKind.REGISTER, payload.description),
        UpdateProfile(FAILED_LOGIN_PROFILE),
    ]


def on_login_success(ctx: SessionContext, user: User) -> list[Effect]:
    logger.info("Logged in as %s (%d)", user.username, user.id)
    ctx.state.log_in(user)
    ctx.directory.reset(owner_id=user.id)
    ctx.messages.clear()
    # The group's history loads once the channel list arrives and MAIN is re-selected.
    return [
        UpdateProfile(f"WELCOME, {user.username}"),
        RefreshMessages(),
        Emit(C2SEvent.GET_CHANNELS, ChannelsRequest(requesting_user=user)),
    ]


def on_message(ctx: SessionContext, message: Message) -> list[Effect]:
    effects: list[Effect] = []
    viewer_id = ctx.state.viewer_id
    if (
        message.chat_kind is ChatKind.PRIVATE
        and viewer_id is not None
        and message.chat_id == viewer_id
        and message.author.id != viewer_id
        and ctx.directory.ensure_channel(message.author)
    ):
        effects.append(RefreshChannels(selected=ctx.directory.title_of(ctx.state.current_channel_id)))

    if is_visible(message, ctx.state.snapshot()):
        ctx.messages.append(message)
        effects.append(RefreshMessages())
    return effects


def on_messages_batch(ctx: SessionContext, messages: Optional[list[Message]]) -> list[Effect]:
    logger.debug("Got %d messages", len(messages or []))
    ctx.messages.replace(messages or [])
    return [RefreshMessages(scroll_to_top=True)]


def on_channels_list(ctx: SessionContext, channels: Optional[list[Channel]]) -> list[Effect]:
    logger.debug("Got %d channels", len(channels or []))
    ctx.directory.replace_all(channels or [])
    if ctx.state.current_channel_id != GROUP_CHAT_ID:
        return [RefreshChannels()]

    effects: list[Effect] = [RefreshChannels(selected=GROUP_CHANNEL_TITLE)]
    # Re-selecting MAIN opens it, which loads its history.
    user = ctx.state.current_user
    if ctx.state.logged_in and user is not None:
        effects.append(Emit(C2SEvent.GET_MESSAGES, MessagesRequest(chat_id=GROUP_CHAT_ID, requesting_user=user)))
    return effects


def register_default_handlers(dispatcher: EventDispatcher) -> EventDispatcher:
    dispatcher.register(S2CEvent.LOGIN_FAILED, ErrorDescription, on_login_failed)
    dispatcher.register(S2CEvent.REGISTER_FAILED, ErrorDescription, on_register_failed)
    dispatcher.register(S2CEvent.LOGIN_SUCCESS, User, on_login_success)
    dispatcher.register(S2CEvent.MESSAGE, Message, on_message)
    dispatcher.register(S2CEvent.MESSAGES_BATCH, Optional[list[Message]], on_messages_batch)
    dispatcher.register(S2CEvent.CHANNELS_LIST, Optional[list[Channel]], on_channels_list)
    return dispatcher


def build_dispatcher() -> EventDispatcher:
    return register_default_handlers(EventDispatcher())
