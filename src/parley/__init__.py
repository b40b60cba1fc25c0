"""
parley: real-time chat client session.

Keeps a Socket.IO connection to a chat server, tracks the open channel
(group, private or notes) and decides which inbound messages belong on screen.
"""

from parley.client import AsyncChatClient
from parley.channels import ChannelDirectory
from parley.dispatcher import EventDispatcher, SessionContext
from parley.errors import (
    AuthError,
    ConfigError,
    ConnectivityError,
    DispatchError,
    ParleyError,
    PreconditionError,
)
from parley.models.events import C2SEvent, S2CEvent
from parley.router import is_visible
from parley.state import SessionState
from parley.supervisor import ConnectionState, ConnectionSupervisor

__version__ = "0.1.0"
__all__ = [
    "AsyncChatClient",
    "ChannelDirectory",
    "EventDispatcher",
    "SessionContext",
    "SessionState",
    "ConnectionState",
    "ConnectionSupervisor",
    "is_visible",
    "ParleyError",
    "AuthError",
    "ConfigError",
    "ConnectivityError",
    "DispatchError",
    "PreconditionError",
    "C2SEvent",
    "S2CEvent",
]
