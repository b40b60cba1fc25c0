"""
Chat message models: inbound messages, outbound requests and error payloads.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from parley.errors import AuthError
from parley.models.channel import GROUP_CHAT_ID
from parley.models.identity import PublicIdentity, User


class ChatKind(str, Enum):
    GROUP = "group"
    PRIVATE = "private"


class Message(BaseModel):
    """S2C /message payload, also the element type of /get-messages."""
    author: PublicIdentity
    chat_id: int = Field(alias="chatId")
    text: str = ""
    timestamp: Optional[datetime] = None

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def chat_kind(self) -> ChatKind:
        return ChatKind.GROUP if self.chat_id == GROUP_CHAT_ID else ChatKind.PRIVATE


class ErrorDescription(BaseModel):
    """S2C /failed-login and /failed-registeration payload."""
    description: str = ""

    def to_error(self, code: str) -> AuthError:
        return AuthError(self.description, code=code)


class LoginData(BaseModel):
    """C2S /login and /register payload."""
    username: str
    password_hash: str = Field(alias="passwordHash")

    model_config = {"populate_by_name": True}


class OutboundMessage(BaseModel):
    """C2S /message payload."""
    author: PublicIdentity
    chat_id: int = Field(alias="chatId")
    text: str

    model_config = {"populate_by_name": True}


class MessagesRequest(BaseModel):
    """C2S /get-messages payload."""
    chat_id: int = Field(alias="chatId")
    requesting_user: User = Field(alias="requestingUser")

    model_config = {"populate_by_name": True}


class ChannelsRequest(BaseModel):
    """C2S /get-channels payload."""
    requesting_user: User = Field(alias="requestingUser")

    model_config = {"populate_by_name": True}
