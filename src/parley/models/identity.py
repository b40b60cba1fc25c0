"""
Identity models: the logged-in user and other users as the server shows them.
"""

from pydantic import BaseModel, Field


class PublicIdentity(BaseModel):
    """id + username, as seen by other users."""
    id: int
    username: str

    model_config = {"frozen": True, "populate_by_name": True}


class User(PublicIdentity):
    """Full identity, known only to its owner."""
    password_hash: str = Field(default="", alias="passwordHash")

    def public(self) -> PublicIdentity:
        return PublicIdentity(id=self.id, username=self.username)
