"""
Channel model and the reserved channel constants.

A channel id alone determines its kind: GROUP_CHAT_ID is the shared group,
the viewer's own id is the notes channel, any other id is an ad-hoc private
channel with that user.
"""

from pydantic import BaseModel

GROUP_CHAT_ID = 0
GROUP_CHANNEL_TITLE = "MAIN"
NOTES_CHANNEL_TITLE = "NOTES"


class Channel(BaseModel):
    id: int
    title: str

    model_config = {"frozen": True}
