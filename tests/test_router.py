"""Visibility of inbound messages for a viewer's current channel."""

import pytest

from parley.models.channel import GROUP_CHAT_ID
from parley.models.identity import PublicIdentity, User
from parley.models.message import Message
from parley.router import is_visible
from parley.state import SessionState

VIEWER = User(id=7, username="ann")


def viewer_on(channel_id: int) -> SessionState:
    state = SessionState()
    state.log_in(VIEWER)
    state.switch_channel(channel_id)
    return state


def message(author_id: int, chat_id: int, text: str = "hi") -> Message:
    return Message(author=PublicIdentity(id=author_id, username=f"user{author_id}"), chat_id=chat_id, text=text)


class TestScenarios:
    def test_viewer_on_group(self):
        viewer = viewer_on(GROUP_CHAT_ID)
        assert is_visible(message(3, GROUP_CHAT_ID), viewer) is True
        assert is_visible(message(3, 9), viewer) is False

    def test_viewer_on_notes(self):
        viewer = viewer_on(7)
        assert is_visible(message(7, 7), viewer) is True
        assert is_visible(message(7, 9), viewer) is False

    def test_viewer_on_private_channel(self):
        viewer = viewer_on(9)
        assert is_visible(message(9, 7), viewer) is True
        assert is_visible(message(7, 9), viewer) is True
        assert is_visible(message(9, 3), viewer) is False


@pytest.mark.parametrize("author_id", [3, 7, 9])
@pytest.mark.parametrize("channel_id", [GROUP_CHAT_ID, 7, 9])
def test_group_messages_follow_group_selection(author_id, channel_id):
    assert is_visible(message(author_id, GROUP_CHAT_ID), viewer_on(channel_id)) == (channel_id == GROUP_CHAT_ID)


@pytest.mark.parametrize("channel_id", [GROUP_CHAT_ID, 7, 9])
def test_notes_visible_only_in_notes(channel_id):
    assert is_visible(message(7, 7), viewer_on(channel_id)) == (channel_id == 7)


def test_message_to_someone_else_is_never_visible():
    for channel_id in (GROUP_CHAT_ID, 3, 7, 9):
        assert is_visible(message(3, 9), viewer_on(channel_id)) is False


def test_snapshot_and_state_agree():
    state = viewer_on(9)
    for m in (message(9, 7), message(7, 9), message(3, GROUP_CHAT_ID), message(7, 7)):
        assert is_visible(m, state) == is_visible(m, state.snapshot())


def test_repeated_calls_give_same_answer():
    state = viewer_on(9)
    m = message(9, 7)
    assert [is_visible(m, state) for _ in range(3)] == [True, True, True]
    assert state.current_channel_id == 9


def test_logged_out_viewer_sees_only_group():
    state = SessionState()
    assert is_visible(message(3, GROUP_CHAT_ID), state) is True
    assert is_visible(message(3, 9), state) is False
