"""Channel directory ordering, resolution and dedup."""

from parley.channels import ChannelDirectory
from parley.models.channel import GROUP_CHAT_ID, GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE, Channel
from parley.models.identity import PublicIdentity


def directory() -> ChannelDirectory:
    return ChannelDirectory(owner_id=7)


def test_implicit_entries_come_first():
    d = directory()
    assert d.titles() == [GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE]
    assert [c.id for c in d.entries()] == [GROUP_CHAT_ID, 7]
    assert len(d) == 2


def test_resolve_id():
    d = directory()
    d.ensure_channel(PublicIdentity(id=9, username="bob"))
    assert d.resolve_id(GROUP_CHANNEL_TITLE) == GROUP_CHAT_ID
    assert d.resolve_id(NOTES_CHANNEL_TITLE) == 7
    assert d.resolve_id("bob") == 9
    assert d.resolve_id("nobody") == GROUP_CHAT_ID


def test_ensure_channel_is_idempotent():
    d = directory()
    bob = PublicIdentity(id=9, username="bob")
    assert d.ensure_channel(bob) is True
    length = len(d)
    assert d.ensure_channel(bob) is False
    assert len(d) == length
    assert d.titles() == [GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE, "bob"]


def test_ensure_channel_for_self_adds_nothing():
    d = directory()
    assert d.ensure_channel(PublicIdentity(id=7, username="ann")) is False
    assert len(d) == 2
    assert d.contains(7)


def test_contains():
    d = directory()
    d.ensure_channel(PublicIdentity(id=9, username="bob"))
    assert d.contains(GROUP_CHAT_ID)
    assert d.contains(9)
    assert not d.contains(12)


def test_replace_all_drops_implicit_and_duplicate_ids():
    d = directory()
    d.ensure_channel(PublicIdentity(id=12, username="carol"))
    d.replace_all([
        Channel(id=9, title="bob"),
        Channel(id=7, title="ann"),
        Channel(id=GROUP_CHAT_ID, title="MAIN"),
        Channel(id=9, title="bob again"),
        Channel(id=15, title="dave"),
    ])
    assert d.titles() == [GROUP_CHANNEL_TITLE, NOTES_CHANNEL_TITLE, "bob", "dave"]
    assert not d.contains(12)


def test_title_of():
    d = directory()
    d.ensure_channel(PublicIdentity(id=9, username="bob"))
    assert d.title_of(GROUP_CHAT_ID) == GROUP_CHANNEL_TITLE
    assert d.title_of(7) == NOTES_CHANNEL_TITLE
    assert d.title_of(9) == "bob"


def test_reset_sets_owner_and_clears_ad_hoc():
    d = directory()
    d.ensure_channel(PublicIdentity(id=9, username="bob"))
    d.reset(owner_id=9)
    assert len(d) == 2
    assert d.resolve_id(NOTES_CHANNEL_TITLE) == 9
