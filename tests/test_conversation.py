"""Conversation store: arrival order, filtered views, history replacement."""

from datetime import datetime, timezone

from peerchat.conversation import ConversationStore
from peerchat.models.message import Message


def msg(sender, receiver, content, minute=0):
    return Message(sender=sender, receiver=receiver, content=content,
                   timestamp=datetime(2024, 5, 1, 10, minute, tzinfo=timezone.utc))


def contents(messages):
    return [m.content for m in messages]


def test_view_is_the_unordered_pair_subset_in_append_order():
    store = ConversationStore("u1")
    sequence = [
        msg("u1", "u2", "a"),
        msg("u3", "u1", "b"),
        msg("u2", "u1", "c"),
        msg("u2", "u3", "d"),  # neither side is local
        msg("u1", "u3", "e"),
        msg("u1", "u2", "f"),
    ]
    for m in sequence:
        store.append(m)

    assert contents(store.view_for("u2")) == ["a", "c", "f"]
    assert contents(store.view_for("u3")) == ["b", "e"]
    assert store.view_for("u4") == []
    assert len(store) == 6


def test_view_is_recomputed_on_every_read():
    store = ConversationStore("u1")
    first = store.view_for("u2")
    store.append(msg("u2", "u1", "late"))
    assert first == []
    assert contents(store.view_for("u2")) == ["late"]


def test_arrival_order_wins_over_timestamps():
    store = ConversationStore("u1")
    store.append(msg("u2", "u1", "second-stamped", minute=30))
    store.append(msg("u2", "u1", "first-stamped", minute=1))
    assert contents(store.view_for("u2")) == ["second-stamped", "first-stamped"]


def test_history_then_inbound_event_keeps_arrival_order():
    store = ConversationStore("u1")
    store.replace_history("u2", [msg("u2", "u1", "hi", minute=50)])
    store.append(msg("u2", "u1", "there", minute=5))
    assert contents(store.view_for("u2")) == ["hi", "there"]


def test_begin_load_enters_loading_and_replace_history_leaves_it():
    store = ConversationStore("u1")
    store.begin_load("u2")
    assert store.loading
    assert store.active_peer == "u2"
    store.replace_history("u2", [msg("u2", "u1", "hi")])
    assert not store.loading


def test_replace_history_replaces_rather_than_merges():
    store = ConversationStore("u1")
    store.begin_load("u2")
    store.replace_history("u2", [msg("u2", "u1", "old-1"), msg("u1", "u2", "old-2")])
    store.append(msg("u3", "u1", "other"))

    store.begin_load("u2")
    store.replace_history("u2", [msg("u2", "u1", "old-1"), msg("u1", "u2", "old-2"), msg("u2", "u1", "new")])

    assert contents(store.view_for("u2")) == ["old-1", "old-2", "new"]
    # other conversations are retained, not dropped
    assert contents(store.view_for("u3")) == ["other"]


def test_live_events_during_load_are_not_stomped_by_history():
    store = ConversationStore("u1")
    store.append(msg("u2", "u1", "stale-view"))
    store.begin_load("u2")
    store.append(msg("u2", "u1", "arrived-while-loading"))
    store.replace_history("u2", [msg("u2", "u1", "h1"), msg("u1", "u2", "h2")])

    assert contents(store.view_for("u2")) == ["h1", "h2", "arrived-while-loading"]


def test_finish_load_without_content():
    store = ConversationStore("u1")
    store.begin_load("u2")
    store.finish_load("u2")
    assert not store.loading
    assert store.view_for("u2") == []


def test_finish_load_for_other_peer_is_ignored():
    store = ConversationStore("u1")
    store.begin_load("u2")
    store.finish_load("u3")
    assert store.loading


def test_clear_resets_everything():
    store = ConversationStore("u1")
    store.begin_load("u2")
    store.append(msg("u2", "u1", "x"))
    store.clear()
    assert len(store) == 0
    assert store.active_peer is None
    assert not store.loading
