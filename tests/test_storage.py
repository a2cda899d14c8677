"""
Tests for the in-memory conversation store.

Covers:
  - Creation order, pinned section, activation
  - Deleting the active conversation activates a neighbour
  - Stale ids are no-ops
  - Rename, pin, keyword search, capacity eviction, stats
"""

from cortexchat.models import Message, Sender, TitleState
from cortexchat.storage import ConversationStore

# ========================================================================
# Lifecycle
# ========================================================================


class TestLifecycle:
    def test_create_activates_and_prepends(self, store):
        first = store.create_conversation()
        second = store.create_conversation()
        assert store.active is second
        assert [c.id for c in store.list_conversations()] == [second.id, first.id]

    def test_new_conversation_goes_below_pinned(self, store):
        pinned = store.create_conversation()
        store.toggle_pin(pinned.id)
        fresh = store.create_conversation()
        assert [c.id for c in store.list_conversations()] == [pinned.id, fresh.id]

    def test_delete_active_selects_neighbour(self, store):
        c = store.create_conversation()
        b = store.create_conversation()
        a = store.create_conversation()  # order: a, b, c
        store.set_active(b.id)
        assert store.delete_conversation(b.id)
        assert store.active is c

    def test_delete_last_active_selects_previous(self, store):
        b = store.create_conversation()
        a = store.create_conversation()  # order: a, b
        store.set_active(b.id)
        store.delete_conversation(b.id)
        assert store.active is a

    def test_delete_inactive_keeps_active(self, store):
        b = store.create_conversation()
        a = store.create_conversation()
        store.delete_conversation(b.id)
        assert store.active is a

    def test_delete_only_conversation(self, store):
        only = store.create_conversation()
        store.delete_conversation(only.id)
        assert store.active is None
        assert len(store) == 0

    def test_stale_ids_are_noops(self, store):
        conv = store.create_conversation()
        assert store.delete_conversation("missing") is False
        assert store.set_active("missing") is False
        assert store.rename("missing", "x") is False
        assert store.toggle_pin("missing") is None
        assert store.get_conversation("missing") is None
        assert store.append_message("missing", Message(sender=Sender.USER, content="hi")) is False
        assert store.active is conv
        assert len(store) == 1


# ========================================================================
# Updates
# ========================================================================


class TestUpdates:
    def test_rename_finalizes(self, store):
        conv = store.create_conversation()
        assert store.rename(conv.id, "  Sorting  ")
        assert conv.title == "Sorting"
        assert conv.title_state is TitleState.USER

    def test_rename_blank_ignored(self, store):
        conv = store.create_conversation()
        assert not store.rename(conv.id, "   ")
        assert conv.title_state is TitleState.UNSET

    def test_rename_to_same_title_still_locks(self, store):
        conv = store.create_conversation()
        assert not store.rename(conv.id, conv.title)
        assert conv.title_state is TitleState.USER
        assert conv.title_finalized

    def test_clear(self, store):
        store.toggle_pin(store.create_conversation().id)
        store.create_conversation()
        store.clear()
        assert len(store) == 0
        assert store.active is None
        assert store.list_conversations() == []

    def test_pin_regroups(self, store):
        c = store.create_conversation()
        b = store.create_conversation()
        a = store.create_conversation()
        assert store.toggle_pin(c.id) is True
        assert [x.id for x in store.list_conversations()] == [c.id, a.id, b.id]
        assert store.toggle_pin(c.id) is False

    def test_messages(self, store):
        conv = store.create_conversation()
        first = Message(sender=Sender.USER, content="one")
        store.append_message(conv.id, first)
        store.append_message(conv.id, Message(sender=Sender.BOT, content="two"))
        assert store.message_count(conv.id) == 2
        assert store.first_message(conv.id) is first
        assert [m.content for m in conv.messages] == ["one", "two"]

    def test_lock_per_conversation(self, store):
        a = store.create_conversation()
        b = store.create_conversation()
        assert store.lock_for(a.id) is store.lock_for(a.id)
        assert store.lock_for(a.id) is not store.lock_for(b.id)


# ========================================================================
# Queries
# ========================================================================


class TestQueries:
    def test_keyword_search(self, store):
        a = store.create_conversation()
        a.add_message(Message(sender=Sender.USER, content="Binary search question"))
        b = store.create_conversation()
        store.rename(b.id, "Graph Traversal")
        assert store.list_conversations(keyword="SEARCH") == [a]
        assert store.list_conversations(keyword="graph") == [b]

    def test_pagination(self, store):
        for _ in range(5):
            store.create_conversation()
        assert len(store.list_conversations(limit=2, offset=4)) == 1

    def test_eviction_keeps_pinned_and_active(self):
        store = ConversationStore(max_conversations=2)
        oldest = store.create_conversation()
        store.toggle_pin(oldest.id)
        middle = store.create_conversation()
        newest = store.create_conversation()
        ids = [c.id for c in store.list_conversations()]
        assert ids == [oldest.id, newest.id]
        assert middle.id not in ids

    def test_stats(self, store):
        conv = store.create_conversation()
        conv.add_message(Message(sender=Sender.USER, content="hi"))
        store.create_conversation()
        stats = store.get_stats()
        assert stats["total_conversations"] == 2
        assert stats["total_messages"] == 1
        assert stats["avg_messages_per_conversation"] == 0.5
        assert stats["pinned_conversations"] == 0
        assert stats["oldest"] is not None

    def test_empty_stats(self, store):
        assert store.get_stats()["avg_messages_per_conversation"] == 0
