"""In-memory conversation store. Everything is lost when the process exits."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from .config import DEFAULT_TITLE, MAX_CONVERSATIONS
from .models import Conversation, Message

logger = logging.getLogger(__name__)


class ConversationStore:
    """Ordered list of conversations plus the currently active one.

    Display order is the pinned section first, then the rest, newest first
    within each section. Unknown ids are treated as stale UI state: lookups
    return None and mutations are no-ops.
    """

    def __init__(self, max_conversations: int = MAX_CONVERSATIONS):
        self.max_conversations = max_conversations
        self._conversations: list[Conversation] = []
        self._active_id: str | None = None
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    # ---- lookup ----

    def get_conversation(self, conversation_id: str | None) -> Conversation | None:
        for conv in self._conversations:
            if conv.id == conversation_id:
                return conv
        return None

    def conversation_exists(self, conversation_id: str) -> bool:
        return self.get_conversation(conversation_id) is not None

    def index_of(self, conversation_id: str) -> int:
        for i, conv in enumerate(self._conversations):
            if conv.id == conversation_id:
                return i
        return -1

    @property
    def active(self) -> Conversation | None:
        return self.get_conversation(self._active_id)

    def list_conversations(
        self,
        limit: int | None = None,
        offset: int = 0,
        keyword: str | None = None,
    ) -> list[Conversation]:
        """Conversations in display order, optionally filtered by keyword."""
        conversations = self._conversations
        if keyword:
            needle = keyword.lower()
            conversations = [
                c for c in conversations
                if needle in c.title.lower()
                or any(needle in m.content.lower() for m in c.messages)
            ]
        end = None if limit is None else offset + limit
        return list(conversations[offset:end])

    def __len__(self) -> int:
        return len(self._conversations)

    # ---- lifecycle ----

    def create_conversation(self, title: str = DEFAULT_TITLE) -> Conversation:
        """Create a conversation at the top of the unpinned section and activate it."""
        conv = Conversation(title=title)
        with self._guard:
            self._conversations.insert(self._pinned_count(), conv)
            self._active_id = conv.id
            self._evict_overflow()
        logger.debug("Created conversation %s", conv.id)
        return conv

    def set_active(self, conversation_id: str) -> bool:
        if not self.conversation_exists(conversation_id):
            logger.debug("Ignoring switch to unknown conversation %s", conversation_id)
            return False
        self._active_id = conversation_id
        return True

    def delete_conversation(self, conversation_id: str) -> bool:
        """Remove a conversation. If it was active, its neighbour takes over."""
        with self._guard:
            index = self.index_of(conversation_id)
            if index < 0:
                logger.debug("Ignoring delete of unknown conversation %s", conversation_id)
                return False

            del self._conversations[index]
            self._locks.pop(conversation_id, None)

            if self._active_id == conversation_id:
                if self._conversations:
                    next_index = min(index, len(self._conversations) - 1)
                    self._active_id = self._conversations[next_index].id
                else:
                    self._active_id = None
        logger.debug("Deleted conversation %s", conversation_id)
        return True

    def rename(self, conversation_id: str, title: str) -> bool:
        """Explicit rename. Returns whether the title text changed.

        Any non-blank title locks the conversation against automatic
        titling, even when it matches the current one. Blank titles are
        ignored.
        """
        conv = self.get_conversation(conversation_id)
        if conv is None:
            return False
        title = (title or "").strip()
        if not title:
            return False
        changed = title != conv.title
        conv.rename(title)
        return changed

    def toggle_pin(self, conversation_id: str) -> bool | None:
        """Flip the pin flag and regroup. Returns the new flag, None if unknown."""
        with self._guard:
            conv = self.get_conversation(conversation_id)
            if conv is None:
                return None
            conv.pinned = not conv.pinned
            pinned = [c for c in self._conversations if c.pinned]
            unpinned = [c for c in self._conversations if not c.pinned]
            self._conversations = pinned + unpinned
        return conv.pinned

    def clear(self):
        with self._guard:
            self._conversations.clear()
            self._locks.clear()
            self._active_id = None

    # ---- messages ----

    def lock_for(self, conversation_id: str) -> threading.Lock:
        """Per-conversation lock serializing appends and title inference."""
        with self._guard:
            return self._locks.setdefault(conversation_id, threading.Lock())

    def append_message(self, conversation_id: str, message: Message) -> bool:
        conv = self.get_conversation(conversation_id)
        if conv is None:
            logger.debug("Dropping message for unknown conversation %s", conversation_id)
            return False
        conv.add_message(message)
        return True

    def message_count(self, conversation_id: str) -> int:
        conv = self.get_conversation(conversation_id)
        return conv.message_count if conv else 0

    def first_message(self, conversation_id: str) -> Message | None:
        conv = self.get_conversation(conversation_id)
        if conv is None or not conv.messages:
            return None
        return conv.messages[0]

    # ---- stats ----

    def get_stats(self) -> dict:
        conv_count = len(self._conversations)
        msg_count = sum(c.message_count for c in self._conversations)
        created = [c.created_at for c in self._conversations]

        return {
            "total_conversations": conv_count,
            "total_messages": msg_count,
            "pinned_conversations": self._pinned_count(),
            "oldest": _format_ts(min(created)) if created else None,
            "newest": _format_ts(max(created)) if created else None,
            "avg_messages_per_conversation": round(msg_count / conv_count, 1) if conv_count else 0,
        }

    # ---- internals ----

    def _pinned_count(self) -> int:
        return sum(1 for c in self._conversations if c.pinned)

    def _evict_overflow(self):
        while len(self._conversations) > self.max_conversations:
            victim = next(
                (c for c in reversed(self._conversations)
                 if not c.pinned and c.id != self._active_id),
                None,
            )
            if victim is None:
                break
            self._conversations.remove(victim)
            self._locks.pop(victim.id, None)
            logger.debug("Evicted conversation %s (store full)", victim.id)


def _format_ts(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
