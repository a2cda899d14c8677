"""Send pipeline: validation → classification → reply generation → storage."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from .classifier import classify
from .config import EMPTY_INPUT_WARNING
from .language import detect_language
from .models import Category, Conversation, ContentBlock, Message, Reply, Sender
from .parser import parse_blocks
from .responder import ResponseBackend, TemplateBackend
from .storage import ConversationStore
from .titles import maybe_infer_title

logger = logging.getLogger(__name__)


class BlankInputError(ValueError):
    """Raised when a send is attempted with empty or whitespace-only text."""

    def __init__(self, message: str = EMPTY_INPUT_WARNING):
        super().__init__(message)


class SendResult(BaseModel):
    conversation_id: str
    user_message: Message
    bot_message: Message
    reply: Reply
    blocks: list[ContentBlock]
    title: str
    title_changed: bool = False


class ChatSession:
    """Drives one user's chat against a conversation store and a reply backend."""

    def __init__(
        self,
        store: ConversationStore | None = None,
        backend: ResponseBackend | None = None,
    ):
        self.store = store if store is not None else ConversationStore()
        self.backend = backend if backend is not None else TemplateBackend()

    @property
    def active(self) -> Conversation | None:
        return self.store.active

    def new_chat(self) -> Conversation:
        return self.store.create_conversation()

    def switch(self, conversation_id: str) -> bool:
        return self.store.set_active(conversation_id)

    def delete(self, conversation_id: str) -> bool:
        return self.store.delete_conversation(conversation_id)

    def rename(self, conversation_id: str, title: str) -> bool:
        return self.store.rename(conversation_id, title)

    def toggle_pin(self, conversation_id: str) -> bool | None:
        return self.store.toggle_pin(conversation_id)

    def send(self, text: str | None, conversation_id: str | None = None) -> SendResult:
        """Append the user's message and a generated reply to a conversation.

        Targets ``conversation_id`` when given (switching to it), otherwise
        the active conversation, creating one if there is none. Blank input
        raises BlankInputError before anything is touched.
        """
        if text is None or not text.strip():
            logger.info("Rejected blank message")
            raise BlankInputError()
        text = text.strip()

        conv = self._target(conversation_id)

        with self.store.lock_for(conv.id):
            category = classify(text)
            language = detect_language(text) if category is Category.CODE else None

            user_message = Message(
                sender=Sender.USER,
                content=text,
                is_code_block=category is Category.CODE,
            )
            previous_title = conv.title
            self.store.append_message(conv.id, user_message)
            title = maybe_infer_title(conv, text)

            reply = self.backend.respond(category, text, language)
            bot_message = Message(
                sender=Sender.BOT,
                content=reply.markdown,
                is_code_block=reply.is_code_block,
            )
            self.store.append_message(conv.id, bot_message)

        logger.debug(
            "Conversation %s: %s message answered (%d messages)",
            conv.id, category.value, conv.message_count,
        )
        return SendResult(
            conversation_id=conv.id,
            user_message=user_message,
            bot_message=bot_message,
            reply=reply,
            blocks=parse_blocks(reply.markdown),
            title=title,
            title_changed=title != previous_title,
        )

    def _target(self, conversation_id: str | None) -> Conversation:
        if conversation_id is not None:
            conv = self.store.get_conversation(conversation_id)
            if conv is not None:
                self.store.set_active(conv.id)
                return conv
            logger.debug("Unknown conversation %s, using active", conversation_id)

        conv = self.store.active
        if conv is None:
            conv = self.store.create_conversation()
        return conv
