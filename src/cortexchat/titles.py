"""Infer a short conversation title from the first user message."""

from __future__ import annotations

import logging
import re

from .config import (
    DEFAULT_TITLE,
    TITLE_MAX_LENGTH,
    TITLE_MAX_WORDS,
    TITLE_MIN_TOKEN_LENGTH,
)
from .models import Conversation

logger = logging.getLogger(__name__)

_URL = re.compile(r"https?://\S+")
_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"[A-Za-z0-9]+")

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "but", "by",
    "for", "from", "how", "i", "in", "is", "it", "me", "my",
    "of", "on", "or", "please", "so", "that", "the", "this",
    "to", "we", "what", "when", "where", "which", "who", "why",
    "with", "you", "your", "about", "can", "could", "would", "should",
})


def _normalize(text: str) -> str:
    return _WHITESPACE.sub(" ", _URL.sub(" ", text)).strip()


def _keywords(normalized: str) -> list[str]:
    """First few non-stop-word tokens, capitalized, in original order."""
    keywords: list[str] = []
    for token in _TOKEN.findall(normalized):
        lower = token.lower()
        if len(lower) < TITLE_MIN_TOKEN_LENGTH or lower in STOP_WORDS:
            continue
        keywords.append(lower.capitalize())
        if len(keywords) == TITLE_MAX_WORDS:
            break
    return keywords


def _leading_words(normalized: str) -> list[str]:
    """Fallback when every token was filtered: the opening words of the question."""
    question_mark = normalized.find("?")
    if question_mark > 0:
        normalized = normalized[:question_mark].strip()
    return [w.lower().capitalize() for w in normalized.split()[:TITLE_MAX_WORDS]]


def infer_title(text: str | None, max_length: int = TITLE_MAX_LENGTH) -> str:
    """Derive a title of at most ``max_length`` characters from free text."""
    normalized = _normalize(text or "")
    if not normalized:
        return DEFAULT_TITLE

    words = _keywords(normalized) or _leading_words(normalized)
    if not words:
        return DEFAULT_TITLE

    title = " ".join(words)
    if len(title) > max_length:
        title = title[: max_length - 3].rstrip() + "..."
    return title


def should_infer_title(conversation: Conversation) -> bool:
    if conversation.title_finalized:
        return False
    current = (conversation.title or "").strip()
    return not current or current.lower() == DEFAULT_TITLE.lower()


def maybe_infer_title(conversation: Conversation, text: str) -> str:
    """Auto-title ``conversation`` from ``text`` once; return its current title.

    Finalized titles (auto or user) are left alone. A text that yields only
    the placeholder leaves the conversation eligible for the next message.
    """
    if not should_infer_title(conversation):
        return conversation.title

    title = infer_title(text)
    if title == DEFAULT_TITLE:
        logger.debug("No title inferred for conversation %s", conversation.id)
        return conversation.title

    conversation.apply_auto_title(title)
    logger.debug("Conversation %s titled '%s'", conversation.id, title)
    return conversation.title
