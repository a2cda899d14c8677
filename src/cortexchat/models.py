"""Data models for conversations, replies and rendered content blocks."""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import BULLET_GLYPH, DEFAULT_TITLE


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class Category(str, Enum):
    """Classification bucket for a user message."""

    CODE = "code"
    ERROR = "error"
    GENERAL = "general"


class LanguageTag(str, Enum):
    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    CPP = "cpp"
    TEXT = "text"


class TitleState(str, Enum):
    """Title lifecycle: unset -> auto -> user. ``user`` is terminal."""

    UNSET = "unset"
    AUTO = "auto"
    USER = "user"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: Sender
    content: str
    timestamp: float = Field(default_factory=time.time)
    is_code_block: bool = False


class Conversation(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = DEFAULT_TITLE
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)
    title_state: TitleState = TitleState.UNSET
    pinned: bool = False
    messages: list[Message] = []

    @property
    def title_finalized(self) -> bool:
        return self.title_state is not TitleState.UNSET

    @property
    def message_count(self) -> int:
        return len(self.messages)

    def add_message(self, message: Message):
        """Append a message; existing messages are never reordered."""
        self.messages.append(message)
        self.updated_at = time.time()

    def apply_auto_title(self, title: str) -> bool:
        """Set an inferred title. Only allowed while the title is unset."""
        if self.title_state is not TitleState.UNSET:
            return False
        self.title = title
        self.title_state = TitleState.AUTO
        self.updated_at = time.time()
        return True

    def rename(self, title: str):
        """Explicit user rename. Locks the title against automatic updates."""
        self.title = title
        self.title_state = TitleState.USER
        self.updated_at = time.time()


class Reply(BaseModel):
    """A generated bot reply before it becomes a Message."""

    markdown: str
    is_code_block: bool = False
    category: Category
    language: LanguageTag | None = None


# ---- Content blocks ----


class Heading2(BaseModel):
    kind: Literal["heading2"] = "heading2"
    text: str


class Heading3(BaseModel):
    kind: Literal["heading3"] = "heading3"
    text: str


class Bullet(BaseModel):
    kind: Literal["bullet"] = "bullet"
    text: str

    @property
    def display_text(self) -> str:
        return f"{BULLET_GLYPH} {self.text}"


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class CodeBlock(BaseModel):
    kind: Literal["code"] = "code"
    language: str = ""
    code: str


class Blank(BaseModel):
    kind: Literal["blank"] = "blank"


ContentBlock = Annotated[
    Union[Heading2, Heading3, Bullet, Paragraph, CodeBlock, Blank],
    Field(discriminator="kind"),
]
