"""FastMCP server exposing the chat session as tools."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from mcp.server.fastmcp import FastMCP
from pydantic import TypeAdapter

from .chat import BlankInputError, ChatSession
from .config import LOG_LEVEL
from .models import ContentBlock, Sender
from .parser import parse_blocks

# Logging to stderr only, stdout is the MCP JSON-RPC transport
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)

mcp = FastMCP(
    "cortexchat",
    instructions=(
        "A templated coding assistant with in-memory conversations. "
        "Use send_message to ask a question, paste code, or describe an error. "
        "Use new_conversation, list_conversations and get_conversation to manage chats. "
        "Use parse_markdown to split a reply into typed display blocks."
    ),
)

_blocks_adapter = TypeAdapter(list[ContentBlock])

# Singleton session, reused across tool calls
_session: ChatSession | None = None


def _get_session() -> ChatSession:
    global _session
    if _session is None:
        _session = ChatSession()
    return _session


def _format_ts(ts: float | None) -> str:
    if ts is None:
        return "Unknown date"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _not_found(conversation_id: str) -> str:
    return f"Conversation not found: {conversation_id}"


@mcp.tool()
def send_message(text: str, conversation_id: str | None = None) -> str:
    """Send a message and return the assistant's markdown reply.

    Args:
        text: The message (a question, a code snippet, or an error report)
        conversation_id: Target conversation (default: the active one)
    """
    session = _get_session()
    if conversation_id is not None and not session.store.conversation_exists(conversation_id):
        return _not_found(conversation_id)

    try:
        result = session.send(text, conversation_id=conversation_id)
    except BlankInputError as e:
        return str(e)

    header = f"*Conversation: {result.title} (`{result.conversation_id}`)*"
    return f"{header}\n\n{result.reply.markdown}"


@mcp.tool()
def new_conversation() -> str:
    """Start a new, empty conversation and make it active."""
    conv = _get_session().new_chat()
    return f"Started conversation `{conv.id}`."


@mcp.tool()
def list_conversations(
    limit: int = 20,
    offset: int = 0,
    keyword: str | None = None,
) -> str:
    """Browse conversations, pinned first.

    Args:
        limit: Maximum results (default 20)
        offset: Skip this many results (for pagination)
        keyword: Optional keyword to filter by (searches titles and content)
    """
    session = _get_session()
    conversations = session.store.list_conversations(limit=limit, offset=offset, keyword=keyword)

    if not conversations:
        if keyword:
            return f"No conversations found matching '{keyword}'."
        return "No conversations found."

    active = session.active
    lines = []
    if keyword:
        lines.append(f"Conversations matching '{keyword}':\n")
    else:
        lines.append(f"Conversations (showing {offset + 1}-{offset + len(conversations)}):\n")

    for i, c in enumerate(conversations, offset + 1):
        flags = []
        if c.pinned:
            flags.append("pinned")
        if active and c.id == active.id:
            flags.append("active")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        lines.append(f"{i}. **{c.title}**{suffix} ({_format_ts(c.created_at)})")
        lines.append(f"   ID: `{c.id}` | {c.message_count} msgs")

    if len(conversations) == limit:
        lines.append(f"\nMore may be available. Use offset={offset + limit} to see the next page.")

    return "\n".join(lines)


@mcp.tool()
def get_conversation(conversation_id: str) -> str:
    """Retrieve a full conversation transcript.

    Args:
        conversation_id: The conversation UUID
    """
    conv = _get_session().store.get_conversation(conversation_id)
    if conv is None:
        return _not_found(conversation_id)

    lines = [
        f"# {conv.title}",
        f"Created: {_format_ts(conv.created_at)}",
        f"Messages: {conv.message_count}",
        "",
        "---",
        "",
    ]
    for msg in conv.messages:
        role = "**User**" if msg.sender is Sender.USER else "**Assistant**"
        lines.append(f"{role} ({_format_ts(msg.timestamp)}):")
        lines.append(msg.content)
        lines.append("")

    return "\n".join(lines)


@mcp.tool()
def rename_conversation(conversation_id: str, title: str) -> str:
    """Rename a conversation. Renamed titles are never replaced automatically.

    Args:
        conversation_id: The conversation UUID
        title: The new title
    """
    session = _get_session()
    if not session.store.conversation_exists(conversation_id):
        return _not_found(conversation_id)
    if not session.rename(conversation_id, title):
        return "Title unchanged."
    return f"Renamed to '{title.strip()}'."


@mcp.tool()
def toggle_pin(conversation_id: str) -> str:
    """Pin or unpin a conversation."""
    pinned = _get_session().toggle_pin(conversation_id)
    if pinned is None:
        return _not_found(conversation_id)
    return "Pinned." if pinned else "Unpinned."


@mcp.tool()
def delete_conversation(conversation_id: str) -> str:
    """Delete a conversation. If it was active, a neighbour becomes active."""
    session = _get_session()
    if not session.delete(conversation_id):
        return _not_found(conversation_id)
    active = session.active
    if active is None:
        return "Deleted. No conversations left."
    return f"Deleted. Active conversation: {active.title} (`{active.id}`)."


@mcp.tool()
def parse_markdown(text: str) -> str:
    """Split markdown into typed display blocks, returned as JSON.

    Args:
        text: Markdown-like text (headings, bullets, fenced code)
    """
    blocks = parse_blocks(text)
    return json.dumps(_blocks_adapter.dump_python(blocks, mode="json"), indent=2)


@mcp.tool()
def get_stats() -> str:
    """Get statistics about the conversations held in memory."""
    stats = _get_session().store.get_stats()

    lines = [
        "# Conversation Statistics",
        "",
        f"- **Conversations**: {stats['total_conversations']:,}",
        f"- **Pinned**: {stats['pinned_conversations']:,}",
        f"- **Messages**: {stats['total_messages']:,}",
        f"- **Avg messages/conversation**: {stats['avg_messages_per_conversation']}",
    ]
    if stats["oldest"]:
        lines.append(f"- **Date range**: {stats['oldest']} → {stats['newest']}")

    lines.append("\n*Conversations are kept in memory and lost on restart.*")
    return "\n".join(lines)
