"""CLI interface for cortexchat."""

from __future__ import annotations

import json
import logging
import sys
import time

import click
from pydantic import TypeAdapter

from . import __version__
from .chat import BlankInputError, ChatSession
from .classifier import classify
from .config import LOG_LEVEL, TYPING_DELAY_MS, TYPING_INDICATOR_TEXT
from .language import detect_language
from .models import Category, CodeBlock, ContentBlock
from .parser import extract_code_blocks, parse_blocks
from .render import render_blocks
from .titles import infer_title

_blocks_adapter = TypeAdapter(list[ContentBlock])

CHAT_HELP = """\
Commands:
  /new            start a new conversation
  /list           list conversations
  /switch N       switch to conversation N (from /list)
  /rename TITLE   rename the current conversation
  /pin            pin or unpin the current conversation
  /delete [N]     delete conversation N (default: current)
  /clear          delete all conversations and start over
  /copy           print the code blocks of the last reply
  /help           show this help
  /quit           leave
"""


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version=__version__, prog_name="cortexchat")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """cortexchat: a coding assistant chat in your terminal.

    Paste code for a review, describe an error for debugging tips, or ask a
    general question. Conversations live in memory only.
    """
    _setup_logging(verbose)


@cli.command()
@click.option("--no-delay", is_flag=True, help="Show replies without the typing pause")
def chat(no_delay: bool):
    """Start an interactive chat session."""
    session = ChatSession()
    session.new_chat()
    last_code: list[CodeBlock] = []

    click.echo(click.style(f"cortexchat {__version__}", bold=True) + "  (/help for commands)")

    while True:
        try:
            line = click.prompt(_prompt_label(session), default="", show_default=False)
        except (EOFError, click.Abort):
            click.echo()
            break

        if line.startswith("/"):
            if not _run_command(session, line, last_code):
                break
            continue

        try:
            result = session.send(line)
        except BlankInputError as e:
            click.echo(click.style(str(e), fg="yellow"))
            continue

        if not no_delay and TYPING_DELAY_MS > 0:
            click.echo(click.style(TYPING_INDICATOR_TEXT, dim=True))
            time.sleep(TYPING_DELAY_MS / 1000)

        click.echo(render_blocks(result.blocks))
        last_code[:] = extract_code_blocks(result.reply.markdown)
        if result.title_changed:
            click.echo(click.style(f"(conversation titled '{result.title}')", dim=True))


def _prompt_label(session: ChatSession) -> str:
    conv = session.active
    return click.style(conv.title if conv else "cortexchat", fg="blue")


def _conversation_at(session: ChatSession, arg: str):
    """Resolve a 1-based /list position. Stale positions resolve to None."""
    try:
        index = int(arg) - 1
    except ValueError:
        return None
    conversations = session.store.list_conversations()
    if 0 <= index < len(conversations):
        return conversations[index]
    return None


def _run_command(session: ChatSession, line: str, last_code: list[CodeBlock]) -> bool:
    """Handle a slash command. Returns False when the session should end."""
    name, _, arg = line.partition(" ")
    arg = arg.strip()

    if name in ("/quit", "/exit"):
        return False

    if name == "/help":
        click.echo(CHAT_HELP)
    elif name == "/new":
        session.new_chat()
        last_code.clear()
    elif name == "/list":
        active = session.active
        for i, conv in enumerate(session.store.list_conversations(), 1):
            marker = "*" if active and conv.id == active.id else " "
            pin = " [pinned]" if conv.pinned else ""
            click.echo(f"{marker} {i}. {conv.title}{pin} ({conv.message_count} msgs)")
    elif name == "/switch":
        conv = _conversation_at(session, arg)
        if conv is not None:
            session.switch(conv.id)
            last_code.clear()
    elif name == "/rename":
        if session.active and not session.rename(session.active.id, arg):
            click.echo(click.style("Title unchanged.", fg="yellow"))
    elif name == "/pin":
        if session.active:
            session.toggle_pin(session.active.id)
    elif name == "/delete":
        conv = _conversation_at(session, arg) if arg else session.active
        if conv is not None:
            session.delete(conv.id)
        if session.active is None:
            session.new_chat()
    elif name == "/clear":
        session.store.clear()
        session.new_chat()
        last_code.clear()
    elif name == "/copy":
        if not last_code:
            click.echo(click.style("No code in the last reply.", fg="yellow"))
        for block in last_code:
            click.echo(block.code)
    else:
        click.echo(click.style(f"Unknown command: {name} (try /help)", fg="yellow"))
    return True


@cli.command()
@click.argument("text")
@click.option("--raw", is_flag=True, help="Print the markdown instead of rendered blocks")
def reply(text: str, raw: bool):
    """Generate a single reply to TEXT."""
    try:
        result = ChatSession().send(text)
    except BlankInputError as e:
        raise click.ClickException(str(e))

    if raw:
        click.echo(result.reply.markdown)
    else:
        click.echo(render_blocks(result.blocks))


@cli.command("classify")
@click.argument("text")
def classify_cmd(text: str):
    """Show how TEXT would be classified."""
    category = classify(text)
    if category is Category.CODE:
        click.echo(f"{category.value} ({detect_language(text).value})")
    else:
        click.echo(category.value)


@cli.command()
@click.argument("text")
def title(text: str):
    """Show the conversation title inferred from TEXT."""
    click.echo(infer_title(text))


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
def blocks(source):
    """Parse a markdown file (or stdin) and print its blocks as JSON."""
    parsed = parse_blocks(source.read())
    click.echo(json.dumps(_blocks_adapter.dump_python(parsed, mode="json"), indent=2))


@cli.command()
def serve():
    """Start the MCP server (stdio transport)."""
    from .server import mcp

    mcp.run(transport="stdio")
