"""Parse markdown-like reply text into an ordered list of content blocks."""

from __future__ import annotations

import logging
import re

from .models import (
    Blank,
    Bullet,
    CodeBlock,
    ContentBlock,
    Heading2,
    Heading3,
    Paragraph,
)

logger = logging.getLogger(__name__)

FENCE = "```"
_LINE_BREAK = re.compile(r"\r\n|\n|\r")


def _code_block(language: str, lines: list[str]) -> CodeBlock | None:
    code = "\n".join(lines).rstrip()
    if not code.strip():
        logger.debug("Skipping empty code block (language=%r)", language)
        return None
    return CodeBlock(language=language, code=code)


def _line_block(line: str) -> ContentBlock:
    if line.startswith("## "):
        return Heading2(text=line[3:].strip())
    if line.startswith("### "):
        return Heading3(text=line[4:].strip())
    if line.startswith("- "):
        return Bullet(text=line[2:].strip())
    if not line.strip():
        return Blank()
    return Paragraph(text=line)


def parse_blocks(markdown: str | None) -> list[ContentBlock]:
    """Scan ``markdown`` line by line and return its blocks in source order.

    Never raises: unknown prefixes become paragraphs and an unterminated
    fence is flushed as a final code block.
    """
    blocks: list[ContentBlock] = []
    in_code = False
    language = ""
    code_lines: list[str] = []

    for line in _LINE_BREAK.split(markdown or ""):
        if line.startswith(FENCE):
            if in_code:
                block = _code_block(language, code_lines)
                if block is not None:
                    blocks.append(block)
                in_code = False
            else:
                in_code = True
                language = line[len(FENCE):].strip()
                code_lines = []
            continue

        if in_code:
            code_lines.append(line)
            continue

        blocks.append(_line_block(line))

    if in_code:
        block = _code_block(language, code_lines)
        if block is not None:
            blocks.append(block)

    return blocks


def extract_code_blocks(markdown: str | None) -> list[CodeBlock]:
    """Only the code blocks of ``markdown``, in order."""
    return [b for b in parse_blocks(markdown) if isinstance(b, CodeBlock)]
