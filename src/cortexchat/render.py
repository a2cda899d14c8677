"""Terminal rendering of content blocks."""

from __future__ import annotations

import click

from .models import Blank, Bullet, CodeBlock, ContentBlock, Heading2, Heading3, Paragraph


def render_block(block: ContentBlock) -> str:
    if isinstance(block, Heading2):
        return click.style(block.text, bold=True, underline=True)
    if isinstance(block, Heading3):
        return click.style(block.text, bold=True)
    if isinstance(block, Bullet):
        return f"  {block.display_text}"
    if isinstance(block, CodeBlock):
        header = click.style(f"[{block.language or 'code'}]", fg="cyan") + click.style(
            "  (/copy to print raw)", dim=True
        )
        body = "\n".join(f"    {line}" for line in block.code.split("\n"))
        return f"{header}\n{click.style(body, fg='green')}"
    if isinstance(block, Blank):
        return ""
    if isinstance(block, Paragraph):
        return block.text
    return str(block)


def render_blocks(blocks: list[ContentBlock]) -> str:
    return "\n".join(render_block(b) for b in blocks)
