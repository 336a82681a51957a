"""Markdown ↔ Notion block conversion.

Public API:

- :class:`MarkdownToBlocks` -- Markdown → Notion blocks.
- :class:`BlockToMarkdown` -- Notion blocks and page properties → Markdown.
- :class:`MarkdownLexer` -- parse and normalize Markdown to canonical tokens.
- :func:`build_rich_text` -- convert inline tokens to rich_text arrays.
- :func:`split_rich_text` -- split oversized rich_text runs.
- :func:`plain_text` -- concatenate the text of rich_text runs.
"""

from noti.converter.block_to_markdown import BlockToMarkdown
from noti.converter.lexer import MarkdownLexer
from noti.converter.markdown_to_blocks import MarkdownToBlocks
from noti.converter.rich_text import (
    build_rich_text,
    make_text_run,
    plain_text,
    split_rich_text,
)

__all__ = [
    "BlockToMarkdown",
    "MarkdownLexer",
    "MarkdownToBlocks",
    "build_rich_text",
    "make_text_run",
    "plain_text",
    "split_rich_text",
]
