"""Markdown to Notion block conversion.

:class:`MarkdownToBlocks` runs a two-stage pipeline:

1. **Lex** -- :class:`MarkdownLexer` parses the source with mistune and
   normalizes the token stream.
2. **Build** -- each top-level token is dispatched through
   ``_BLOCK_HANDLERS`` to a builder that returns zero or more Notion
   block dicts.

Every top-level token is built inside its own error boundary.  A builder
failure drops that element, records ``"Failed to convert token: <msg>"``
and the conversion carries on with the next element.

Mapped token kinds:

- heading -> heading_1/2/3 (level 4+ per ``heading_overflow``)
- paragraph -> paragraph, or image when its only child is an image
- list -> bulleted_list_item / numbered_list_item / to_do
- block_code -> code with language
- block_quote -> quote

Tables, thematic breaks and HTML blocks produce nothing and no error.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable

from noti.config import NotiConfig
from noti.converter.lexer import MarkdownLexer
from noti.converter.rich_text import build_rich_text, make_text_run, split_rich_text
from noti.errors import NotiConversionError
from noti.models import ConversionResult
from noti.observability import get_logger, resolve_metrics
from noti.utils.redact import redact

log = get_logger("noti.converter.markdown")

# ---------------------------------------------------------------------------
# Notion code language mapping
# ---------------------------------------------------------------------------

_NOTION_LANGUAGES: frozenset[str] = frozenset({
    "bash", "c", "c#", "c++", "css", "dart", "diff", "docker", "elixir",
    "go", "graphql", "haskell", "html", "java", "javascript", "json",
    "kotlin", "latex", "lua", "makefile", "markdown", "mermaid", "php",
    "plain text", "powershell", "python", "r", "ruby", "rust", "scala",
    "shell", "sql", "swift", "typescript", "xml", "yaml",
})

_LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "sh": "shell",
    "zsh": "shell",
    "rb": "ruby",
    "rs": "rust",
    "yml": "yaml",
    "md": "markdown",
    "cpp": "c++",
    "cs": "c#",
    "csharp": "c#",
    "golang": "go",
    "kt": "kotlin",
    "ps1": "powershell",
    "dockerfile": "docker",
}

DEFAULT_LANGUAGE = "plain text"


def _code_language(info: str | None, normalize: bool) -> str:
    """Pick the Notion language for a fence info string."""
    if not info or not info.strip():
        return DEFAULT_LANGUAGE
    if not normalize:
        return info.strip()
    lang = info.strip().lower().split()[0]
    if lang in _NOTION_LANGUAGES:
        return lang
    if lang in _LANGUAGE_ALIASES:
        return _LANGUAGE_ALIASES[lang]
    # python3 -> python
    stripped = re.sub(r"\d+$", "", lang)
    if stripped in _NOTION_LANGUAGES:
        return stripped
    return _LANGUAGE_ALIASES.get(stripped, DEFAULT_LANGUAGE)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class MarkdownToBlocks:
    """Convert Markdown text to Notion block payloads.

    Parameters
    ----------
    config:
        Controls list handling, heading overflow, code language
        normalization, rich-text limits and debug dumps.  Defaults to
        ``NotiConfig()``.

    Examples
    --------
    >>> result = MarkdownToBlocks().convert("# Hello\\n\\nWorld")
    >>> [b["type"] for b in result.blocks]
    ['heading_1', 'paragraph']
    >>> result.errors is None
    True
    """

    def __init__(self, config: NotiConfig | None = None) -> None:
        self._config = config if config is not None else NotiConfig()
        self._lexer = MarkdownLexer()
        self._metrics = resolve_metrics(self._config.metrics)

    def convert(self, markdown: str) -> ConversionResult:
        """Convert *markdown* to blocks, collecting per-element errors.

        Returns
        -------
        ConversionResult
            ``blocks`` in source order; ``errors`` is ``None`` unless at
            least one element failed.
        """
        tokens = self._lexer.lex(markdown)

        if self._config.debug_dump_ast:
            log.debug(
                "normalized AST",
                extra={"extra_fields": {
                    "ast": json.dumps(tokens, ensure_ascii=False),
                }},
            )

        ctx = _BuildContext(self._config)
        for token in tokens:
            try:
                ctx.blocks.extend(_process_token(token, ctx))
            except Exception as exc:
                ctx.errors.append(f"Failed to convert token: {exc}")
                log.warning(
                    "token conversion failed",
                    extra={"extra_fields": {
                        "token_type": token.get("type", ""),
                        "error": str(exc),
                    }},
                )

        if ctx.blocks:
            self._metrics.increment(
                "noti.blocks_converted_total",
                len(ctx.blocks),
                tags={"direction": "markdown_to_blocks"},
            )
        if ctx.errors:
            self._metrics.increment("noti.conversion_errors_total", len(ctx.errors))

        if self._config.debug_dump_payload:
            safe = redact({"blocks": ctx.blocks}, self._config.token)
            log.debug(
                "block payload",
                extra={"extra_fields": {
                    "blocks": json.dumps(safe["blocks"], ensure_ascii=False),
                }},
            )

        return ConversionResult(
            blocks=ctx.blocks,
            errors=ctx.errors or None,
        )


class _BuildContext:
    """Mutable accumulator for one conversion."""

    __slots__ = ("blocks", "config", "errors")

    def __init__(self, config: NotiConfig) -> None:
        self.config = config
        self.blocks: list[dict] = []
        self.errors: list[str] = []

    def rich_text(self, children: list[dict]) -> list[dict]:
        return split_rich_text(build_rich_text(children), self.config.rich_text_limit)


def _block(block_type: str, payload: dict) -> dict:
    return {"object": "block", "type": block_type, block_type: payload}


# ---------------------------------------------------------------------------
# Token dispatch
# ---------------------------------------------------------------------------

def _process_token(token: dict, ctx: _BuildContext) -> list[dict]:
    """Return the block(s) produced by a single token."""
    handler = _BLOCK_HANDLERS.get(token.get("type", ""))
    if handler is None:
        return []
    return handler(token, ctx)


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def _build_heading(token: dict, ctx: _BuildContext) -> list[dict]:
    level = token.get("attrs", {}).get("level", 1)
    rich_text = ctx.rich_text(token.get("children", []))

    if level <= 3:
        return [_block(f"heading_{level}", {"rich_text": rich_text})]
    if ctx.config.heading_overflow == "downgrade":
        return [_block("heading_3", {"rich_text": rich_text})]
    return [_block("paragraph", {"rich_text": rich_text})]


def _build_paragraph(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build a paragraph, or an image block for a lone image.

    An image without a URL stays paragraph text.
    """
    children = token.get("children", [])

    if (
        len(children) == 1
        and children[0].get("type") == "image"
        and children[0].get("attrs", {}).get("url")
    ):
        return _build_image(children[0], ctx)

    rich_text = ctx.rich_text(children)
    if not rich_text:
        return []
    return [_block("paragraph", {"rich_text": rich_text})]


def _build_image(token: dict, ctx: _BuildContext) -> list[dict]:
    url = token["attrs"]["url"]
    return [_block("image", {"type": "external", "external": {"url": url}})]


def _build_block_quote(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build a quote block.

    Paragraph children form the quote text, joined by newlines.  Other
    block children are attached as nested ``children``.
    """
    rich_text: list[dict] = []
    nested: list[dict] = []

    for child in token.get("children", []):
        if child.get("type") == "paragraph":
            if rich_text:
                rich_text.append(make_text_run("\n"))
            rich_text.extend(build_rich_text(child.get("children", [])))
        else:
            nested.extend(_process_token(child, ctx))

    payload: dict = {
        "rich_text": split_rich_text(rich_text, ctx.config.rich_text_limit),
    }
    if nested:
        payload["children"] = nested
    return [_block("quote", payload)]


def _build_list(token: dict, ctx: _BuildContext) -> list[dict]:
    """Build list item blocks.

    With ``list_items="first"`` only the first item is kept and nested
    lists are ignored.  With ``"all"`` every item becomes a block and
    nested block content is attached as ``children``.
    """
    ordered = token.get("attrs", {}).get("ordered", False)
    items = [
        item for item in token.get("children", [])
        if item.get("type") in ("list_item", "task_list_item")
    ]
    if not items:
        raise NotiConversionError(
            message="List has no items",
            context={"token_type": "list"},
        )

    if ctx.config.list_items == "first":
        return [_build_list_item(items[0], ordered, ctx, nested=False)]
    return [_build_list_item(item, ordered, ctx, nested=True) for item in items]


def _build_list_item(
    item: dict,
    ordered: bool,
    ctx: _BuildContext,
    nested: bool,
) -> dict:
    rich_text: list[dict] = []
    children: list[dict] = []

    for child in item.get("children", []):
        if child.get("type") == "paragraph":
            if rich_text:
                rich_text.append(make_text_run("\n"))
            rich_text.extend(build_rich_text(child.get("children", [])))
        elif nested:
            children.extend(_process_token(child, ctx))

    payload: dict = {
        "rich_text": split_rich_text(rich_text, ctx.config.rich_text_limit),
    }

    if item.get("type") == "task_list_item":
        block_type = "to_do"
        payload["checked"] = bool(item.get("attrs", {}).get("checked", False))
    elif ordered:
        block_type = "numbered_list_item"
    else:
        block_type = "bulleted_list_item"

    if children:
        payload["children"] = children
    return _block(block_type, payload)


def _build_code(token: dict, ctx: _BuildContext) -> list[dict]:
    raw = token.get("raw", "")
    info = token.get("attrs", {}).get("info")
    language = _code_language(info, ctx.config.normalize_code_language)

    rich_text = split_rich_text([make_text_run(raw)], ctx.config.rich_text_limit)
    return [_block("code", {"rich_text": rich_text, "language": language})]


def _skip(token: dict, ctx: _BuildContext) -> list[dict]:
    return []


_BLOCK_HANDLERS: dict[str, Callable[[dict, _BuildContext], list[dict]]] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "block_quote": _build_block_quote,
    "list": _build_list,
    "block_code": _build_code,
    "table": _skip,
    "thematic_break": _skip,
    "html_block": _skip,
}

