"""Segment Markdown into canonical AST tokens.

Wraps mistune v3's AST renderer (GFM plugins enabled once at
construction) and normalises the raw token stream into the small set of
canonical types the block builder dispatches on.

Canonical block tokens:
    heading, paragraph, block_quote, list, list_item, task_list_item,
    block_code, table, thematic_break, html_block

Canonical inline tokens:
    text, strong, emphasis, codespan, strikethrough, link, image,
    softbreak, linebreak, html_inline

Block types mistune knows but noti does not map (``table``,
``thematic_break``, ``html_block``) are kept as bare ``{"type": ...}``
tokens so the builder can drop them without reporting an error.
"""

from __future__ import annotations

import mistune

_BLOCK_TYPE_MAP: dict[str, str] = {
    "heading": "heading",
    "paragraph": "paragraph",
    "block_quote": "block_quote",
    "list": "list",
    "list_item": "list_item",
    "task_list_item": "task_list_item",
    "block_code": "block_code",
    "table": "table",
    "thematic_break": "thematic_break",
    "block_html": "html_block",
    # tight list items wrap their inline content in block_text
    "block_text": "paragraph",
}

_INLINE_TYPE_MAP: dict[str, str] = {
    "text": "text",
    "strong": "strong",
    "emphasis": "emphasis",
    "codespan": "codespan",
    "strikethrough": "strikethrough",
    "link": "link",
    "image": "image",
    "softbreak": "softbreak",
    "linebreak": "linebreak",
    "inline_html": "html_inline",
}

# Block types whose inner structure is never read.
_OPAQUE_BLOCKS: frozenset[str] = frozenset({
    "table",
    "thematic_break",
})

GFM_PLUGINS: tuple[str, ...] = (
    "strikethrough",
    "table",
    "task_lists",
    "url",
)


class MarkdownLexer:
    """Parse Markdown and return normalized top-level tokens."""

    def __init__(self) -> None:
        self._parser = mistune.create_markdown(
            renderer="ast",
            plugins=list(GFM_PLUGINS),
        )

    def lex(self, markdown: str) -> list[dict]:
        """Return the normalized token list for *markdown*."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_tokens(raw_tokens)

    def _normalize_tokens(self, tokens: list[dict]) -> list[dict]:
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _normalize_token(self, token: dict) -> dict | None:
        raw_type = token.get("type", "")

        if raw_type == "blank_line":
            return None

        if raw_type in _BLOCK_TYPE_MAP:
            return self._normalize_block(token, _BLOCK_TYPE_MAP[raw_type])

        if raw_type in _INLINE_TYPE_MAP:
            return self._normalize_inline(token, _INLINE_TYPE_MAP[raw_type])

        # Leaf text inside code spans and similar constructs.
        if raw_type == "raw":
            return {"type": "text", "raw": token.get("raw", "")}

        return None

    def _normalize_block(self, token: dict, canonical_type: str) -> dict:
        result: dict = {"type": canonical_type}

        if canonical_type in _OPAQUE_BLOCKS:
            return result

        attrs = token.get("attrs")
        if attrs:
            result["attrs"] = dict(attrs)

        if canonical_type == "block_code":
            raw_code = token.get("raw", "")
            if raw_code.endswith("\n"):
                raw_code = raw_code[:-1]
            result["raw"] = raw_code
            return result

        if canonical_type == "html_block":
            result["raw"] = token.get("raw", "")
            return result

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result

    def _normalize_inline(self, token: dict, canonical_type: str) -> dict:
        result: dict = {"type": canonical_type}

        if canonical_type in ("text", "softbreak", "linebreak", "codespan", "html_inline"):
            if "raw" in token:
                result["raw"] = token["raw"]
            return result

        # link / image carry url and title
        attrs = token.get("attrs")
        if attrs:
            result["attrs"] = dict(attrs)

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result
