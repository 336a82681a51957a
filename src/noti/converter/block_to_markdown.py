"""Notion blocks and page properties to Markdown.

Usage::

    from noti.converter import BlockToMarkdown

    renderer = BlockToMarkdown()
    md = renderer.convert_properties(page["properties"]) + renderer.convert(blocks)

Rendering is lossy: only the text of each rich-text run is kept;
annotations and links are not re-serialised.  Block types without a
rule (images, dividers, tables, ...) render as the empty string.
"""

from __future__ import annotations

from collections.abc import Callable

from noti.config import NotiConfig
from noti.converter.rich_text import plain_text
from noti.observability import get_logger, resolve_metrics

log = get_logger("noti.converter.blocks")

# Block types that form a Markdown list; consecutive ones share a list.
# to_do items render on their own line with no run handling.
_LIST_TYPES: frozenset[str] = frozenset({
    "bulleted_list_item",
    "numbered_list_item",
})


class BlockToMarkdown:
    """Render Notion blocks to Markdown text.

    Parameters
    ----------
    config:
        Only the metrics hook is consulted.  Defaults to ``NotiConfig()``.
    """

    def __init__(self, config: NotiConfig | None = None) -> None:
        self._config = config if config is not None else NotiConfig()
        self._metrics = resolve_metrics(self._config.metrics)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def convert(self, blocks: list[dict]) -> str:
        """Render *blocks* in order.

        A bulleted or numbered item directly followed by another one gets
        no blank line between them; the last item of such a run is
        followed by one extra newline so the list is closed.  ``to_do``
        items take no part in runs.
        """
        parts: list[str] = []

        for index, block in enumerate(blocks):
            block_type = block.get("type", "")
            parts.append(self.render_block(block))

            if block_type in _LIST_TYPES:
                next_type = blocks[index + 1].get("type", "") if index + 1 < len(blocks) else ""
                if next_type not in _LIST_TYPES:
                    parts.append("\n")

        if blocks:
            self._metrics.increment(
                "noti.blocks_converted_total",
                len(blocks),
                tags={"direction": "blocks_to_markdown"},
            )

        return "".join(parts)

    def render_block(self, block: dict) -> str:
        """Render a single block; unknown types yield ``""``."""
        block_type = block.get("type", "")
        renderer = _BLOCK_RENDERERS.get(block_type)
        if renderer is None:
            log.debug(
                "block type has no markdown rendering",
                extra={"extra_fields": {"block_type": block_type}},
            )
            return ""
        return renderer(block.get(block_type) or {})

    def convert_properties(self, properties: dict[str, dict]) -> str:
        """Render page properties as a Markdown preamble.

        Only ``title``, ``rich_text``, ``date`` and ``url`` properties are
        rendered, in insertion order; every other type is skipped.

        Examples
        --------
        >>> BlockToMarkdown().convert_properties({
        ...     "Name": {"type": "title", "title": [{"plain_text": "タイトル"}]},
        ... })
        '# タイトル\\n\\n'
        """
        parts: list[str] = []

        for name, prop in properties.items():
            prop_type = prop.get("type", "")
            value = prop.get(prop_type)

            if prop_type == "title":
                parts.append(f"# {_first_plain_text(value)}\n\n")
            elif prop_type == "rich_text":
                parts.append(f"**{name}**: {_first_plain_text(value)}\n\n")
            elif prop_type == "date":
                start = (value or {}).get("start") or ""
                parts.append(f"**{name}**: {start}\n\n")
            elif prop_type == "url":
                url = value or ""
                parts.append(f"**{name}**: [{url}]({url})\n\n")

        return "".join(parts)

    def render_page(self, page: dict, blocks: list[dict]) -> str:
        """Render a page: its property preamble followed by its blocks."""
        return self.convert_properties(page.get("properties", {})) + self.convert(blocks)


# ---------------------------------------------------------------------------
# Per-type renderers
# ---------------------------------------------------------------------------

def _text(payload: dict) -> str:
    return plain_text(payload.get("rich_text", []))


def _first_plain_text(runs: list[dict] | None) -> str:
    if not runs:
        return ""
    return runs[0].get("plain_text") or ""


def _render_paragraph(payload: dict) -> str:
    return f"{_text(payload)}\n\n"


def _heading_renderer(level: int) -> Callable[[dict], str]:
    marker = "#" * level

    def render(payload: dict) -> str:
        return f"{marker} {_text(payload)}\n\n"

    return render


def _render_bulleted(payload: dict) -> str:
    return f"- {_text(payload)}\n"


def _render_numbered(payload: dict) -> str:
    return f"1. {_text(payload)}\n"


def _render_to_do(payload: dict) -> str:
    mark = "x" if payload.get("checked") else " "
    return f"- [{mark}] {_text(payload)}\n"


def _render_code(payload: dict) -> str:
    language = payload.get("language", "")
    return f"```{language}\n{_text(payload)}\n```\n\n"


def _render_quote(payload: dict) -> str:
    return f"> {_text(payload)}\n\n"


_BLOCK_RENDERERS: dict[str, Callable[[dict], str]] = {
    "paragraph": _render_paragraph,
    "heading_1": _heading_renderer(1),
    "heading_2": _heading_renderer(2),
    "heading_3": _heading_renderer(3),
    "bulleted_list_item": _render_bulleted,
    "numbered_list_item": _render_numbered,
    "to_do": _render_to_do,
    "code": _render_code,
    "quote": _render_quote,
}
