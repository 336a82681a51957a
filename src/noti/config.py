"""Configuration for noti.

:class:`NotiConfig` is a plain dataclass capturing every tuneable knob of
the conversion and import core.  Instances are passed to
:class:`~noti.converter.MarkdownToBlocks`,
:class:`~noti.converter.BlockToMarkdown` and
:class:`~noti.importer.NotionImporter`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal


@dataclass
class NotiConfig:
    """Complete configuration for the noti core.

    Every parameter has a default, so ``NotiConfig()`` is valid.

    Parameters
    ----------
    token:
        Notion integration token, carried for the HTTP collaborator that
        consumes the produced payloads.  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header the collaborator sends.
    base_url:
        API root URL.
    list_items:
        How a Markdown list element maps to blocks.

        * ``"first"`` -- only the first item becomes a block (one block
          per list element).
        * ``"all"`` -- every item becomes a block; nested lists are
          attached as ``children``.
    heading_overflow:
        Markdown headings of level 4 and above (Notion has H1-H3 only).

        * ``"paragraph"`` -- plain paragraph.
        * ``"downgrade"`` -- clamp to ``heading_3``.
    normalize_code_language:
        Map fence info strings to Notion's language identifiers
        (``ts`` -> ``typescript``, unknown -> ``plain text``).  When off,
        the trimmed info string is used verbatim.
    rich_text_limit:
        Maximum characters per rich-text run before it is split.
    import_batch_size:
        Number of records handed to the page client per batch.
    metrics:
        Optional :class:`~noti.observability.MetricsHook` backend.
    debug_dump_ast:
        Write the parsed Mistune AST to the debug log on each conversion.
    debug_dump_payload:
        Write the (redacted) block payload to the debug log.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Markdown → blocks ───────────────────────────────────────────────
    list_items: Literal["first", "all"] = "first"

    heading_overflow: Literal["paragraph", "downgrade"] = "paragraph"

    normalize_code_language: bool = False

    rich_text_limit: int = 2000

    # ── Import ──────────────────────────────────────────────────────────
    import_batch_size: int = 100

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.list_items not in ("first", "all"):
            raise ValueError(f"list_items must be 'first' or 'all', got {self.list_items!r}")
        if self.heading_overflow not in ("paragraph", "downgrade"):
            raise ValueError(
                f"heading_overflow must be 'paragraph' or 'downgrade', got {self.heading_overflow!r}"
            )
        if self.rich_text_limit < 1:
            raise ValueError(f"rich_text_limit must be >= 1, got {self.rich_text_limit}")
        if self.import_batch_size < 1:
            raise ValueError(f"import_batch_size must be >= 1, got {self.import_batch_size}")

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotiConfig({', '.join(parts)})"
