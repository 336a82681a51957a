"""noti -- Markdown / Notion conversion core for the noti command-line client.

Public re-exports
-----------------

* **Converters:** :class:`MarkdownToBlocks`, :class:`BlockToMarkdown`
* **Configuration:** :class:`NotiConfig`
* **Errors:** Every :class:`NotiError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses and import pipeline types

Usage::

    from noti import BlockToMarkdown, MarkdownToBlocks

    result = MarkdownToBlocks().convert("# Hello\\n\\nWorld")
    markdown = BlockToMarkdown().convert(result.blocks)
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from noti.config import NotiConfig

# ── Converters ─────────────────────────────────────────────────────────
from noti.converter import BlockToMarkdown, MarkdownToBlocks

# ── Errors ──────────────────────────────────────────────────────────────
from noti.errors import (
    ErrorCode,
    NotiConversionError,
    NotiError,
    NotiImportError,
    NotiInvalidReferenceError,
    NotiMappingError,
    NotiUnsupportedPropertyError,
    NotiValidationError,
)

# ── Import pipeline ─────────────────────────────────────────────────────
from noti.importer import CSVImporter, NotionImporter

# ── Models ──────────────────────────────────────────────────────────────
from noti.models import (
    ConversionResult,
    DataMapping,
    DataType,
    ImportConfig,
    ImportPhase,
    ImportProgress,
    ImportResult,
    SchemaProperty,
    ValidationResult,
    ValidationRule,
)

# ── References ──────────────────────────────────────────────────────────
from noti.references import AliasResolver, NotionPageId, get_page_uri

__version__ = "0.1.0"

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Converters
    "MarkdownToBlocks",
    "BlockToMarkdown",
    # Configuration
    "NotiConfig",
    # Error base + code enum
    "NotiError",
    "ErrorCode",
    "NotiValidationError",
    # Conversion errors
    "NotiConversionError",
    "NotiUnsupportedPropertyError",
    # Reference errors
    "NotiInvalidReferenceError",
    # Import errors
    "NotiImportError",
    "NotiMappingError",
    # Import pipeline
    "CSVImporter",
    "NotionImporter",
    # Models
    "ConversionResult",
    "DataMapping",
    "DataType",
    "ImportConfig",
    "ImportPhase",
    "ImportProgress",
    "ImportResult",
    "SchemaProperty",
    "ValidationResult",
    "ValidationRule",
    # References
    "AliasResolver",
    "NotionPageId",
    "get_page_uri",
]
