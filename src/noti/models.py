"""Public data models for noti.

Result types, import pipeline records and supporting enums referenced by
the public API.  All types are plain dataclasses; block and property
payloads themselves stay as Notion-shaped ``dict`` objects.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

@dataclass
class ConversionResult:
    """Output of :meth:`MarkdownToBlocks.convert`.

    Attributes
    ----------
    blocks:
        Notion block payloads in document order.  Always present,
        possibly empty.
    errors:
        One message per element that failed to convert, or ``None`` when
        every element converted.
    """

    blocks: list[dict] = field(default_factory=list)
    errors: list[str] | None = None


# ---------------------------------------------------------------------------
# Import pipeline
# ---------------------------------------------------------------------------

class DataType(str, Enum):
    """Target value types for CSV column coercion and validation."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"


class ImportPhase(str, Enum):
    """Phases reported through :class:`ImportProgress`."""

    VALIDATION = "validation"
    MAPPING = "mapping"
    TRANSFORMATION = "transformation"
    IMPORT = "import"


@dataclass
class ValidationRule:
    """A single check applied to a raw column value.

    Empty values (``None`` or ``""``) only fail the ``required`` check;
    all other checks are skipped for them.  ``message`` replaces the
    default message of whichever check fails.
    """

    type: DataType | None = None
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    custom: Callable[[Any], bool] | None = None
    message: str | None = None


@dataclass
class DataMapping:
    """Maps one CSV column onto one target record field.

    Attributes
    ----------
    source_field:
        CSV header name.
    target_field:
        Key in the produced record (the Notion property name on import).
    required:
        Informational; use a :class:`ValidationRule` to enforce it.
    transformer:
        Applied to the raw value first; an exception yields ``None``.
    validate:
        Applied after type coercion; a falsy result yields ``None``.
    rules:
        Checks run against the raw value during validation.
    data_type:
        Coercion target.
    """

    source_field: str
    target_field: str
    required: bool | None = False
    transformer: Callable[[Any], Any] | None = None
    validate: Callable[[Any], bool] | None = None
    rules: list[ValidationRule] = field(default_factory=list)
    data_type: DataType | None = None


@dataclass
class MappingValidationError:
    """A mapping entry that cannot be applied to the CSV."""

    field: str
    message: str
    row: int | None = None


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class MappingValidationResult:
    is_valid: bool
    errors: list[MappingValidationError] = field(default_factory=list)


@dataclass
class ImportProgress:
    """Progress snapshot handed to a progress callback."""

    phase: ImportPhase
    current: int
    total: int
    message: str | None = None


ProgressCallback = Callable[[ImportProgress], None]


@dataclass
class ImportResult:
    """Outcome of an import run.

    Attributes
    ----------
    success:
        ``False`` when validation failed or an error aborted the run.
    imported_count:
        Number of records transformed (dry run) or sent to Notion.
    errors:
        Human-readable failure messages.
    data:
        The transformed records, when available.
    """

    success: bool
    imported_count: int
    errors: list[str] = field(default_factory=list)
    data: list[dict[str, Any]] | None = None


# ---------------------------------------------------------------------------
# Notion database schema (import side)
# ---------------------------------------------------------------------------

@dataclass
class SchemaProperty:
    """One column of a target database.

    Attributes
    ----------
    type:
        Notion property type (``"title"``, ``"number"``, ...).
    name:
        CSV header that feeds this property.
    required:
        Copied onto the generated :class:`DataMapping`.
    """

    type: str
    name: str
    required: bool | None = None


@dataclass
class ImportConfig:
    """Target of a :class:`~noti.importer.NotionImporter` run."""

    database_id: str
    schema: dict[str, SchemaProperty] | None = None
    batch_size: int | None = None
