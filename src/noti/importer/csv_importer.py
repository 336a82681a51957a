"""CSV to structured records.

:class:`CSVImporter` parses CSV text with the stdlib :mod:`csv` reader,
validates rows against a list of :class:`~noti.models.DataMapping`
entries and produces one ``dict`` per row keyed by each mapping's
``target_field``.

Row numbers in messages count the header as row 1, so the first data
row is row 2, matching what a spreadsheet shows.
"""

from __future__ import annotations

import csv
import io
import json
import math
import re
from typing import Any

from noti.models import (
    DataMapping,
    DataType,
    ImportPhase,
    ImportProgress,
    ImportResult,
    MappingValidationError,
    MappingValidationResult,
    ProgressCallback,
    ValidationResult,
    ValidationRule,
)
from noti.observability import get_logger
from noti.properties import parse_date

log = get_logger("noti.importer.csv")


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return None if math.isnan(number) else number


def _matches_type(value: Any, data_type: str) -> bool:
    """Whether *value* is, or can be coerced to, *data_type*."""
    if data_type == DataType.NUMBER:
        return _as_number(value) is not None
    if data_type == DataType.BOOLEAN:
        return isinstance(value, bool) or str(value).lower() in ("true", "false")
    if data_type == DataType.DATE:
        return parse_date(str(value)) is not None
    if data_type == DataType.OBJECT:
        if isinstance(value, dict):
            return True
        try:
            return isinstance(json.loads(str(value)), dict)
        except ValueError:
            return False
    return True


def convert_to_type(value: Any, data_type: str) -> Any:
    """Coerce a raw cell value to *data_type*.

    Empty values become ``None``, as do values that fail to coerce.
    """
    if _is_empty(value):
        return None

    if data_type == DataType.NUMBER:
        number = _as_number(value)
        if number is None:
            return None
        return int(number) if number.is_integer() else number
    if data_type == DataType.BOOLEAN:
        return str(value).lower() == "true"
    if data_type == DataType.DATE:
        return parse_date(str(value))
    if data_type == DataType.ARRAY:
        return [item.strip() for item in str(value).split(",")]
    if data_type == DataType.OBJECT:
        try:
            return json.loads(str(value))
        except ValueError:
            return None
    return str(value)


def validate_value(value: Any, rules: list[ValidationRule]) -> list[str]:
    """Run *rules* against a single raw value and return the failures.

    An empty value only fails ``required``; every other check is skipped
    for it.  A rule's ``message`` replaces the default text.
    """
    errors: list[str] = []

    for rule in rules:
        if _is_empty(value):
            if rule.required:
                errors.append(rule.message or "This field is required")
            continue

        if rule.type is not None and not _matches_type(value, rule.type):
            errors.append(rule.message or f"Must be of type {DataType(rule.type).value}")
            continue

        if isinstance(value, str):
            if rule.min_length is not None and len(value) < rule.min_length:
                errors.append(rule.message or f"Must be at least {rule.min_length} characters")
            if rule.max_length is not None and len(value) > rule.max_length:
                errors.append(rule.message or f"Must be at most {rule.max_length} characters")
            if rule.pattern and not re.search(rule.pattern, value):
                errors.append(rule.message or "Invalid format")

        if rule.min is not None or rule.max is not None:
            number = _as_number(value)
            if number is not None:
                if rule.min is not None and number < rule.min:
                    errors.append(rule.message or f"Must be at least {rule.min}")
                if rule.max is not None and number > rule.max:
                    errors.append(rule.message or f"Must be at most {rule.max}")

        if rule.custom is not None and not rule.custom(value):
            errors.append(rule.message or "Custom validation failed")

    return errors


class CSVImporter:
    """Validate and transform CSV content.

    Parameters
    ----------
    content:
        The CSV text.  The first row is the header.

    Examples
    --------
    >>> importer = CSVImporter("name,age\\nJohn,30\\n")
    >>> importer.map_data(importer.generate_default_mapping())
    >>> importer.import_data().data
    [{'name': 'John', 'age': '30'}]
    """

    def __init__(self, content: str) -> None:
        self._data: list[list[str]] = list(csv.reader(io.StringIO(content)))
        self._mapping: list[DataMapping] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def headers(self) -> list[str]:
        return list(self._data[0]) if self._data else []

    def rows(self) -> list[list[str]]:
        """Data rows, header excluded."""
        return [list(row) for row in self._data[1:]]

    @property
    def mapping(self) -> list[DataMapping]:
        return list(self._mapping)

    def generate_default_mapping(self) -> list[DataMapping]:
        """One string mapping per header, source and target unchanged."""
        return [
            DataMapping(
                source_field=header,
                target_field=header,
                required=False,
                data_type=DataType.STRING,
            )
            for header in self.headers()
        ]

    def map_data(self, mapping: list[DataMapping]) -> None:
        self._mapping = list(mapping)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_mapping(self) -> MappingValidationResult:
        """Check that every mapping points at an existing column and has
        a target."""
        if not self._mapping:
            return MappingValidationResult(
                is_valid=False,
                errors=[MappingValidationError(field="*", message="No mapping configured")],
            )

        headers = self.headers()
        errors: list[MappingValidationError] = []
        for mapping in self._mapping:
            if mapping.source_field not in headers:
                errors.append(MappingValidationError(
                    field=mapping.source_field,
                    message=f'Source field "{mapping.source_field}" does not exist in CSV headers',
                ))
            if not mapping.target_field:
                errors.append(MappingValidationError(
                    field=mapping.source_field,
                    message="Target field is not set",
                ))

        return MappingValidationResult(is_valid=not errors, errors=errors)

    def validate_data_types(self, mapping: list[DataMapping] | None = None) -> ValidationResult:
        """Apply each mapping's rules to every data row.

        Uses the configured mapping unless *mapping* is given.  Columns
        missing from the header are ignored here; :meth:`validate_mapping`
        reports them.
        """
        mapping = self._mapping if mapping is None else mapping
        headers = self.headers()
        errors: list[str] = []

        for index, row in enumerate(self._data[1:], start=1):
            for entry in mapping:
                if not entry.rules or entry.source_field not in headers:
                    continue
                column = headers.index(entry.source_field)
                value = row[column] if column < len(row) else None
                failures = validate_value(value, entry.rules)
                if failures:
                    errors.append(
                        f"Row {index + 1} - {entry.source_field}: {', '.join(failures)}"
                    )

        return ValidationResult(is_valid=not errors, errors=errors)

    def validate(self, progress: ProgressCallback | None = None) -> ValidationResult:
        """Validate structure, mapping and row values, in that order.

        Stops at the first stage that fails.
        """
        self._report(progress, ImportPhase.VALIDATION, 0, 3, "Checking CSV content")
        if not self._data:
            return ValidationResult(is_valid=False, errors=["CSV file is empty"])

        self._report(progress, ImportPhase.VALIDATION, 1, 3, "Checking headers")
        if not self.headers():
            return ValidationResult(is_valid=False, errors=["CSV file has no header row"])

        self._report(progress, ImportPhase.VALIDATION, 2, 3, "Checking mapping")
        mapping_result = self.validate_mapping()
        if not mapping_result.is_valid:
            return ValidationResult(
                is_valid=False,
                errors=[f"{e.field}: {e.message}" for e in mapping_result.errors],
            )

        type_result = self.validate_data_types()
        if not type_result.is_valid:
            return type_result

        self._report(progress, ImportPhase.VALIDATION, 3, 3, "Validation complete")
        return ValidationResult(is_valid=True, errors=[])

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    def transform_row(self, row: list[str]) -> dict[str, Any]:
        """Apply transformer, type coercion and ``validate`` per mapping."""
        headers = self.headers()
        record: dict[str, Any] = {}

        for entry in self._mapping:
            if entry.source_field not in headers:
                continue
            column = headers.index(entry.source_field)
            value: Any = row[column] if column < len(row) else None

            if entry.transformer is not None:
                try:
                    value = entry.transformer(value)
                except Exception as exc:
                    log.warning(
                        "transformer failed",
                        extra={"extra_fields": {
                            "field": entry.source_field,
                            "error": str(exc),
                        }},
                    )
                    value = None

            if entry.data_type is not None:
                value = convert_to_type(value, entry.data_type)

            if entry.validate is not None and not entry.validate(value):
                value = None

            record[entry.target_field] = value

        return record

    def import_data(
        self,
        dry_run: bool = False,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Validate, then transform every row.

        *dry_run* is accepted for symmetry with
        :meth:`NotionImporter.import_data`; this class never writes
        anywhere, so both modes return the transformed records.
        """
        try:
            self._report(progress, ImportPhase.VALIDATION, 0, 1, "Validating data")
            validation = self.validate(progress)
            if not validation.is_valid:
                return ImportResult(success=False, imported_count=0, errors=validation.errors)

            rows = self._data[1:]
            total = len(rows)
            records: list[dict[str, Any]] = []
            for index, row in enumerate(rows):
                self._report(
                    progress, ImportPhase.TRANSFORMATION, index, total,
                    f"Transforming row {index + 1}/{total}",
                )
                records.append(self.transform_row(row))
            self._report(
                progress, ImportPhase.TRANSFORMATION, total, total, "Transformation complete",
            )
        except Exception as exc:
            log.error(
                "csv import failed",
                extra={"extra_fields": {"error": str(exc), "dry_run": dry_run}},
            )
            return ImportResult(
                success=False,
                imported_count=0,
                errors=[f"Error during import: {exc}"],
            )

        return ImportResult(
            success=True,
            imported_count=len(records),
            errors=[],
            data=records,
        )

    @staticmethod
    def _report(
        callback: ProgressCallback | None,
        phase: ImportPhase,
        current: int,
        total: int,
        message: str,
    ) -> None:
        if callback is not None:
            callback(ImportProgress(phase=phase, current=current, total=total, message=message))
