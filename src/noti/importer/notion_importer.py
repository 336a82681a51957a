"""Import CSV rows into a Notion database.

:class:`NotionImporter` derives a column mapping from the target
database schema, runs the :class:`CSVImporter` pipeline, turns each
record into a ``properties`` payload and hands the payloads to an
injected page client in batches.  Network access is entirely the
client's business.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Protocol

from noti.config import NotiConfig
from noti.errors import NotiImportError, NotiMappingError
from noti.importer.csv_importer import CSVImporter
from noti.models import (
    DataMapping,
    DataType,
    ImportConfig,
    ImportPhase,
    ImportProgress,
    ImportResult,
    ProgressCallback,
)
from noti.observability import get_logger, resolve_metrics
from noti.properties import build_property_payload, to_iso_string
from noti.utils.chunk import chunk_records

log = get_logger("noti.importer.notion")

_DATA_TYPES_BY_NOTION_TYPE: dict[str, DataType] = {
    "number": DataType.NUMBER,
    "checkbox": DataType.BOOLEAN,
    "date": DataType.DATE,
    "multi_select": DataType.ARRAY,
}


class PageClient(Protocol):
    """Creates database pages from ``properties`` payloads."""

    def create_pages(self, database_id: str, pages: list[dict[str, dict]]) -> None:
        ...


def notion_type_to_data_type(notion_type: str) -> DataType:
    """Coercion target for a Notion property type; string by default."""
    return _DATA_TYPES_BY_NOTION_TYPE.get(notion_type, DataType.STRING)


def _payload_value(value: Any, prop_type: str) -> Any:
    if isinstance(value, datetime):
        return {"start": to_iso_string(value)}
    if prop_type == "multi_select" and not isinstance(value, list):
        return [value]
    return value


class NotionImporter:
    """Import CSV content into the database named by *import_config*.

    Parameters
    ----------
    content:
        CSV text; the header names are matched against each schema
        property's ``name``.
    client:
        Any object with ``create_pages(database_id, pages)``.
    import_config:
        Target database id, its schema and an optional batch size.
    config:
        Supplies the default batch size and the metrics hook.
    """

    def __init__(
        self,
        content: str,
        client: PageClient,
        import_config: ImportConfig,
        config: NotiConfig | None = None,
    ) -> None:
        self.csv_importer = CSVImporter(content)
        self._client = client
        self._import_config = import_config
        self._config = config if config is not None else NotiConfig()
        self._metrics = resolve_metrics(self._config.metrics)

    @property
    def batch_size(self) -> int:
        return self._import_config.batch_size or self._config.import_batch_size

    def generate_mapping_from_schema(self) -> list[DataMapping]:
        """One mapping per schema property: CSV column ``name`` to
        property key.

        Raises
        ------
        NotiImportError
            If the import config carries no schema.
        """
        schema = self._import_config.schema
        if schema is None:
            raise NotiImportError(
                message="No schema configured",
                context={"database_id": self._import_config.database_id, "phase": "mapping"},
            )
        return [
            DataMapping(
                source_field=prop.name,
                target_field=key,
                required=prop.required,
                data_type=notion_type_to_data_type(prop.type),
            )
            for key, prop in schema.items()
        ]

    def _check_targets(self, mapping: list[DataMapping]) -> None:
        schema = self._import_config.schema or {}
        for entry in mapping:
            if entry.target_field not in schema:
                raise NotiMappingError(
                    message=f'Target field "{entry.target_field}" is not a database property',
                    context={"field": entry.target_field},
                )

    def build_page_payload(self, record: dict[str, Any]) -> dict[str, dict]:
        """Turn a transformed record into a ``properties`` payload.

        ``None`` values are left out.
        """
        schema = self._import_config.schema or {}
        payload: dict[str, dict] = {}
        for key, value in record.items():
            if value is None or key not in schema:
                continue
            prop_type = schema[key].type
            payload[key] = build_property_payload(_payload_value(value, prop_type), prop_type)
        return payload

    def import_data(
        self,
        dry_run: bool = False,
        progress: ProgressCallback | None = None,
        mapping: list[DataMapping] | None = None,
    ) -> ImportResult:
        """Validate, transform and create pages.

        A custom *mapping* replaces the one derived from the schema.  In
        a dry run the transformed records are returned and the client is
        never called.  Every failure is reported through
        ``ImportResult.errors``; ``imported_count`` then counts the pages
        of batches that were created before the failure.
        """
        started = time.monotonic()
        imported = 0
        try:
            _report(progress, ImportPhase.MAPPING, 0, 1, "Generating mapping")
            if mapping is None:
                mapping = self.generate_mapping_from_schema()
            else:
                self._check_targets(mapping)
            self.csv_importer.map_data(mapping)
            _report(progress, ImportPhase.MAPPING, 1, 1, "Mapping ready")

            result = self.csv_importer.import_data(dry_run=dry_run, progress=progress)
            if not result.success or result.data is None or dry_run:
                return result

            pages = [self.build_page_payload(record) for record in result.data]
            total = len(pages)
            for batch in chunk_records(pages, self.batch_size):
                _report(
                    progress, ImportPhase.IMPORT, imported, total,
                    f"Importing pages {imported}/{total}",
                )
                self._client.create_pages(self._import_config.database_id, batch)
                imported += len(batch)
                self._metrics.increment("noti.rows_imported_total", len(batch))
            _report(progress, ImportPhase.IMPORT, total, total, "Import complete")
        except Exception as exc:
            log.error(
                "notion import failed",
                extra={"extra_fields": {
                    "database_id": self._import_config.database_id,
                    "imported": imported,
                    "error": str(exc),
                }},
            )
            return ImportResult(
                success=False,
                imported_count=imported,
                errors=[f"Error importing to Notion: {exc}"],
            )
        finally:
            self._metrics.timing("noti.import_duration_ms", (time.monotonic() - started) * 1000)

        log.info(
            "notion import complete",
            extra={"extra_fields": {
                "database_id": self._import_config.database_id,
                "imported": total,
            }},
        )
        return ImportResult(success=True, imported_count=total, errors=[])


def _report(
    callback: ProgressCallback | None,
    phase: ImportPhase,
    current: int,
    total: int,
    message: str,
) -> None:
    if callback is not None:
        callback(ImportProgress(phase=phase, current=current, total=total, message=message))
