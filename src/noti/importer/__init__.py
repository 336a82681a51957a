"""CSV import pipeline.

- :class:`CSVImporter` -- validate and transform CSV rows into records.
- :class:`NotionImporter` -- derive a mapping from a database schema and
  hand property payloads to a page client in batches.
"""

from noti.importer.csv_importer import CSVImporter, convert_to_type, validate_value
from noti.importer.notion_importer import NotionImporter, PageClient, notion_type_to_data_type

__all__ = [
    "CSVImporter",
    "NotionImporter",
    "PageClient",
    "convert_to_type",
    "notion_type_to_data_type",
    "validate_value",
]
