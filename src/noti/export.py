"""Database export rendering.

Turns a database object and its pages (as returned by the query
endpoint) into JSON, CSV or a Markdown table.  Columns follow the
database's property order.
"""

from __future__ import annotations

import csv
import io
from typing import Any

from noti.errors import NotiValidationError
from noti.observability import get_logger
from noti.properties import format_cell_value

log = get_logger("noti.export")

EXPORT_FORMATS: tuple[str, ...] = ("json", "csv", "markdown")


def _rows(database: dict, pages: list[dict]) -> tuple[list[str], list[list[str]]]:
    headers = list(database.get("properties", {}))
    rows = [
        [format_cell_value(page.get("properties", {}).get(name)) for name in headers]
        for page in pages
    ]
    return headers, rows


def to_csv(database: dict, pages: list[dict]) -> str:
    headers, rows = _rows(database, pages)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def to_markdown_table(database: dict, pages: list[dict]) -> str:
    headers, rows = _rows(database, pages)
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in rows)
    return "\n".join(lines) + "\n"


def export_database(database: dict, pages: list[dict], fmt: str = "json") -> Any:
    """Render *pages* of *database* in *fmt*.

    Returns
    -------
    dict | str
        ``{"database": ..., "pages": [...]}`` for ``json``; the rendered
        text for ``csv`` and ``markdown``.

    Raises
    ------
    NotiValidationError
        If *fmt* is not one of ``json``, ``csv`` or ``markdown``.
    """
    log.debug(
        "exporting database",
        extra={"extra_fields": {"format": fmt, "pages": len(pages)}},
    )
    if fmt == "json":
        return {"database": database, "pages": pages}
    if fmt == "csv":
        return to_csv(database, pages)
    if fmt == "markdown":
        return to_markdown_table(database, pages)
    raise NotiValidationError(
        message=f"Unknown export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})",
        context={"field": "format", "value": fmt},
    )
