"""Property value shaping.

Notion page properties arrive as ``{"type": T, T: payload}`` dicts.  This
module turns them into display strings (query listings, export cells,
schema tables) and turns user input back into API payloads.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from noti.errors import NotiUnsupportedPropertyError, NotiValidationError
from noti.observability import get_logger

log = get_logger("noti.properties")


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def format_number(value: float | int | None) -> str:
    """Render a number without a trailing ``.0`` for integral floats."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _name_of(option: dict | None) -> str:
    return (option or {}).get("name") or ""


def extract_property_value(prop: dict) -> str:
    """Return the display text of a property value.

    Multi-valued properties are joined with ``", "``, date ranges render
    as ``start → end`` and checkboxes as ``☑`` / ``☐``.  Unknown types
    yield ``""``.

    Examples
    --------
    >>> extract_property_value({"type": "checkbox", "checkbox": True})
    '☑'
    >>> extract_property_value({"type": "date", "date": {"start": "2024-01-01", "end": "2024-01-31"}})
    '2024-01-01 → 2024-01-31'
    """
    prop_type = prop.get("type", "")
    value = prop.get(prop_type)

    if prop_type in ("title", "rich_text"):
        return "".join(run.get("plain_text", "") for run in value or [])
    if prop_type == "number":
        return format_number(value)
    if prop_type in ("select", "status"):
        return _name_of(value)
    if prop_type == "multi_select":
        return ", ".join(_name_of(option) for option in value or [])
    if prop_type == "date":
        if not value:
            return ""
        if value.get("end"):
            return f"{value.get('start')} → {value['end']}"
        return value.get("start") or ""
    if prop_type == "checkbox":
        return "☑" if value else "☐"
    if prop_type in ("url", "email", "phone_number", "created_time", "last_edited_time"):
        return value or ""
    if prop_type == "formula":
        formula = value or {}
        result = formula.get("string") or formula.get("number") or ""
        return format_number(result) if isinstance(result, (int, float)) else str(result)
    if prop_type == "relation":
        return ", ".join(item.get("id", "") for item in value or [])
    return ""


def format_cell_value(prop: dict | None) -> str:
    """Return the export cell text of a property value.

    Differs from :func:`extract_property_value` in that title and
    rich_text keep only their first run, multi_select joins with ``;``
    and checkboxes render as ``true`` / ``false``.
    """
    if not prop:
        return ""

    prop_type = prop.get("type", "")
    value = prop.get(prop_type)

    if prop_type in ("title", "rich_text"):
        return (value[0].get("plain_text") or "") if value else ""
    if prop_type == "select":
        return _name_of(value)
    if prop_type == "multi_select":
        return ";".join(_name_of(option) for option in value or [])
    if prop_type == "date":
        return (value or {}).get("start") or ""
    if prop_type == "number":
        return format_number(value)
    if prop_type == "checkbox":
        return "true" if value else "false"
    if prop_type in ("url", "email", "phone_number"):
        return value or ""
    return ""


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

def _parse_number(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return None if math.isnan(number) else number


def parse_date(value: str) -> datetime | None:
    """Parse an ISO 8601 date or datetime; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso_string(moment: datetime) -> str:
    """Format *moment* as UTC with millisecond precision, e.g.
    ``2024-01-15T00:00:00.000Z``."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def validate_input_value(value: str, prop_type: str) -> bool:
    """Check that a string typed by a user fits *prop_type*.

    Only ``number``, ``checkbox`` and ``date`` are checked; every other
    type accepts any string.
    """
    if prop_type == "number":
        return _parse_number(value) is not None
    if prop_type == "checkbox":
        return value.lower() in ("true", "false")
    if prop_type == "date":
        return parse_date(value) is not None
    return True


def convert_input_value(value: str, prop_type: str) -> Any:
    """Coerce a validated input string to the value
    :func:`build_property_payload` expects.

    Raises
    ------
    NotiValidationError
        If *value* does not fit *prop_type*.
    """
    if not validate_input_value(value, prop_type):
        raise NotiValidationError(
            message=f"Invalid {prop_type} value: {value!r}",
            context={"field": prop_type, "value": value},
        )
    if prop_type == "number":
        number = float(value)
        return int(number) if number.is_integer() else number
    if prop_type == "checkbox":
        return value.lower() == "true"
    if prop_type == "date":
        return {"start": to_iso_string(parse_date(value))}
    return value


def build_property_payload(value: Any, prop_type: str) -> dict:
    """Wrap *value* in the Notion API payload for *prop_type*.

    Raises
    ------
    NotiUnsupportedPropertyError
        For property types that cannot be written (formula, rollup, ...).
    """
    if prop_type in ("title", "rich_text"):
        return {prop_type: [{"text": {"content": str(value)}}]}
    if prop_type == "number":
        return {"number": value}
    if prop_type == "select":
        return {"select": {"name": value}}
    if prop_type == "multi_select":
        return {"multi_select": [{"name": name} for name in value]}
    if prop_type == "checkbox":
        return {"checkbox": value}
    if prop_type == "date":
        return {"date": value}
    if prop_type in ("url", "email", "phone_number"):
        return {prop_type: value}
    raise NotiUnsupportedPropertyError(
        message=f"Unsupported property type: {prop_type}",
        context={"property_type": prop_type},
    )


def build_page_properties(data: dict[str, Any], schema: dict[str, dict]) -> dict[str, dict]:
    """Build the ``properties`` payload for a new page.

    *schema* is the database's property map.  Keys of *data* missing
    from it are skipped with a warning.

    Raises
    ------
    NotiUnsupportedPropertyError
        If a value targets a property type that cannot be written.
    """
    payload: dict[str, dict] = {}
    for key, value in data.items():
        prop_type = (schema.get(key) or {}).get("type")
        if not prop_type:
            log.warning(
                "property not in database schema",
                extra={"extra_fields": {"property": key}},
            )
            continue
        try:
            payload[key] = build_property_payload(value, prop_type)
        except NotiUnsupportedPropertyError as exc:
            raise NotiUnsupportedPropertyError(
                message=f'Failed to convert property "{key}": {exc.message}',
                context={"property_type": prop_type, "property": key},
                cause=exc,
            ) from exc
    return payload


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_EMPTY_SCHEMA_MESSAGE = "No properties"


def _property_options(prop: dict) -> list[str]:
    prop_type = prop.get("type", "")
    if prop_type not in ("select", "multi_select", "status"):
        return []
    options = (prop.get(prop_type) or {}).get("options") or []
    return [option.get("name", "") for option in options]


def _property_detail(prop: dict) -> str:
    options = _property_options(prop)
    if options:
        return f"[{', '.join(options)}]"
    if prop.get("type") == "number":
        number_format = (prop.get("number") or {}).get("format")
        if number_format:
            return f"({number_format})"
    return ""


def format_schema(properties: dict[str, dict]) -> str:
    """Render a database property map as an aligned text table.

    Columns are Name, Type and Detail (select options or number format)::

        Name      Type          Detail
        ────────  ────────────  ────────────────────
        Name      title
        Status    select        [Todo, In Progress, Done]
        Priority  number        (number)
    """
    if not properties:
        return _EMPTY_SCHEMA_MESSAGE

    name_width = max(max(len(name) for name in properties), 4)
    type_width = max(max(len(prop.get("type", "")) for prop in properties.values()), 4)

    lines = [
        f"{'Name'.ljust(name_width)}  {'Type'.ljust(type_width)}  Detail",
        f"{'─' * name_width}  {'─' * type_width}  {'─' * 20}",
    ]
    for name, prop in properties.items():
        prop_type = prop.get("type", "")
        lines.append(
            f"{name.ljust(name_width)}  {prop_type.ljust(type_width)}  {_property_detail(prop)}"
        )
    return "\n".join(lines)
