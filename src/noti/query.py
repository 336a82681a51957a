"""Database query filter and sort building.

Filter expressions have the form ``<property><op><value>`` where *op* is
one of ``=``, ``!=``, ``>``, ``<``, ``>=``, ``<=``, ``contains`` or
``!contains``.  The property's schema type decides which Notion filter
condition each operator becomes.
"""

from __future__ import annotations

import re

from noti.observability import get_logger
from noti.properties import extract_property_value

log = get_logger("noti.query")

_FILTER_RE = re.compile(r"^(.+?)\s*(!=|>=|<=|=|>|<|contains|!contains)\s*(.+)$")

_TEXT_OPS: dict[str, str] = {
    "=": "equals",
    "!=": "does_not_equal",
    "contains": "contains",
    "!contains": "does_not_contain",
}

_NUMBER_OPS: dict[str, str] = {
    "=": "equals",
    "!=": "does_not_equal",
    ">": "greater_than",
    "<": "less_than",
    ">=": "greater_than_or_equal_to",
    "<=": "less_than_or_equal_to",
}

_SELECT_OPS: dict[str, str] = {
    "=": "equals",
    "!=": "does_not_equal",
}

_MULTI_SELECT_OPS: dict[str, str] = {
    "contains": "contains",
    "!contains": "does_not_contain",
}

_DATE_OPS: dict[str, str] = {
    "=": "equals",
    ">": "after",
    "<": "before",
    ">=": "on_or_after",
    "<=": "on_or_before",
}

_OPS_BY_TYPE: dict[str, dict[str, str]] = {
    "title": _TEXT_OPS,
    "rich_text": _TEXT_OPS,
    "number": _NUMBER_OPS,
    "select": _SELECT_OPS,
    "status": _SELECT_OPS,
    "multi_select": _MULTI_SELECT_OPS,
    "date": _DATE_OPS,
}

TIMESTAMP_SORT_KEYS: frozenset[str] = frozenset({"created_time", "last_edited_time"})


def _number(value: str) -> float | int | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def parse_filter(expr: str, schema: dict[str, dict]) -> dict | None:
    """Parse one filter expression into a Notion property filter.

    Returns ``None`` (after logging a warning) for malformed expressions,
    unknown properties, operators the property type does not support
    and non-numeric values on number properties.

    Examples
    --------
    >>> parse_filter("Status=Done", {"Status": {"type": "select"}})
    {'property': 'Status', 'select': {'equals': 'Done'}}
    """
    match = _FILTER_RE.match(expr)
    if not match:
        log.warning("invalid filter expression", extra={"extra_fields": {"filter": expr}})
        return None

    name, operator, value = match.groups()
    prop_schema = schema.get(name)
    if prop_schema is None:
        log.warning("filter property not found", extra={"extra_fields": {"property": name}})
        return None

    prop_type = prop_schema.get("type", "")

    if prop_type == "checkbox":
        return {"property": name, "checkbox": {"equals": value.lower() == "true"}}

    condition = _OPS_BY_TYPE.get(prop_type, {}).get(operator)
    if condition is None:
        log.warning(
            "unsupported filter operator",
            extra={"extra_fields": {"operator": operator, "property_type": prop_type}},
        )
        return None

    operand: str | float | int | None = value
    if prop_type == "number":
        operand = _number(value)
        if operand is None:
            log.warning(
                "filter value is not a number",
                extra={"extra_fields": {"property": name, "value": value}},
            )
            return None

    return {"property": name, prop_type: {condition: operand}}


def build_filter(exprs: list[str], schema: dict[str, dict]) -> dict | None:
    """Combine filter expressions.

    Invalid expressions are dropped.  Returns ``None`` when nothing is
    left, the filter itself for one, or ``{"and": [...]}`` for several.
    """
    filters = [f for f in (parse_filter(expr, schema) for expr in exprs) if f is not None]
    if not filters:
        return None
    if len(filters) == 1:
        return filters[0]
    return {"and": filters}


def parse_sort(expr: str, schema: dict[str, dict]) -> list[dict]:
    """Parse ``name[:asc|desc]`` entries separated by commas.

    ``created_time`` and ``last_edited_time`` become timestamp sorts.
    Any direction other than ``desc`` sorts ascending.  Unknown
    properties are skipped with a warning.
    """
    sorts: list[dict] = []

    for part in expr.split(","):
        name, _, direction = part.strip().partition(":")
        direction = "descending" if direction == "desc" else "ascending"

        if name in TIMESTAMP_SORT_KEYS:
            sorts.append({"timestamp": name, "direction": direction})
            continue

        if name not in schema:
            log.warning("sort property not found", extra={"extra_fields": {"property": name}})
            continue

        sorts.append({"property": name, "direction": direction})

    return sorts


def build_sorts(exprs: list[str], schema: dict[str, dict]) -> list[dict] | None:
    """Flatten several sort expressions; ``None`` when none were given."""
    if not exprs:
        return None
    return [sort for expr in exprs for sort in parse_sort(expr, schema)]


def format_query_results(
    pages: list[dict],
    schema: dict[str, dict],
    max_columns: int = 5,
    max_width: int = 30,
) -> str:
    """Render query results as tab-separated lines.

    The title property comes first, followed by the next properties in
    schema order up to *max_columns*.  Cell text is cut at *max_width*.
    """
    if not pages:
        return "No results."

    names = list(schema)
    title = next((n for n in names if schema[n].get("type") == "title"), None)
    if title is not None:
        columns = [title] + [n for n in names if n != title][: max_columns - 1]
    else:
        columns = names[:max_columns]

    lines = ["\t".join(["ID", *columns])]
    for page in pages:
        properties = page.get("properties", {})
        cells = [
            extract_property_value(properties[c])[:max_width] if properties.get(c) else ""
            for c in columns
        ]
        lines.append("\t".join([page.get("id", ""), *cells]))
    return "\n".join(lines)
