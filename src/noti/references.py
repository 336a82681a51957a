"""Page and database reference resolution.

A reference is whatever a user types to point at a page or database: a
notion.so URL, a hyphenated UUID, a bare 32-character hex id, or an
alias registered in an :class:`AliasResolver`.  Everything resolves to
the lower-case 32-character short id that the API accepts.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from noti.errors import NotiInvalidReferenceError
from noti.observability import get_logger

log = get_logger("noti.references")

# ASCII word boundaries so slugs with non-Latin titles do not glue
# themselves onto the id.
_URL_RE = re.compile(r"notion\.so/(?:[^/]*-)?([0-9a-fA-F]{32})\b", re.ASCII)
_LONG_ID_RE = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b",
    re.ASCII,
)
_SHORT_ID_RE = re.compile(r"\b[0-9a-fA-F]{32}\b", re.ASCII)

NOTION_BASE_URL = "https://notion.so"


@dataclass(frozen=True)
class NotionIdFormats:
    short_id: str
    long_id: str


@dataclass(frozen=True)
class NotionPageId:
    """A validated Notion object id.

    Build instances with :meth:`from_string`; ``str()`` gives the short
    form.

    Examples
    --------
    >>> NotionPageId.from_string("19875fb7-3edc-813a-9a5b-c09f2616cd60").short_id
    '19875fb73edc813a9a5bc09f2616cd60'
    >>> NotionPageId.from_string("not an id") is None
    True
    """

    short_id: str

    @classmethod
    def from_string(cls, value: str) -> NotionPageId | None:
        """Extract an id from a URL, long id or short id.

        The query string of a URL is ignored.  Returns ``None`` when no
        id can be found.
        """
        without_query = value.split("?", 1)[0]

        match = _URL_RE.search(without_query)
        if match:
            return cls(match.group(1).lower())

        match = _LONG_ID_RE.search(without_query)
        if match:
            return cls(match.group(0).replace("-", "").lower())

        match = _SHORT_ID_RE.search(without_query)
        if match:
            return cls(match.group(0).lower())

        return None

    @property
    def long_id(self) -> str:
        """The id in UUID form (8-4-4-4-12)."""
        s = self.short_id
        return f"{s[:8]}-{s[8:12]}-{s[12:16]}-{s[16:20]}-{s[20:]}"

    def formats(self) -> NotionIdFormats:
        return NotionIdFormats(short_id=self.short_id, long_id=self.long_id)

    def __str__(self) -> str:
        return self.short_id


def get_page_uri(value: str) -> str:
    """Return the notion.so URL for *value*, or *value* unchanged when it
    holds no id."""
    page_id = NotionPageId.from_string(value)
    if page_id is None:
        return value
    return f"{NOTION_BASE_URL}/{page_id.short_id}"


class AliasResolver:
    """In-memory alias table plus id resolution.

    Parameters
    ----------
    aliases:
        Initial ``alias -> reference`` entries.  The mapping is copied.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: dict[str, str] = dict(aliases or {})

    def get(self, alias: str) -> str | None:
        return self._aliases.get(alias)

    def set(self, alias: str, reference: str) -> None:
        self._aliases[alias] = reference

    def remove(self, alias: str) -> None:
        self._aliases.pop(alias, None)

    def all(self) -> dict[str, str]:
        """Return a copy of every alias."""
        return dict(self._aliases)

    def resolve_page_id(self, value: str) -> str:
        """Resolve *value* (alias, URL or id) to a page short id.

        Raises
        ------
        NotiInvalidReferenceError
            If no 32-character hex id can be extracted.
        """
        return self._resolve(value, "page")

    def resolve_database_id(self, value: str) -> str:
        """Resolve *value* (alias, URL or id) to a database short id.

        Raises
        ------
        NotiInvalidReferenceError
            If no 32-character hex id can be extracted.
        """
        return self._resolve(value, "database")

    def _resolve(self, value: str, kind: str) -> str:
        resolved = self._aliases.get(value) or value
        page_id = NotionPageId.from_string(resolved)
        if page_id is None:
            log.debug(
                "reference did not resolve",
                extra={"extra_fields": {"reference": value, "kind": kind}},
            )
            raise NotiInvalidReferenceError(
                message=f"Invalid {kind} ID or URL: expected 32 hexadecimal characters",
                context={"reference": value, "resolved": resolved, "kind": kind},
            )
        return page_id.short_id
