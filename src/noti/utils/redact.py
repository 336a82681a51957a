"""Payload redaction for debug logging.

Block and property payloads pass through :func:`redact` before they are
written to the debug log:

* Values under sensitive keys (``token``, ``authorization``, ...) are
  replaced with ``<redacted>`` or a placeholder showing the last four
  characters of the known token.
* The configured integration token is scrubbed from every string value.
* ``Bearer <token>`` fragments are masked even when the token is unknown.
"""

from __future__ import annotations

import copy
import re
from typing import Any

# Substrings: a key containing any of these (case-insensitive) is masked.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "api_key",
})

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _mask_token(value: str, token: str | None) -> str:
    if token and token in value:
        suffix = token[-4:] if len(token) >= 4 else "****"
        placeholder = f"<redacted:...{suffix}>"
        if token in placeholder:
            placeholder = "<redacted>"
        value = value.replace(token, placeholder)
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _mask_token(value, token)
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str):
                masked = _mask_token(value, token)
                result[key] = masked if masked != value else "<redacted>"
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data masked.

    The original *payload* is never mutated.

    Examples
    --------
    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': 'Bearer <redacted>'}
    >>> redact({"token": "secret_value"})
    {'token': '<redacted>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, token)
