"""Error hierarchy for noti.

Every public error class inherits from :class:`NotiError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are a :class:`str` enum so they serialise naturally to JSON
and compare with plain ``==``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error noti can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    UNSUPPORTED_PROPERTY = "UNSUPPORTED_PROPERTY"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    IMPORT_ERROR = "IMPORT_ERROR"
    MAPPING_ERROR = "MAPPING_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotiError(Exception):
    """Base exception for all noti errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A description of what went wrong.
    context:
        Structured diagnostic detail.  Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class NotiValidationError(NotiError):
    """An argument was well-typed but not acceptable (e.g. unknown export
    format).

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------

class NotiConversionError(NotiError):
    """Base class for errors while shaping Markdown or Notion payloads.

    Raised by element builders; :class:`MarkdownToBlocks` records these
    per element instead of letting them escape.

    Context keys: ``token_type``.
    """

    def __init__(
        self,
        code: str = ErrorCode.CONVERSION_ERROR,
        message: str = "Conversion error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class NotiUnsupportedPropertyError(NotiConversionError):
    """A property type has no payload mapping.

    Context keys: ``property_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_PROPERTY,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Reference errors
# ---------------------------------------------------------------------------

class NotiInvalidReferenceError(NotiError):
    """A page or database reference (alias, URL or ID) could not be
    resolved to a Notion ID.

    Context keys: ``reference``, ``resolved``, ``kind``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REFERENCE,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Import errors
# ---------------------------------------------------------------------------

class NotiImportError(NotiError):
    """The import pipeline cannot proceed (e.g. no schema configured).

    Context keys: ``database_id``, ``phase``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotiMappingError(NotiImportError):
    """A field mapping references a column that does not exist or has no
    target.

    Context keys: ``field``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        NotiError.__init__(
            self,
            code=ErrorCode.MAPPING_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
