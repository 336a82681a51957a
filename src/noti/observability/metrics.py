"""Metrics hook protocol and no-op default implementation.

noti emits counters at the points where work is done so a caller can
route them to StatsD, Prometheus or similar.  Without a configured
backend a :class:`NoopMetricsHook` swallows every data point.

Emitted metric names:

* ``noti.blocks_converted_total``   -- counter, tagged ``direction``
* ``noti.conversion_errors_total``  -- counter
* ``noti.rows_imported_total``      -- counter
* ``noti.import_duration_ms``       -- timing
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* is an optional ``str -> str`` dict that implementations map
    onto their own tagging mechanism.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: Any | None) -> MetricsHook:
    """Return *hook*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else NoopMetricsHook()
