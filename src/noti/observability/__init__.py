"""Observability: structured logging and metrics hooks for noti."""

from __future__ import annotations

from .logger import StructuredFormatter, get_logger, set_debug_mode
from .metrics import MetricsHook, NoopMetricsHook, resolve_metrics

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "get_logger",
    "resolve_metrics",
    "set_debug_mode",
]
