"""Utility helpers shared across the :mod:`rhyme_scheme` package."""

from __future__ import annotations

from .logging_config import configure_logging
from .telemetry import PhaseTelemetry, TelemetryLogger
from .observability import (
    StructuredLoggerAdapter,
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)

__all__ = [
    "configure_logging",
    "PhaseTelemetry",
    "TelemetryLogger",
    "StructuredLoggerAdapter",
    "add_span_attributes",
    "create_counter",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
