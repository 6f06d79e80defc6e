"""Logging, metrics and tracing helpers for the rhyme analysis.

Log records go through :mod:`logging` with an adapter that renders context
as JSON after the message. Metrics are plain Prometheus collectors on the
default registry. Spans come from the OpenTelemetry API and stay
non-recording until the host application installs an SDK.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Type, TypeVar

from opentelemetry import trace
from prometheus_client import REGISTRY, Counter, Histogram
from prometheus_client.metrics import MetricWrapperBase

TRACER_NAME = "rhyme_scheme"

_Metric = TypeVar("_Metric", bound=MetricWrapperBase)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter carrying bound context.

    ``logger.info("msg", context={...})`` appends the bound context merged
    with the call's context, e.g. ``msg | {"component": "loader", "n": 3}``.
    """

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        return StructuredLoggerAdapter(self.logger, {**self.extra, **context})

    def process(self, msg: str, kwargs: Dict[str, Any]):
        fields = dict(self.extra)
        fields.update(kwargs.pop("context", None) or {})
        if not fields:
            return msg, kwargs
        return f"{msg} | {json.dumps(fields, sort_keys=True, default=str)}", kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a :class:`StructuredLoggerAdapter` for ``name``."""

    return StructuredLoggerAdapter(logging.getLogger(name), context)


def _register(
    metric_cls: Type[_Metric],
    name: str,
    documentation: str,
    label_names: Iterable[str],
) -> _Metric:
    try:
        return metric_cls(name, documentation, labelnames=tuple(label_names))
    except ValueError:
        # Already registered, e.g. when a test reloads the module.
        existing = REGISTRY._names_to_collectors.get(name)  # type: ignore[attr-defined]
        if not isinstance(existing, metric_cls):
            raise
        return existing


def create_counter(name: str, documentation: str, label_names: Iterable[str] = ()) -> Counter:
    return _register(Counter, name, documentation, label_names)


def create_histogram(
    name: str, documentation: str, label_names: Iterable[str] = ()
) -> Histogram:
    return _register(Histogram, name, documentation, label_names)


@contextmanager
def start_span(name: str, attributes: Optional[Mapping[str, Any]] = None) -> Iterator[Any]:
    """Run the block inside an OpenTelemetry span named ``name``."""

    with trace.get_tracer(TRACER_NAME).start_as_current_span(name) as span:
        add_span_attributes(span, attributes or {})
        yield span


def add_span_attributes(span: Any, attributes: Mapping[str, Any]) -> None:
    for key, value in attributes.items():
        if isinstance(key, str) and value is not None:
            span.set_attribute(key, value)


def record_exception(span: Any, error: BaseException) -> None:
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "StructuredLoggerAdapter",
    "TRACER_NAME",
    "add_span_attributes",
    "create_counter",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
