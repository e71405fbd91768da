"""OpenTelemetry tracing for topology reads.

Each discovery run is one span (``topology.pci``, ``topology.distances``)
carrying the sysfs root it read. Where spans go is decided by the
observability config.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from topology_info import __version__
from topology_info.infrastructure.config import ObservabilityConfig

TRACER_NAME = "topology_info"

_tracer: trace.Tracer | None = None


def span_exporters(config: ObservabilityConfig) -> list[SpanExporter]:
    """Exporters selected by ``config``; empty when tracing goes nowhere."""
    exporters: list[SpanExporter] = []
    if config.otel_endpoint:
        exporters.append(OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True))
    if config.trace_console:
        exporters.append(ConsoleSpanExporter(service_name=config.otel_service_name))
    return exporters


def setup_tracing(
    config: Optional[ObservabilityConfig] = None,
    exporter: Optional[SpanExporter] = None,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Configured exporters are batched. ``exporter``, if given, is fed
    synchronously so its spans are visible as soon as a run ends.

    Args:
        config: Service name and exporters, defaults to ObservabilityConfig()
        exporter: Additional exporter

    Returns:
        The tracer used by trace_span()
    """
    global _tracer
    config = config or ObservabilityConfig()

    resource = Resource.create(
        {
            "service.name": config.otel_service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)
    for configured in span_exporters(config):
        provider.add_span_processor(BatchSpanProcessor(configured))
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    # The global provider can only be set once per process
    trace.set_tracer_provider(provider)
    _tracer = provider.get_tracer(TRACER_NAME, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the tracer from setup_tracing(), or the global one before setup."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the block inside a span; an escaping exception marks it as failed."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span
