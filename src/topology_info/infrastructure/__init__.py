"""Infrastructure layer - cross-cutting concerns."""

from topology_info.infrastructure.config import Config, get_config
from topology_info.infrastructure.logging import setup_logging, get_logger
from topology_info.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from topology_info.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
