"""Prometheus metrics for topology discovery."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

from topology_info import __version__


class MetricsRegistry:
    """Registry of all topology discovery metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        self.discoveries_total = Counter(
            "topology_discoveries_total",
            "Total number of topology discovery runs",
            ["component", "status"],  # component: pci, distances; status: success, error
            registry=self._registry,
        )

        self.discovery_latency_seconds = Histogram(
            "topology_discovery_latency_seconds",
            "Topology discovery latency in seconds",
            ["component"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.pci_devices = Gauge(
            "topology_pci_devices",
            "PCI devices found by the last discovery",
            ["role"],  # pf, vf, other
            registry=self._registry,
        )

        self.numa_nodes_online = Gauge(
            "topology_numa_nodes_online",
            "Online NUMA nodes found by the last distance table build",
            registry=self._registry,
        )

        self.info = Info(
            "topology_info",
            "Topology discovery information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 9108, metrics: MetricsRegistry | None = None) -> MetricsRegistry:
    """
    Expose a metrics registry over HTTP.

    Args:
        port: Port for the metrics HTTP server
        metrics: Registry to expose, defaults to the global one

    Returns:
        The exposed metrics registry
    """
    metrics = metrics or get_metrics()
    metrics.info.info({"version": __version__})

    start_http_server(port, registry=metrics.registry)

    return metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
