"""Dependency injection container for topology discovery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from topology_info.application import TopologyService
from topology_info.infrastructure.config import Config, get_config
from topology_info.infrastructure.logging import get_logger, setup_logging
from topology_info.infrastructure.metrics import MetricsRegistry, get_metrics
from topology_info.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Dependency injection container for topology discovery components."""

    config: Config
    logger: structlog.stdlib.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    topology: TopologyService

    _instance: ClassVar["Container | None"] = None

    @classmethod
    def create(cls, config: Config | None = None) -> "Container":
        """Create and initialize the container with all dependencies."""
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        setup_logging(config.observability)
        logger = get_logger("topology_info")
        tracer = setup_tracing(config.observability)
        metrics = get_metrics()
        topology = TopologyService.from_config(config, metrics=metrics)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            topology=topology,
        )

        logger.info(
            "topology_info_container_initialized",
            sysfs_root=str(config.sysfs.root),
        )

        return cls._instance

    @classmethod
    def get(cls) -> "Container":
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None


def get_container() -> Container:
    """Get the dependency injection container."""
    return Container.get()
