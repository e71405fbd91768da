"""Service entry point.

Serves the REST API on ``server.port`` and Prometheus metrics on
``server.metrics_port``, both read from the environment:

    TOPOLOGY_INFO_SYSFS__ROOT=/host/sys topology-info
"""

from __future__ import annotations

from typing import Optional

import uvicorn

from topology_info.adapters.inbound.rest_api import create_app
from topology_info.infrastructure.config import Config, get_config
from topology_info.infrastructure.container import Container
from topology_info.infrastructure.metrics import setup_metrics


def main(config: Optional[Config] = None) -> None:
    """Run the topology service until interrupted."""
    config = config or get_config()
    container = Container.create(config)

    setup_metrics(config.server.metrics_port, container.metrics)
    container.logger.info(
        "topology_info_serving",
        host=config.server.host,
        port=config.server.port,
        metrics_port=config.server.metrics_port,
    )

    # Logging is already configured; keep uvicorn from installing its own
    uvicorn.run(
        create_app(container.topology),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
