"""Inbound ports - API offered to external clients."""

from topology_info.ports.inbound.api import TopologyAPI

__all__ = ["TopologyAPI"]
