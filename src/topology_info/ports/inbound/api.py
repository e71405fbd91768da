"""Inbound port interfaces for topology discovery.

Inbound ports define what the system offers to external clients.
Adapters implement these with REST or other transports.
"""

from __future__ import annotations

from typing import Protocol

from topology_info.application.topology_service import TopologySnapshot
from topology_info.domain.entities import Distances, PCIDevices


class TopologyAPI(Protocol):
    """Main API offered by topology discovery."""

    @property
    def sysfs_root(self) -> str:
        """Root of the sysfs-like tree being read."""
        ...

    def pci_devices(self) -> PCIDevices:
        """Discover all PCI(-express) devices.

        Returns:
            Devices in directory listing order.
        """
        ...

    def distances(self) -> Distances:
        """Build the NUMA distance table.

        Returns:
            Distances between all online NUMA nodes.
        """
        ...

    def snapshot(self) -> TopologySnapshot:
        """Read PCI devices and NUMA distances together."""
        ...
