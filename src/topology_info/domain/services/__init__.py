"""Domain services for topology discovery.

Exports:
    - PCIDiscoveryService: PCI device discovery
    - DistanceMatrixBuilder: NUMA distance table builder
"""

from topology_info.domain.services.distance_builder import DistanceMatrixBuilder
from topology_info.domain.services.pci_discovery import PCIDiscoveryService

__all__ = [
    "PCIDiscoveryService",
    "DistanceMatrixBuilder",
]
