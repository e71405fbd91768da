"""Domain entities for topology discovery.

Exports:
    PCI devices:
        - PCIDeviceInfo: Attributes of a single PCI(-express) device
        - PCIDevices: Ordered collection with lookup and NUMA grouping

    NUMA distances:
        - Distances: Validated node x node distance table
        - NodeDistances: Distance vector of a single node
        - TopologyError: Base class for validation errors
        - DistanceCountMismatchError: Wrong number of distance values
        - UnknownNUMANodeError: Query against a node that is not online
"""

from topology_info.domain.entities.distances import (
    DistanceCountMismatchError,
    Distances,
    NodeDistances,
    TopologyError,
    UnknownNUMANodeError,
)
from topology_info.domain.entities.pci_device import PCIDeviceInfo, PCIDevices

__all__ = [
    # PCI devices
    "PCIDeviceInfo",
    "PCIDevices",
    # NUMA distances
    "Distances",
    "NodeDistances",
    "TopologyError",
    "DistanceCountMismatchError",
    "UnknownNUMANodeError",
]
