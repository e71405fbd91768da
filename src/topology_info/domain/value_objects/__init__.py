"""Value objects for the topology domain.

Exports:
    - PCIAddress: Type-safe PCI device address
    - NUMANodeId: Type-safe NUMA node identifier
    - NUMA_NODE_UNKNOWN: Sentinel for devices without a reported node
    - PATH_BUS_PCI_DEVICES, PATH_DEVICES_SYSTEM_NODE: sysfs subpaths
    - DEV_CLASS_NETWORK: Device class of network controllers
    - split_pci_address: Split an address into bus and device parts
    - parse_decimal, parse_hex: Strict integer parsing of sysfs values
"""

from topology_info.domain.value_objects.identifiers import (
    DEV_CLASS_NETWORK,
    NUMA_NODE_UNKNOWN,
    NUMANodeId,
    PATH_BUS_PCI_DEVICES,
    PATH_DEVICES_SYSTEM_NODE,
    PCIAddress,
    parse_decimal,
    parse_hex,
    split_pci_address,
)

__all__ = [
    "PCIAddress",
    "NUMANodeId",
    "NUMA_NODE_UNKNOWN",
    "PATH_BUS_PCI_DEVICES",
    "PATH_DEVICES_SYSTEM_NODE",
    "DEV_CLASS_NETWORK",
    "split_pci_address",
    "parse_decimal",
    "parse_hex",
]
