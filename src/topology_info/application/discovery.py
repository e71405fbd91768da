"""One-call topology reads wired to the local filesystem.

These wrap the domain services with the sysfs adapters for callers that
need a single read and no observability, such as scripts and tests.
"""

from __future__ import annotations

from typing import Optional

from topology_info.adapters.outbound.local_sysfs import LocalSysfsReader
from topology_info.adapters.outbound.sysfs_node_source import SysfsNUMANodeSource
from topology_info.domain.entities import Distances, PCIDevices
from topology_info.domain.services import DistanceMatrixBuilder, PCIDiscoveryService
from topology_info.ports.outbound import NUMANodeSource, SysfsReader


def discover_pci_devices(
    sysfs_root: str,
    reader: Optional[SysfsReader] = None,
    strict_sriov: bool = False,
) -> PCIDevices:
    """Extract the PCI(-express) devices from a sysfs-like tree.

    Args:
        sysfs_root: Root of the sysfs-like tree (e.g., "/sys").
        reader: Filesystem access, defaults to the local filesystem.
        strict_sriov: Fail on a non-integer ``sriov_numvfs``.
    """
    service = PCIDiscoveryService(reader or LocalSysfsReader(), strict_sriov=strict_sriov)
    return service.discover(sysfs_root)


def build_distances(
    sysfs_root: str,
    node_source: Optional[NUMANodeSource] = None,
) -> Distances:
    """Build the NUMA distance table of a sysfs-like tree.

    ``node_source`` defaults to the standard ``devices/system/node`` layout
    on the local filesystem.
    """
    return DistanceMatrixBuilder(node_source or SysfsNUMANodeSource()).build(sysfs_root)
