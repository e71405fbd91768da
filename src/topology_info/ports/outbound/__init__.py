"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the sysfs-like filesystem and the
NUMA node enumeration the discovery services depend on.
"""

from topology_info.ports.outbound.numa_node_source import NUMANodeSource
from topology_info.ports.outbound.sysfs_reader import PathLike, SysfsReader

__all__ = [
    "NUMANodeSource",
    "SysfsReader",
    "PathLike",
]
