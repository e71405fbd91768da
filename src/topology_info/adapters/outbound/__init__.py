"""Outbound adapters - implementations of outbound port interfaces.

Provides the local filesystem reader, the sysfs NUMA node source, and the
synthetic sysfs tree used for testing without real hardware.
"""

from topology_info.adapters.outbound.fake_sysfs import FakeSysfs, Tree
from topology_info.adapters.outbound.local_sysfs import LocalSysfsReader
from topology_info.adapters.outbound.sysfs_node_source import (
    SysfsNUMANodeSource,
    parse_node_list,
)

__all__ = [
    # Filesystem
    "LocalSysfsReader",
    # NUMA nodes
    "SysfsNUMANodeSource",
    "parse_node_list",
    # Synthetic sysfs
    "FakeSysfs",
    "Tree",
]
