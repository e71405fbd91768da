"""Sysfs implementation of the NUMANodeSource port.

Online nodes are listed in ``<root>/devices/system/node/online`` using the
kernel's list format (e.g., "0-1,3"), and per-node attributes live in
``<root>/devices/system/node/node<N>/``.
"""

from __future__ import annotations

import logging
import os

from topology_info.adapters.outbound.local_sysfs import LocalSysfsReader
from topology_info.domain.value_objects import PATH_DEVICES_SYSTEM_NODE, parse_decimal
from topology_info.ports.outbound import SysfsReader


logger = logging.getLogger(__name__)


def parse_node_list(data: str) -> list[int]:
    """Parse a kernel node list such as '0-3,8,10-11'.

    Returns:
        Node IDs in ascending order, without duplicates.

    Raises:
        ValueError: If a range or an ID is malformed.
    """
    nodes: set[int] = set()
    data = data.strip()
    if not data:
        return []
    for part in data.split(","):
        part = part.strip()
        if "-" in part:
            start_str, _, end_str = part.partition("-")
            start, end = parse_decimal(start_str), parse_decimal(end_str)
            if start > end:
                raise ValueError(f"Malformed node range: {part!r}")
            nodes.update(range(start, end + 1))
        else:
            nodes.add(parse_decimal(part))
    return sorted(nodes)


class SysfsNUMANodeSource:
    """NUMANodeSource reading the Linux sysfs node layout.

    Attributes:
        node_subpath: Path of the node directory relative to the sysfs root.
    """

    def __init__(
        self,
        reader: SysfsReader | None = None,
        node_subpath: str = PATH_DEVICES_SYSTEM_NODE,
    ) -> None:
        self._reader = reader or LocalSysfsReader()
        self.node_subpath = node_subpath

    def node_path(self, sysfs_root: str, node_id: int) -> str:
        """Directory of a NUMA node."""
        return os.path.join(sysfs_root, self.node_subpath, f"node{node_id}")

    def online_nodes(self, sysfs_root: str) -> list[int]:
        online_path = os.path.join(sysfs_root, self.node_subpath, "online")
        nodes = parse_node_list(self._reader.read_text(online_path))
        logger.debug(f"Online NUMA nodes under {sysfs_root}: {nodes}")
        return nodes

    def read_node_file(self, sysfs_root: str, node_id: int, name: str) -> str:
        return self._reader.read_text(os.path.join(self.node_path(sysfs_root, node_id), name))
