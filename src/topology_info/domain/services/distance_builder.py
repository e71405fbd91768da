"""NUMA distance table construction from sysfs.

For each online node the builder reads the node's ``distance`` file, a
single line with one value per online node, and assembles the vectors in
node enumeration order. A vector with the wrong number of values or a
non-integer value aborts construction.
"""

from __future__ import annotations

import logging

from topology_info.domain.entities import Distances, NodeDistances
from topology_info.ports.outbound import NUMANodeSource

logger = logging.getLogger(__name__)

DISTANCE_FILE = "distance"


class DistanceMatrixBuilder:
    """Build the NUMA distance table of a machine."""

    def __init__(self, node_source: NUMANodeSource) -> None:
        self._node_source = node_source

    def build(self, sysfs_root: str) -> Distances:
        """Read and validate the distance vectors of all online nodes.

        Args:
            sysfs_root: Root of the sysfs-like tree (e.g., "/sys").

        Returns:
            The distance table.

        Raises:
            OSError: If the node list or a distance file cannot be read.
            DistanceCountMismatchError: If a vector does not have one value
                per online node.
            ValueError: If a value is not an integer.
        """
        nodes = self._node_source.online_nodes(sysfs_root)

        by_node: list[NodeDistances] = []
        for node_id in nodes:
            dist_data = self._node_source.read_node_file(sysfs_root, node_id, DISTANCE_FILE)
            by_node.append(NodeDistances.from_string(len(nodes), dist_data, node_id))

        logger.debug(f"Built {len(nodes)}x{len(nodes)} NUMA distance table")
        return Distances(online_nodes=list(nodes), by_node=by_node)
