"""NUMA Node Source port.

The distance builder does not know how online nodes are enumerated nor
where per-node pseudo-files live; it asks this collaborator.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class NUMANodeSource(Protocol):
    """Protocol for enumerating NUMA nodes and reading their attributes."""

    @abstractmethod
    def online_nodes(self, sysfs_root: str) -> list[int]:
        """Return the online NUMA node IDs, ascending and unique.

        Raises:
            OSError: If the node list cannot be read.
            ValueError: If the node list is malformed.
        """
        ...

    @abstractmethod
    def read_node_file(self, sysfs_root: str, node_id: int, name: str) -> str:
        """Read a pseudo-file of a NUMA node, stripped of surrounding whitespace.

        Args:
            sysfs_root: Root of the sysfs-like tree.
            node_id: NUMA node whose attribute to read.
            name: Attribute file name (e.g., "distance").

        Raises:
            OSError: If the file is missing or unreadable.
        """
        ...
