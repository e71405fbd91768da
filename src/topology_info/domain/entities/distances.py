"""NUMA distance table entities.

The kernel exposes one ``distance`` file per online NUMA node, holding
the relative cost of reaching every online node from that node. Values
are unitless; by ACPI SLIT convention the local distance is 10.

The table is stored as read. It is never assumed symmetric and never
re-validated after construction.

References:
    - ACPI specification, System Locality Information Table (SLIT)
    - Linux kernel Documentation/ABI/stable/sysfs-devices-node
"""

from __future__ import annotations

from dataclasses import dataclass, field

from topology_info.domain.value_objects import parse_decimal


class TopologyError(Exception):
    """Base class for topology validation errors."""


class DistanceCountMismatchError(TopologyError, ValueError):
    """A distance vector does not have one entry per online node."""

    def __init__(self, found: int, expected: int, node_id: int | None = None) -> None:
        self.found = found
        self.expected = expected
        self.node_id = node_id
        message = f"found {found} distance values, expected {expected}"
        if node_id is not None:
            message = f"NUMA node {node_id}: {message}"
        super().__init__(message)


class UnknownNUMANodeError(TopologyError, LookupError):
    """A NUMA node ID is not among the online nodes."""

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"unknown NUMA node: {node_id}")


@dataclass(frozen=True)
class NodeDistances:
    """Distances from one NUMA node to every online node."""

    values: tuple[int, ...]

    @classmethod
    def from_string(
        cls,
        num_nodes: int,
        data: str,
        node_id: int | None = None,
    ) -> NodeDistances:
        """Parse the content of a node ``distance`` file.

        Args:
            num_nodes: Number of online NUMA nodes.
            data: Whitespace-separated distance values.
            node_id: Node the data belongs to, used in error messages.

        Raises:
            DistanceCountMismatchError: If the value count is not num_nodes.
            ValueError: If a value is not an integer.
        """
        dists = data.split()
        if len(dists) != num_nodes:
            raise DistanceCountMismatchError(len(dists), num_nodes, node_id)
        return cls(values=tuple(parse_decimal(dist) for dist in dists))

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class Distances:
    """Distance table between the online NUMA nodes of a machine.

    Attributes:
        online_nodes: Node IDs in enumeration order.
        by_node: Distance vector of each online node, same order.
    """

    online_nodes: list[int] = field(default_factory=list)
    by_node: list[NodeDistances] = field(default_factory=list)
    _positions: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._positions = {node_id: pos for pos, node_id in enumerate(self.online_nodes)}

    def _position(self, node_id: int) -> int:
        try:
            return self._positions[node_id]
        except KeyError:
            raise UnknownNUMANodeError(node_id) from None

    def is_online(self, node_id: int) -> bool:
        return node_id in self._positions

    def between_nodes(self, from_node: int, to_node: int) -> int:
        """Return the distance from ``from_node`` to ``to_node``.

        Raises:
            UnknownNUMANodeError: If either node is not online.
        """
        src = self._position(from_node)
        dst = self._position(to_node)
        return self.by_node[src].values[dst]

    def as_matrix(self) -> dict[int, dict[int, int]]:
        """Return the table as ``{from_node: {to_node: distance}}``."""
        return {
            from_node: dict(zip(self.online_nodes, self.by_node[pos].values))
            for pos, from_node in enumerate(self.online_nodes)
        }
