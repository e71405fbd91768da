"""Topology Service.

Runs PCI device discovery and the NUMA distance table build against the
configured sysfs root, with logging, metrics and tracing around each run.
Nothing is cached: every call re-reads sysfs.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

from topology_info.adapters.outbound.local_sysfs import LocalSysfsReader
from topology_info.adapters.outbound.sysfs_node_source import SysfsNUMANodeSource
from topology_info.domain.entities import Distances, PCIDevices
from topology_info.domain.services import DistanceMatrixBuilder, PCIDiscoveryService
from topology_info.infrastructure.config import Config, get_config
from topology_info.infrastructure.logging import get_logger
from topology_info.infrastructure.metrics import MetricsRegistry, get_metrics
from topology_info.infrastructure.tracing import trace_span
from topology_info.ports.outbound import SysfsReader

logger = get_logger(__name__)


@dataclass(frozen=True)
class TopologySnapshot:
    """PCI devices and NUMA distances read in one pass."""

    sysfs_root: str
    pci_devices: PCIDevices
    distances: Distances


class TopologyService:
    """Read the hardware topology of a machine from sysfs."""

    def __init__(
        self,
        sysfs_root: str,
        pci_discovery: PCIDiscoveryService,
        distance_builder: DistanceMatrixBuilder,
        metrics: Optional[MetricsRegistry] = None,
    ) -> None:
        self._sysfs_root = sysfs_root
        self._pci_discovery = pci_discovery
        self._distance_builder = distance_builder
        self._metrics = metrics or get_metrics()

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        reader: Optional[SysfsReader] = None,
        metrics: Optional[MetricsRegistry] = None,
    ) -> TopologyService:
        """Build a service wired to the sysfs described by ``config``."""
        config = config or get_config()
        reader = reader or LocalSysfsReader()
        return cls(
            sysfs_root=str(config.sysfs.root),
            pci_discovery=PCIDiscoveryService(reader, strict_sriov=config.sysfs.strict_sriov),
            distance_builder=DistanceMatrixBuilder(
                SysfsNUMANodeSource(reader, node_subpath=config.sysfs.node_subpath)
            ),
            metrics=metrics,
        )

    @property
    def sysfs_root(self) -> str:
        return self._sysfs_root

    @contextmanager
    def _observe(self, component: str) -> Generator[None, None, None]:
        start = time.perf_counter()
        with trace_span(f"topology.{component}", {"sysfs.root": self._sysfs_root}):
            try:
                yield
            except Exception as e:
                self._metrics.discoveries_total.labels(component=component, status="error").inc()
                logger.error(
                    "topology_discovery_failed",
                    component=component,
                    sysfs_root=self._sysfs_root,
                    error=str(e),
                )
                raise
            finally:
                self._metrics.discovery_latency_seconds.labels(component=component).observe(
                    time.perf_counter() - start
                )
        self._metrics.discoveries_total.labels(component=component, status="success").inc()

    def pci_devices(self) -> PCIDevices:
        """Discover all PCI(-express) devices.

        Raises:
            OSError, ValueError: On any unreadable or malformed required attribute.
        """
        with self._observe("pci"):
            devices = self._pci_discovery.discover(self._sysfs_root)

        pfs = sum(1 for dev in devices if dev.is_phys_fn)
        vfs = sum(1 for dev in devices if dev.is_vfn)
        self._metrics.pci_devices.labels(role="pf").set(pfs)
        self._metrics.pci_devices.labels(role="vf").set(vfs)
        self._metrics.pci_devices.labels(role="other").set(len(devices) - pfs - vfs)
        logger.info(
            "pci_discovery_completed",
            sysfs_root=self._sysfs_root,
            devices=len(devices),
            physical_functions=pfs,
            virtual_functions=vfs,
        )
        return devices

    def distances(self) -> Distances:
        """Build the NUMA distance table.

        Raises:
            OSError, ValueError: On unreadable or malformed node data.
            DistanceCountMismatchError: On a vector of the wrong length.
        """
        with self._observe("distances"):
            distances = self._distance_builder.build(self._sysfs_root)

        self._metrics.numa_nodes_online.set(len(distances.online_nodes))
        logger.info(
            "numa_distances_completed",
            sysfs_root=self._sysfs_root,
            online_nodes=distances.online_nodes,
        )
        return distances

    def snapshot(self) -> TopologySnapshot:
        """Read PCI devices and NUMA distances together."""
        snapshot = TopologySnapshot(
            sysfs_root=self._sysfs_root,
            pci_devices=self.pci_devices(),
            distances=self.distances(),
        )
        logger.info("topology_snapshot_completed", sysfs_root=self._sysfs_root)
        return snapshot
