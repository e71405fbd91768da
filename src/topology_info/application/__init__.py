"""Application layer - orchestrates topology discovery."""

from topology_info.application.discovery import build_distances, discover_pci_devices
from topology_info.application.topology_service import TopologyService, TopologySnapshot

__all__ = [
    "TopologyService",
    "TopologySnapshot",
    "discover_pci_devices",
    "build_distances",
]
