"""REST API adapter for topology discovery.

This module provides a read-only FastAPI view over the topology service.
Every request re-reads sysfs.

Endpoints:
    GET /health - Health check
    GET /v1/pci/devices - All PCI devices, optionally filtered by NUMA node
    GET /v1/pci/devices/{address} - A single PCI device
    GET /v1/pci/numa - PCI devices grouped by NUMA node
    GET /v1/numa/distances - Full NUMA distance table
    GET /v1/numa/distances/{from_node}/{to_node} - Distance between two nodes

Usage:
    from topology_info.adapters.inbound.rest_api import create_app
    from topology_info.infrastructure.container import get_container

    app = create_app(get_container().topology)
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 8080

References:
    - FastAPI documentation: https://fastapi.tiangolo.com/
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from topology_info import __version__
from topology_info.domain.entities import PCIDeviceInfo, UnknownNUMANodeError
from topology_info.ports.inbound import TopologyAPI


class PCIDeviceResponse(BaseModel):
    """Response model for a PCI device."""

    address: str = Field(..., description="Full PCI address")
    bus_address: str = Field(..., description="PCI bus part of the address")
    dev_address: str = Field(..., description="Device part of the address")
    dev_class: int = Field(..., description="PCI device class")
    vendor: int = Field(..., description="PCI vendor identifier")
    device: int = Field(..., description="PCI device identifier")
    numa_node: int = Field(..., description="NUMA node, -1 if unknown")
    sysfs_path: str = Field(..., description="Directory the device was read from")
    is_phys_fn: bool = Field(False, description="SRIOV physical function")
    num_vfs: Optional[int] = Field(None, description="Configured VFs, PFs only")
    is_vfn: bool = Field(False, description="SRIOV virtual function")
    parent_fn: Optional[str] = Field(None, description="Parent PF address, VFs only")


class PCINUMAGroupResponse(BaseModel):
    """Response model for devices attached to one NUMA node."""

    numa_node: int = Field(..., description="NUMA node, -1 if unknown")
    devices: list[PCIDeviceResponse] = Field(default_factory=list)


class DistancesResponse(BaseModel):
    """Response model for the NUMA distance table."""

    online_nodes: list[int] = Field(..., description="Online NUMA nodes")
    distances: dict[int, dict[int, int]] = Field(
        ..., description="Distance from each node to every node"
    )


class DistanceResponse(BaseModel):
    """Response model for a single node pair."""

    from_node: int
    to_node: int
    distance: int


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    sysfs_root: str = Field(..., description="sysfs root being read")


def _device_to_response(dev: PCIDeviceInfo) -> PCIDeviceResponse:
    return PCIDeviceResponse(
        address=dev.address,
        bus_address=dev.bus_address,
        dev_address=dev.dev_address,
        dev_class=dev.dev_class,
        vendor=dev.vendor,
        device=dev.device,
        numa_node=dev.numa_node,
        sysfs_path=dev.sysfs_path,
        is_phys_fn=dev.is_phys_fn,
        num_vfs=dev.num_vfs,
        is_vfn=dev.is_vfn,
        parent_fn=dev.parent_fn,
    )


def create_app(topology: TopologyAPI) -> FastAPI:
    """Create a FastAPI application for topology discovery.

    Args:
        topology: The topology service to expose.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="Topology Info API",
        description="Read-only view of PCI devices and NUMA distances",
        version=__version__,
    )

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": f"sysfs read failed: {exc}"})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": f"malformed sysfs data: {exc}"})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            sysfs_root=topology.sysfs_root,
        )

    @app.get("/v1/pci/devices", response_model=list[PCIDeviceResponse], tags=["PCI"])
    async def list_pci_devices(numa_node: Optional[int] = None) -> list[PCIDeviceResponse]:
        """List PCI devices in discovery order."""
        devices = topology.pci_devices()
        return [
            _device_to_response(dev)
            for dev in devices
            if numa_node is None or dev.numa_node == numa_node
        ]

    @app.get("/v1/pci/devices/{address}", response_model=PCIDeviceResponse, tags=["PCI"])
    async def get_pci_device(address: str) -> PCIDeviceResponse:
        """Get a PCI device by address."""
        dev = topology.pci_devices().find_by_address(address)
        if dev is None:
            raise HTTPException(status_code=404, detail=f"PCI device not found: {address}")
        return _device_to_response(dev)

    @app.get("/v1/pci/numa", response_model=list[PCINUMAGroupResponse], tags=["PCI"])
    async def list_pci_per_numa() -> list[PCINUMAGroupResponse]:
        """List PCI devices grouped by NUMA node."""
        groups = topology.pci_devices().per_numa()
        return [
            PCINUMAGroupResponse(
                numa_node=node,
                devices=[_device_to_response(dev) for dev in devs],
            )
            for node, devs in groups.items()
        ]

    @app.get("/v1/numa/distances", response_model=DistancesResponse, tags=["NUMA"])
    async def get_distances() -> DistancesResponse:
        """Get the full NUMA distance table."""
        distances = topology.distances()
        return DistancesResponse(
            online_nodes=distances.online_nodes,
            distances=distances.as_matrix(),
        )

    @app.get(
        "/v1/numa/distances/{from_node}/{to_node}",
        response_model=DistanceResponse,
        tags=["NUMA"],
    )
    async def get_distance(from_node: int, to_node: int) -> DistanceResponse:
        """Get the distance between two NUMA nodes."""
        distances = topology.distances()
        try:
            distance = distances.between_nodes(from_node, to_node)
        except UnknownNUMANodeError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return DistanceResponse(from_node=from_node, to_node=to_node, distance=distance)

    return app
