"""PCI(-express) device entities.

A PCIDeviceInfo is a snapshot of the sysfs attributes of one device.
SRIOV relationships are expressed by address: a virtual function carries
the address of its physical function in ``parent_fn``, and callers resolve
it with PCIDevices.find_by_address. Devices never hold references to each
other.

References:
    - Linux kernel Documentation/PCI/pci-iov-howto.rst
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from topology_info.domain.value_objects import (
    NUMA_NODE_UNKNOWN,
    PCIAddress,
    split_pci_address,
)


@dataclass(frozen=True, slots=True)
class PCIDeviceInfo:
    """Information about a single PCI(-express) device.

    Attributes:
        address: Full PCI address (bus_id:device_id) of the device.
        dev_class: PCI device class, with the programming interface byte stripped.
        vendor: PCI vendor identifier.
        device: PCI device identifier.
        numa_node: NUMA node the device is attached to, -1 if unknown.
        sysfs_path: Directory on sysfs this device was read from.
        is_phys_fn: True if this device is a SRIOV physical function.
        num_vfs: Number of configured virtual functions, set for PFs only.
        is_vfn: True if this device is a SRIOV virtual function.
        parent_fn: Address of the parent physical function, set for VFs only.
    """

    address: PCIAddress
    dev_class: int
    vendor: int
    device: int
    numa_node: int = NUMA_NODE_UNKNOWN
    sysfs_path: str = ""
    is_phys_fn: bool = False
    num_vfs: Optional[int] = None
    is_vfn: bool = False
    parent_fn: Optional[PCIAddress] = None

    @property
    def bus_address(self) -> str:
        """PCI bus identifier part of the address."""
        return split_pci_address(self.address)[0]

    @property
    def dev_address(self) -> str:
        """Device address on the PCI bus."""
        return split_pci_address(self.address)[1]

    @property
    def numa_node_known(self) -> bool:
        return self.numa_node != NUMA_NODE_UNKNOWN

    def __str__(self) -> str:
        return (
            f"pci@{self.address} {self.vendor:x}:{self.device:x} "
            f"numa_node={self.numa_node} "
            f"physfn={str(self.is_phys_fn).lower()} vfn={str(self.is_vfn).lower()}"
        )


@dataclass
class PCIDevices:
    """All the PCI(-express) devices found in the system.

    Items keep the order in which the device directories were listed.
    """

    items: list[PCIDeviceInfo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[PCIDeviceInfo]:
        return iter(self.items)

    def find_by_address(self, address: str) -> Optional[PCIDeviceInfo]:
        """Find a device by its full PCI address.

        Returns:
            The first device with a matching address, or None.
        """
        for dev_info in self.items:
            if dev_info.address == address:
                return dev_info
        return None

    def per_numa(self) -> dict[int, list[PCIDeviceInfo]]:
        """Group devices by the NUMA node they are attached to.

        Devices with an unknown node are grouped under -1. Each group keeps
        the discovery order.
        """
        numa_node_pci_devs: dict[int, list[PCIDeviceInfo]] = {}
        for dev_info in self.items:
            numa_node_pci_devs.setdefault(dev_info.numa_node, []).append(dev_info)
        return numa_node_pci_devs

    def physical_functions(self) -> list[PCIDeviceInfo]:
        """All SRIOV physical functions, in discovery order."""
        return [dev_info for dev_info in self.items if dev_info.is_phys_fn]

    def virtual_functions_of(self, address: str) -> list[PCIDeviceInfo]:
        """All SRIOV virtual functions whose parent is ``address``."""
        return [
            dev_info
            for dev_info in self.items
            if dev_info.is_vfn and dev_info.parent_fn == address
        ]
