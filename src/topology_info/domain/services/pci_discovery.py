"""PCI(-express) device discovery from sysfs.

Every directory under ``<sysfs>/bus/pci/devices/`` is one device, named by
its address. For each device this service reads:

    sriov_numvfs  optional, presence marks a SRIOV physical function
    physfn        optional symlink, presence marks a SRIOV virtual function;
                  the last segment of its target is the parent's address
    numa_node     required, decimal, -1 when firmware reports no node
    class         required, hex; the low byte (prog-if) is discarded
    vendor        required, hex
    device        required, hex

Discovery is fail-fast: any error reading or parsing a required attribute
aborts the whole scan and the underlying OSError/ValueError propagates.
A partial topology is never returned.

References:
    - Linux kernel Documentation/ABI/testing/sysfs-bus-pci
    - pciutils lib/sysfs.c (class encoding)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from topology_info.domain.entities import PCIDeviceInfo, PCIDevices
from topology_info.domain.value_objects import (
    PATH_BUS_PCI_DEVICES,
    PCIAddress,
    parse_decimal,
    parse_hex,
)
from topology_info.ports.outbound import SysfsReader

logger = logging.getLogger(__name__)


class PCIDiscoveryService:
    """Discover PCI(-express) devices and their SRIOV relationships.

    Each call to discover() re-reads the whole tree.
    """

    def __init__(
        self,
        reader: SysfsReader,
        strict_sriov: bool = False,
    ) -> None:
        """Initialize the discovery service.

        Args:
            reader: Access to the sysfs-like tree.
            strict_sriov: Raise on a non-integer ``sriov_numvfs`` instead
                of counting zero virtual functions.
        """
        self._reader = reader
        self._strict_sriov = strict_sriov

    def discover(self, sysfs_root: str) -> PCIDevices:
        """Extract the PCI(-express) devices from a sysfs-like tree.

        Args:
            sysfs_root: Root of the sysfs-like tree (e.g., "/sys").

        Returns:
            All devices, in directory listing order.

        Raises:
            OSError: If the device directory or a required attribute
                cannot be read.
            ValueError: If a required attribute is not a number.
        """
        sysfs_path = os.path.join(sysfs_root, PATH_BUS_PCI_DEVICES)

        all_pci_devs = [
            self._read_device(os.path.join(sysfs_path, entry), PCIAddress(entry))
            for entry in self._reader.list_dir(sysfs_path)
        ]
        logger.debug(f"Discovered {len(all_pci_devs)} PCI devices under {sysfs_path}")
        return PCIDevices(items=all_pci_devs)

    def _read_device(self, dev_path: str, address: PCIAddress) -> PCIDeviceInfo:
        is_phys_fn = False
        num_vfs: Optional[int] = None
        numvfs_path = os.path.join(dev_path, "sriov_numvfs")
        if self._reader.exists(numvfs_path):
            is_phys_fn = True
            num_vfs = self._read_num_vfs(numvfs_path, address)

        is_vfn = False
        parent_fn: Optional[PCIAddress] = None
        physfn_path = os.path.join(dev_path, "physfn")
        if self._reader.lexists(physfn_path):
            is_vfn = True
            if self._reader.is_symlink(physfn_path):
                dest = self._reader.read_link(physfn_path)
                parent_fn = PCIAddress(os.path.basename(dest.rstrip("/")))
            else:
                logger.warning(f"{address}: physfn is not a symlink, parent function unknown")

        # numa_node may be -1: bad, and likely a firmware bug, but valid.
        numa_node = self._read_int(os.path.join(dev_path, "numa_node"))
        dev_class = self._read_hex_int(os.path.join(dev_path, "class"))
        vendor = self._read_hex_int(os.path.join(dev_path, "vendor"))
        device = self._read_hex_int(os.path.join(dev_path, "device"))

        return PCIDeviceInfo(
            address=address,
            dev_class=dev_class >> 8,  # pciutils lib/sysfs.c
            vendor=vendor,
            device=device,
            numa_node=numa_node,
            sysfs_path=dev_path,
            is_phys_fn=is_phys_fn,
            num_vfs=num_vfs,
            is_vfn=is_vfn,
            parent_fn=parent_fn,
        )

    def _read_num_vfs(self, path: str, address: PCIAddress) -> int:
        content = self._reader.read_text(path)
        try:
            return parse_decimal(content)
        except ValueError:
            if self._strict_sriov:
                raise
            logger.warning(f"{address}: unparsable sriov_numvfs {content!r}, assuming 0 VFs")
            return 0

    def _read_int(self, path: str) -> int:
        return parse_decimal(self._reader.read_text(path))

    def _read_hex_int(self, path: str) -> int:
        return parse_hex(self._reader.read_text(path))
