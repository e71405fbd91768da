"""Type-safe identifiers and sysfs constants for topology discovery.

References:
    - Linux kernel Documentation/ABI/testing/sysfs-bus-pci
    - pciutils lib/sysfs.c (device class encoding)
"""

from __future__ import annotations

import re
from typing import NewType

# PCI address as found under bus/pci/devices (e.g., "0000:00:01.0")
PCIAddress = NewType("PCIAddress", str)

# NUMA node identifier
NUMANodeId = NewType("NUMANodeId", int)

# Firmware did not report a node for the device. This is a known firmware
# defect class, see https://access.redhat.com/solutions/435313
NUMA_NODE_UNKNOWN = NUMANodeId(-1)

# Subpath holding the PCI(-express) device directories
PATH_BUS_PCI_DEVICES = "bus/pci/devices"

# Subpath holding the NUMA node directories
PATH_DEVICES_SYSTEM_NODE = "devices/system/node"

# Device class (base class + subclass) of network controllers
DEV_CLASS_NETWORK = 0x0200

# Integer syntax of sysfs attributes. Stricter than int(), which also
# accepts digit separators ("1_0") and non-ASCII digits.
_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
_HEX_RE = re.compile(r"(?:0[xX])?[0-9a-fA-F]+")


def split_pci_address(address: str) -> tuple[str, str]:
    """Split a PCI address into its bus part and its device part.

    The split happens on the first colon only, so for a full
    "domain:bus:device.function" address the domain is the bus part.

    Raises:
        ValueError: If the address has no colon.
    """
    bus, sep, dev = address.partition(":")
    if not sep:
        raise ValueError(f"Malformed PCI address: {address!r}")
    return bus, dev


def parse_decimal(text: str) -> int:
    """Parse a decimal sysfs value such as "-1" or "20".

    Raises:
        ValueError: If ``text`` is not an optionally signed run of digits.
    """
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError(f"invalid decimal value: {text!r}")
    return int(text, 10)


def parse_hex(text: str) -> int:
    """Parse a hexadecimal sysfs value, with or without the "0x" prefix.

    Raises:
        ValueError: If ``text`` is not a run of hex digits.
    """
    if not _HEX_RE.fullmatch(text):
        raise ValueError(f"invalid hexadecimal value: {text!r}")
    return int(text, 16)
