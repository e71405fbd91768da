"""
Topology Info - PCI and NUMA topology discovery from sysfs

Builds an in-memory model of a machine's PCI(-express) devices, including
SRIOV physical/virtual function relationships, and the inter-NUMA-node
distance matrix, by reading a sysfs-like tree of pseudo-files.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
