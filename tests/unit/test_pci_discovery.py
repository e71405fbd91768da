"""Unit tests for PCI device discovery."""

from __future__ import annotations

import logging
import os
from typing import Callable

import pytest

from topology_info.adapters.outbound import FakeSysfs, LocalSysfsReader, Tree
from topology_info.application import discover_pci_devices
from topology_info.domain.entities import PCIDevices
from topology_info.domain.services import PCIDiscoveryService


AddDevice = Callable[..., Tree]


def _discover(sysfs_root: str, strict_sriov: bool = False) -> PCIDevices:
    return PCIDiscoveryService(LocalSysfsReader(), strict_sriov=strict_sriov).discover(sysfs_root)


@pytest.mark.unit
class TestPCIDiscovery:
    """Tests for PCIDiscoveryService against a synthetic sysfs."""

    def test_plain_device(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """A device without SRIOV files has all its attributes read."""
        add_pci_device("0000:00:1f.6", vendor=0x8086, device=0x15BB, dev_class=0x020000, numa_node=0)
        fake_sysfs.setup()

        devices = _discover(sysfs_root)

        assert len(devices) == 1
        dev = devices.find_by_address("0000:00:1f.6")
        assert dev is not None
        assert dev.vendor == 0x8086
        assert dev.device == 0x15BB
        assert dev.dev_class == 0x0200
        assert dev.numa_node == 0
        assert dev.sysfs_path == os.path.join(sysfs_root, "bus/pci/devices", "0000:00:1f.6")
        assert not dev.is_phys_fn and dev.num_vfs is None
        assert not dev.is_vfn and dev.parent_fn is None

    def test_physical_function_unknown_node(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """A PF with sriov_numvfs=4 and numa_node=-1 is reported as such."""
        add_pci_device("0000:3b:00.0", numa_node=-1, sriov_numvfs="4")
        fake_sysfs.setup()

        dev = _discover(sysfs_root).find_by_address("0000:3b:00.0")

        assert dev is not None
        assert dev.is_phys_fn is True
        assert dev.num_vfs == 4
        assert dev.numa_node == -1

    def test_physical_function_without_vfs(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """Presence of sriov_numvfs marks a PF even with zero VFs."""
        add_pci_device("0000:3b:00.0", sriov_numvfs="0\n")
        fake_sysfs.setup()

        dev = _discover(sysfs_root).find_by_address("0000:3b:00.0")
        assert dev is not None
        assert dev.is_phys_fn is True
        assert dev.num_vfs == 0

    def test_virtual_function_parent(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """A VF's parent_fn is the base name of its physfn link target."""
        add_pci_device("0000:3b:00.0", sriov_numvfs="2")
        add_pci_device("0000:3b:02.0", device=0x154C, physfn="0000:3b:00.0")
        add_pci_device("0000:3b:02.1", device=0x154C, physfn="0000:3b:00.0")
        fake_sysfs.setup()

        devices = _discover(sysfs_root)

        for address in ("0000:3b:02.0", "0000:3b:02.1"):
            vf = devices.find_by_address(address)
            assert vf is not None
            assert vf.is_vfn is True
            assert vf.parent_fn == "0000:3b:00.0"
            assert vf.is_phys_fn is False
        assert [vf.address for vf in devices.virtual_functions_of("0000:3b:00.0")] == [
            "0000:3b:02.0", "0000:3b:02.1",
        ]

    def test_virtual_function_dangling_link(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """A physfn link is a VF marker even when its target is not present."""
        add_pci_device("0000:af:10.0", physfn="0000:af:00.0")
        fake_sysfs.setup()

        vf = _discover(sysfs_root).find_by_address("0000:af:10.0")
        assert vf is not None
        assert vf.is_vfn is True
        assert vf.parent_fn == "0000:af:00.0"

    def test_physfn_not_a_link(
        self,
        fake_sysfs: FakeSysfs,
        pci_devices_dir: Tree,
        sysfs_root: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A regular physfn file marks a VF with an unknown parent."""
        pci_devices_dir.add("0000:af:10.0", {
            "vendor": "0x8086", "device": "0x154c", "class": "0x020000",
            "numa_node": "1", "physfn": "0000:af:00.0",
        })
        fake_sysfs.setup()

        with caplog.at_level(logging.WARNING):
            vf = _discover(sysfs_root).find_by_address("0000:af:10.0")

        assert vf is not None
        assert vf.is_vfn is True
        assert vf.parent_fn is None
        assert "physfn is not a symlink" in caplog.text

    def test_listing_order(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """Devices come back in sorted directory listing order."""
        for address in ("0000:86:00.0", "0000:00:02.0", "0000:3b:00.0"):
            add_pci_device(address)
        fake_sysfs.setup()

        devices = _discover(sysfs_root)
        assert [dev.address for dev in devices] == ["0000:00:02.0", "0000:3b:00.0", "0000:86:00.0"]

    def test_empty_bus(self, fake_sysfs: FakeSysfs, pci_devices_dir: Tree, sysfs_root: str) -> None:
        """An empty device directory yields no devices."""
        fake_sysfs.setup()
        assert len(_discover(sysfs_root)) == 0

    def test_missing_devices_directory(self, fake_sysfs: FakeSysfs, sysfs_root: str) -> None:
        """A sysfs without bus/pci/devices aborts discovery."""
        fake_sysfs.setup()
        with pytest.raises(FileNotFoundError):
            _discover(sysfs_root)

    @pytest.mark.parametrize("missing", ["vendor", "device", "class", "numa_node"])
    def test_missing_required_attribute(
        self, fake_sysfs: FakeSysfs, pci_devices_dir: Tree, sysfs_root: str, missing: str
    ) -> None:
        """A missing required attribute aborts the whole discovery."""
        attrs = {"vendor": "0x8086", "device": "0x1572", "class": "0x020000", "numa_node": "0"}
        del attrs[missing]
        pci_devices_dir.add("0000:00:01.0", {
            "vendor": "0x8086", "device": "0x1572", "class": "0x020000", "numa_node": "0",
        })
        pci_devices_dir.add("0000:00:02.0", attrs)
        fake_sysfs.setup()

        with pytest.raises(FileNotFoundError):
            _discover(sysfs_root)

    @pytest.mark.parametrize(
        "attr, content",
        [
            ("numa_node", "unknown"),
            ("class", "network"),
            ("vendor", "0xzz"),
            ("device", ""),
            ("numa_node", "1_0"),
            ("numa_node", "\u0661"),
            ("numa_node", "+"),
            ("vendor", "0x_8086"),
            ("class", "0x02_0000"),
            ("device", "0x"),
        ],
    )
    def test_malformed_required_attribute(
        self, fake_sysfs: FakeSysfs, pci_devices_dir: Tree, sysfs_root: str, attr: str, content: str
    ) -> None:
        """A non-numeric required attribute aborts the whole discovery."""
        attrs = {"vendor": "0x8086", "device": "0x1572", "class": "0x020000", "numa_node": "0"}
        attrs[attr] = content
        pci_devices_dir.add("0000:00:01.0", attrs)
        fake_sysfs.setup()

        with pytest.raises(ValueError):
            _discover(sysfs_root)

    def test_unparsable_numvfs_tolerated(
        self,
        fake_sysfs: FakeSysfs,
        add_pci_device: AddDevice,
        sysfs_root: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """By default a garbled sriov_numvfs still marks a PF, with 0 VFs."""
        add_pci_device("0000:3b:00.0", sriov_numvfs="n/a")
        fake_sysfs.setup()

        with caplog.at_level(logging.WARNING):
            dev = _discover(sysfs_root).find_by_address("0000:3b:00.0")

        assert dev is not None
        assert dev.is_phys_fn is True
        assert dev.num_vfs == 0
        assert "unparsable sriov_numvfs" in caplog.text

    def test_unparsable_numvfs_strict(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """In strict mode a garbled sriov_numvfs aborts discovery."""
        add_pci_device("0000:3b:00.0", sriov_numvfs="n/a")
        fake_sysfs.setup()

        with pytest.raises(ValueError):
            _discover(sysfs_root, strict_sriov=True)

    def test_numvfs_digit_separator_not_a_count(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """A digit separator in sriov_numvfs is garbled input, not ten VFs."""
        add_pci_device("0000:3b:00.0", sriov_numvfs="1_0\n")
        fake_sysfs.setup()

        dev = _discover(sysfs_root).find_by_address("0000:3b:00.0")
        assert dev is not None
        assert dev.num_vfs == 0

        with pytest.raises(ValueError):
            _discover(sysfs_root, strict_sriov=True)

    def test_hex_without_prefix(
        self, fake_sysfs: FakeSysfs, pci_devices_dir: Tree, sysfs_root: str
    ) -> None:
        """Hex attributes are parsed as hex with or without the 0x prefix."""
        pci_devices_dir.add("0000:00:01.0", {
            "vendor": "10de", "device": "1db6", "class": "030200", "numa_node": "1",
        })
        fake_sysfs.setup()

        dev = _discover(sysfs_root).find_by_address("0000:00:01.0")
        assert dev is not None
        assert (dev.vendor, dev.device, dev.dev_class) == (0x10DE, 0x1DB6, 0x0302)

    def test_function_shorthand(
        self, fake_sysfs: FakeSysfs, add_pci_device: AddDevice, sysfs_root: str
    ) -> None:
        """discover_pci_devices() matches the service."""
        add_pci_device("0000:00:01.0")
        add_pci_device("0000:00:02.0", numa_node=1)
        fake_sysfs.setup()

        assert discover_pci_devices(sysfs_root) == _discover(sysfs_root)


class DictSysfsReader:
    """In-memory SysfsReader over a mapping of path -> content."""

    def __init__(self, files: dict[str, str], links: dict[str, str] | None = None) -> None:
        self._files = files
        self._links = links or {}

    def list_dir(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        names = {
            p[len(prefix):].split("/", 1)[0]
            for p in list(self._files) + list(self._links)
            if p.startswith(prefix)
        }
        if not names:
            raise FileNotFoundError(path)
        return sorted(names)

    def read_text(self, path: str) -> str:
        try:
            return self._files[path].strip()
        except KeyError:
            raise FileNotFoundError(path) from None

    def exists(self, path: str) -> bool:
        return path in self._files

    def lexists(self, path: str) -> bool:
        return path in self._files or path in self._links

    def is_symlink(self, path: str) -> bool:
        return path in self._links

    def read_link(self, path: str) -> str:
        return self._links[path]


@pytest.mark.unit
class TestPCIDiscoveryReaderPort:
    """Discovery reads only through the injected SysfsReader."""

    def test_in_memory_reader(self) -> None:
        """A non-filesystem reader drives discovery."""
        base = "/fake/bus/pci/devices"
        files = {}
        for address, numa in (("0000:3b:00.0", "0"), ("0000:3b:02.0", "0")):
            files.update({
                f"{base}/{address}/vendor": "0x8086",
                f"{base}/{address}/device": "0x1572",
                f"{base}/{address}/class": "0x020000",
                f"{base}/{address}/numa_node": numa,
            })
        files[f"{base}/0000:3b:00.0/sriov_numvfs"] = "1"
        links = {f"{base}/0000:3b:02.0/physfn": "../0000:3b:00.0"}

        devices = PCIDiscoveryService(DictSysfsReader(files, links)).discover("/fake")

        pf = devices.find_by_address("0000:3b:00.0")
        vf = devices.find_by_address("0000:3b:02.0")
        assert pf is not None and pf.is_phys_fn and pf.num_vfs == 1
        assert vf is not None and vf.is_vfn and vf.parent_fn == "0000:3b:00.0"
