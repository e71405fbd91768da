"""Pytest configuration and shared fixtures for topology_info tests."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
import structlog
from prometheus_client import CollectorRegistry

import topology_info.infrastructure.logging as logging_setup
from topology_info.adapters.outbound import FakeSysfs, Tree
from topology_info.infrastructure.config import Config, SysfsConfig
from topology_info.infrastructure.container import Container
from topology_info.infrastructure.metrics import MetricsRegistry

# Device class values as found in sysfs (class, subclass, prog-if)
CLASS_ETHERNET = 0x020000
CLASS_VGA = 0x030000
CLASS_NVME = 0x010802


@pytest.fixture(autouse=True)
def reset_container() -> Generator[None, None, None]:
    """Reset the DI container before and after each test."""
    Container.reset()
    yield
    Container.reset()


@pytest.fixture
def restore_logging(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Undo root logger and structlog changes made by setup_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(logging_setup, "_handler", None)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_sysfs(temp_dir: Path) -> Generator[FakeSysfs, None, None]:
    """Provide an empty synthetic sysfs, torn down after the test."""
    base = temp_dir / "sysfs"
    base.mkdir()
    fs = FakeSysfs(base)
    yield fs
    fs.teardown()


@pytest.fixture
def sysfs_root(fake_sysfs: FakeSysfs) -> str:
    """Root path of the synthetic sysfs, as passed to the discovery services."""
    return str(fake_sysfs.base)


@pytest.fixture
def pci_devices_dir(fake_sysfs: FakeSysfs) -> Tree:
    """The bus/pci/devices directory of the synthetic sysfs."""
    return fake_sysfs.add_tree("bus/pci/devices")


@pytest.fixture
def add_pci_device(pci_devices_dir: Tree) -> Callable[..., Tree]:
    """Factory adding a PCI device directory to the synthetic sysfs."""

    def _add(
        address: str,
        vendor: int = 0x8086,
        device: int = 0x1572,
        dev_class: int = CLASS_ETHERNET,
        numa_node: int = 0,
        sriov_numvfs: Optional[str] = None,
        physfn: Optional[str] = None,
    ) -> Tree:
        attrs = {
            "vendor": f"0x{vendor:04x}\n",
            "device": f"0x{device:04x}\n",
            "class": f"0x{dev_class:06x}\n",
            "numa_node": f"{numa_node}\n",
        }
        if sriov_numvfs is not None:
            attrs["sriov_numvfs"] = sriov_numvfs
        dev = pci_devices_dir.add(address, attrs)
        if physfn is not None:
            dev.add_link("physfn", f"../{physfn}")
        return dev

    return _add


@pytest.fixture
def add_numa_nodes(fake_sysfs: FakeSysfs) -> Callable[..., Tree]:
    """Factory adding devices/system/node with an online list and distance files."""

    def _add(distances: dict[int, str], online: Optional[str] = None) -> Tree:
        if online is None:
            online = ",".join(str(node_id) for node_id in sorted(distances))
        node_dir = fake_sysfs.add_tree("devices/system").add("node", {"online": f"{online}\n"})
        for node_id, distance in distances.items():
            node_dir.add(f"node{node_id}", {"distance": f"{distance}\n"})
        return node_dir

    return _add


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def test_config(sysfs_root: str) -> Config:
    """Provide a configuration reading the synthetic sysfs."""
    return Config(sysfs=SysfsConfig(root=Path(sysfs_root)))


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
