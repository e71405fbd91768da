"""Synthetic sysfs tree for testing and development.

This adapter builds a directory tree in memory and materializes it under
a base directory, so the discovery services can run against a fabricated
sysfs without real hardware.

Example:
    fs = FakeSysfs(tmp_dir)
    devs = fs.add_tree("sys", "bus", "pci", "devices")
    devs.add("0000:00:01.0", {"vendor": "0x8086", "device": "0x1572"})
    fs.setup()
    ...
    fs.teardown()

Paths are always joined explicitly; the process working directory is
never changed, so trees can be materialized independently of each other.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path, PurePosixPath
from types import TracebackType
from typing import Mapping, Optional

from topology_info.ports.outbound import PathLike


logger = logging.getLogger(__name__)

# Name of the root node. The root stands for the base directory itself,
# so "." and "" are rejected to keep materialization inside the base.
ROOT_NAME = "_"

ATTR_FILE_MODE = 0o644
DIR_MODE = 0o755


def _validate_name(name: str) -> None:
    """Reject names that would escape the directory they are created in."""
    if name in ("", "."):
        raise ValueError(f"Invalid tree entry name: {name!r}")
    path = PurePosixPath(name)
    if path.is_absolute() or ".." in path.parts:
        raise ValueError(f"Tree entry name escapes its parent: {name!r}")


class Tree:
    """A directory in a synthetic sysfs tree.

    Each node has a name, attribute files (file name -> content), symbolic
    links (link name -> target) and an ordered list of child directories.
    A name may hold several path segments ("bus/pci/devices"); missing
    intermediate directories are created on materialization.
    """

    def __init__(self, name: str, attrs: Optional[Mapping[str, str]] = None) -> None:
        self._name = name
        self._attrs: dict[str, str] = dict(attrs) if attrs else {}
        for attr_name in self._attrs:
            _validate_name(attr_name)
        self._links: dict[str, str] = {}
        self._items: list[Tree] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def attrs(self) -> dict[str, str]:
        return dict(self._attrs)

    @property
    def links(self) -> dict[str, str]:
        return dict(self._links)

    @property
    def items(self) -> list[Tree]:
        return list(self._items)

    def add(self, name: str, attrs: Optional[Mapping[str, str]] = None) -> Tree:
        """Append a child directory and return it.

        Args:
            name: Directory name, relative to this node.
            attrs: Attribute files to write in the new directory.

        Returns:
            The new child, to chain further additions.

        Raises:
            ValueError: If the name or an attribute name is empty or escapes
                this directory.
        """
        _validate_name(name)
        child = Tree(name, attrs)
        self._items.append(child)
        return child

    def add_link(self, name: str, target: str) -> Tree:
        """Record a symbolic link to create in this directory.

        The target is stored verbatim and may be relative to this directory.

        Returns:
            This node, to chain further additions.
        """
        _validate_name(name)
        self._links[name] = target
        return self

    def set_attrs(self, path: PathLike) -> None:
        """Write this node's attribute files into ``path``."""
        for name, content in self._attrs.items():
            attr_path = Path(path, name)
            attr_path.write_text(content, encoding="utf-8")
            os.chmod(attr_path, ATTR_FILE_MODE)

    def set_links(self, path: PathLike) -> None:
        """Create this node's symbolic links inside ``path``."""
        for name, target in self._links.items():
            os.symlink(target, Path(path, name))

    def create(self, path: PathLike) -> None:
        """Materialize this node's content and its children under ``path``.

        ``path`` is the directory standing for this node and must exist.
        Stops at the first failure, leaving whatever was already created.

        Raises:
            OSError: If a directory, file or link cannot be created.
        """
        self.set_attrs(path)
        self.set_links(path)
        for item in self._items:
            item_path = Path(path, item.name)
            item_path.mkdir(mode=DIR_MODE, parents=True, exist_ok=False)
            item.create(item_path)

    def __repr__(self) -> str:
        return f"Tree({self._name!r}, attrs={len(self._attrs)}, items={len(self._items)})"


class FakeSysfs:
    """A synthetic sysfs rooted at a caller-provided base directory.

    The base directory must exist before setup(); teardown() removes it
    entirely, including anything else created inside it.
    """

    def __init__(self, base: PathLike, root_name: str = ROOT_NAME) -> None:
        if root_name in ("", "."):
            raise ValueError(f"Invalid root name: {root_name!r}")
        self._base = Path(base)
        self._root = Tree(root_name)

    @property
    def base(self) -> Path:
        return self._base

    @property
    def root(self) -> Tree:
        return self._root

    def add_tree(self, *entries: str) -> Tree:
        """Add a chain of nested directories below the root.

        Equivalent to calling add() once per entry, each on the result of
        the previous call.

        Returns:
            The deepest directory added.
        """
        pos = self._root
        for entry in entries:
            pos = pos.add(entry)
        return pos

    def setup(self) -> None:
        """Materialize the tree under the base directory.

        Raises:
            FileNotFoundError: If the base directory does not exist.
            OSError: If any entry cannot be created.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Base directory not found: {self._base}")
        self._root.create(self._base)
        logger.debug(f"Materialized fake sysfs under {self._base}")

    def teardown(self) -> None:
        """Recursively remove the base directory."""
        if os.path.lexists(self._base):
            shutil.rmtree(self._base)
            logger.debug(f"Removed fake sysfs at {self._base}")

    def __enter__(self) -> FakeSysfs:
        self.setup()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.teardown()
