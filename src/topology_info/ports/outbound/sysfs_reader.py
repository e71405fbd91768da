"""Sysfs Reader port for pseudo-file access.

This outbound port defines the read-only filesystem operations the
discovery services need. Paths are plain strings or Path objects and
are always absolute or relative to the caller's choice of root; the
reader does not know about sysfs layouts.
"""

from __future__ import annotations

import os
from abc import abstractmethod
from typing import Protocol, Union

PathLike = Union[str, os.PathLike]


class SysfsReader(Protocol):
    """Protocol for reading a sysfs-like tree.

    Implementations must surface I/O failures as OSError subclasses and
    must not retry.
    """

    @abstractmethod
    def list_dir(self, path: PathLike) -> list[str]:
        """List the entry names of a directory, sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        ...

    @abstractmethod
    def read_text(self, path: PathLike) -> str:
        """Read the content of a pseudo-file, stripped of surrounding whitespace.

        Raises:
            OSError: If the file is missing or unreadable.
        """
        ...

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        """Check whether a path exists, following symlinks.

        Returns False only when the path does not exist; any other
        failure while probing is raised.
        """
        ...

    @abstractmethod
    def lexists(self, path: PathLike) -> bool:
        """Check whether a path exists, without following symlinks."""
        ...

    @abstractmethod
    def is_symlink(self, path: PathLike) -> bool:
        """Check whether a path is a symbolic link."""
        ...

    @abstractmethod
    def read_link(self, path: PathLike) -> str:
        """Return the target of a symbolic link, as stored.

        Raises:
            OSError: If the path is not a symlink or cannot be read.
        """
        ...
