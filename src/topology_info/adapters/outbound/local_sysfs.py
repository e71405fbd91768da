"""Local filesystem implementation of the SysfsReader port.

Reads the live ``/sys`` of the host, or any directory laid out like it
(e.g., a tree materialized by FakeSysfs).
"""

from __future__ import annotations

import os
from pathlib import Path

from topology_info.ports.outbound import PathLike


class LocalSysfsReader:
    """SysfsReader backed by the local filesystem.

    Every call goes to the filesystem; nothing is cached.
    """

    def list_dir(self, path: PathLike) -> list[str]:
        return sorted(os.listdir(path))

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8").strip()

    def exists(self, path: PathLike) -> bool:
        try:
            os.stat(path)
        except FileNotFoundError:
            return False
        return True

    def lexists(self, path: PathLike) -> bool:
        try:
            os.lstat(path)
        except FileNotFoundError:
            return False
        return True

    def is_symlink(self, path: PathLike) -> bool:
        return Path(path).is_symlink()

    def read_link(self, path: PathLike) -> str:
        return os.readlink(path)
