"""Qualify data paths against the filesystem Hive reads from."""

from __future__ import annotations
import os
import posixpath
from typing import Optional, Protocol
from urllib.parse import urlparse


class PathQualifier(Protocol):
    def qualify(self, path: str) -> str:
        ...


class FileSystemQualifier:
    """
    Make paths absolute and prefix them with the default filesystem URI.

    ``hdfs://nn:8020`` turns ``/w/orders`` into ``hdfs://nn:8020/w/orders``;
    relative paths are first resolved against ``working_dir``. Paths that
    already carry a scheme are returned unchanged.
    """

    def __init__(self, default_fs: str = "file:///", working_dir: Optional[str] = None):
        self.default_fs = default_fs
        self.working_dir = working_dir or os.getcwd()

    def qualify(self, path: str) -> str:
        if urlparse(path).scheme:
            return path
        if not posixpath.isabs(path):
            path = posixpath.join(self.working_dir, path)
        path = posixpath.normpath(path)
        parsed = urlparse(self.default_fs)
        return f"{parsed.scheme}://{parsed.netloc}{path}"
