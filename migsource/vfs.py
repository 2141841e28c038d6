"""An in-memory file tree and a driver that reads migrations from such trees."""

from __future__ import annotations

import copy
import errno
import io
import os
import posixpath
from collections.abc import Iterator, Mapping
from typing import Any, IO

from migsource.driver import Driver, register
from migsource.fsdriver import PartialDriver


def _normalize(path: str) -> str:
    return posixpath.normpath("/" + path).lstrip("/")


class MapFS:
    """A read-only file tree built from a mapping of slash-separated paths to contents.

    Directories exist implicitly wherever a path has children.
    """

    def __init__(self, files: Mapping[str, str | bytes]) -> None:
        self._files: dict[str, bytes] = {
            _normalize(key): value.encode() if isinstance(value, str) else bytes(value)
            for key, value in files.items()
        }
        self._path = ""

    def _child(self, path: str) -> MapFS:
        child = copy.copy(self)
        child._path = path
        return child

    @property
    def name(self) -> str:
        return self._path.rpartition("/")[2]

    def joinpath(self, *args: str) -> MapFS:
        """Return the node at the given path below this one."""
        path = self._path
        for arg in args:
            path = arg if arg.startswith("/") else f"{path}/{arg}"
        return self._child(_normalize(path))

    def __truediv__(self, other: str) -> MapFS:
        return self.joinpath(other)

    def is_dir(self) -> bool:
        if not self._path:
            return True
        prefix = self._path + "/"
        return any(key.startswith(prefix) for key in self._files)

    def is_file(self) -> bool:
        return self._path in self._files

    def iterdir(self) -> Iterator[MapFS]:
        """Return the direct children of this directory, sorted by name."""
        if not self.is_dir():
            where = "/" + self._path
            if self.is_file():
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), where)
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), where)
        prefix = f"{self._path}/" if self._path else ""
        names = sorted(
            {key[len(prefix):].split("/", 1)[0] for key in self._files if key.startswith(prefix)}
        )
        return iter([self._child(prefix + name) for name in names])

    def open(self, mode: str = "r") -> IO[Any]:
        """Open the file for reading, as text with ``"r"`` or bytes with ``"rb"``."""
        try:
            data = self._files[self._path]
        except KeyError:
            raise FileNotFoundError(
                errno.ENOENT, os.strerror(errno.ENOENT), "/" + self._path
            ) from None
        if mode == "rb":
            return io.BytesIO(data)
        if mode == "r":
            return io.StringIO(data.decode())
        raise ValueError(f"unsupported mode {mode!r}")

    def __repr__(self) -> str:
        return f"MapFS(/{self._path})"


class VFSDriver(PartialDriver):
    """A driver reading migrations from a virtual file tree."""

    def __init__(self) -> None:
        super().__init__()
        self.fs: Any = None
        self.path = ""

    def open(self, url: str) -> Driver:
        raise io.UnsupportedOperation(
            "open() cannot be called on the virtual file system driver; use with_instance"
        )


def with_instance(fs: Any, search_path: str = "") -> VFSDriver:
    """Return a driver reading migrations in ``search_path`` of ``fs``; defaults to ``/``."""
    if not search_path:
        search_path = "/"
    driver = VFSDriver()
    driver.fs = fs
    driver.path = search_path
    driver.init(fs, search_path)
    return driver


register("godoc-vfs", VFSDriver())