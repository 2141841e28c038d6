"""Source drivers that read migrations from a directory tree.

A tree is any object that behaves like ``pathlib.Path``. It offers
``joinpath``, ``is_dir``, ``is_file``, ``iterdir``, ``open`` and ``name``.
Strings and path-like objects are accepted and treated as real directories.
"""

from __future__ import annotations

import errno
import io
import os
import posixpath
from functools import reduce
from pathlib import Path
from typing import Any, BinaryIO

from migsource.driver import Driver
from migsource.migration import DuplicateMigrationError, Migration, Migrations, parse


def _as_tree(fs: Any) -> Any:
    if isinstance(fs, (str, os.PathLike)):
        return Path(fs)
    return fs


def _resolve(root: Any, path: str) -> Any:
    parts = [part for part in path.split("/") if part not in ("", ".")]
    return reduce(lambda node, part: node.joinpath(part), parts, root)


def _describe(node: Any, path: str) -> str:
    return os.fspath(node) if isinstance(node, os.PathLike) else path


class PartialDriver(Driver):
    """Every driver operation except ``open``, backed by a directory tree.

    Call ``init`` before use; until then the driver knows no versions.
    """

    def __init__(self) -> None:
        self._migrations = Migrations()
        self._fs: Any = None
        self._root: Any = None
        self._path = ""

    def init(self, fs: Any, path: str = "") -> None:
        """Load the migrations found directly in ``path`` below ``fs``."""
        tree = _as_tree(fs)
        root = _resolve(tree, path)
        if not root.is_dir():
            where = _describe(root, path)
            if root.is_file():
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), where)
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), where)

        migrations = Migrations()
        for entry in sorted(root.iterdir(), key=lambda e: e.name):
            if entry.is_dir():
                continue
            try:
                migration = parse(entry.name)
            except ValueError:
                continue
            if not migrations.append(migration):
                raise DuplicateMigrationError(migration, entry.name)

        self._fs = tree
        self._root = root
        self._path = path
        self._migrations = migrations

    def close(self) -> None:
        """Close the tree if it can be closed."""
        closer = getattr(self._fs, "close", None)
        if callable(closer):
            closer()

    def first(self) -> int:
        version = self._migrations.first()
        if version is None:
            raise self._not_exist("first")
        return version

    def prev(self, version: int) -> int:
        found = self._migrations.prev(version)
        if found is None:
            raise self._not_exist(f"prev for version {version}")
        return found

    def next(self, version: int) -> int:
        found = self._migrations.next(version)
        if found is None:
            raise self._not_exist(f"next for version {version}")
        return found

    def read_up(self, version: int) -> tuple[BinaryIO, str]:
        return self._read(self._migrations.up(version), f"read up for version {version}")

    def read_down(self, version: int) -> tuple[BinaryIO, str]:
        return self._read(self._migrations.down(version), f"read down for version {version}")

    def _read(self, migration: Migration | None, op: str) -> tuple[BinaryIO, str]:
        if migration is None:
            raise self._not_exist(op)
        location = posixpath.join(self._path, migration.raw)
        try:
            body = self._root.joinpath(migration.raw).open("rb")
        except OSError as exc:
            if exc.filename is None:
                raise type(exc)(exc.errno, exc.strerror or str(exc), location) from exc
            raise
        return body, migration.identifier

    def _not_exist(self, op: str) -> FileNotFoundError:
        return FileNotFoundError(errno.ENOENT, f"{op}: file does not exist", self._path)


class FSDriver(PartialDriver):
    """A driver over a tree that is handed in directly rather than opened by URL."""

    def open(self, url: str) -> Driver:
        raise io.UnsupportedOperation("open() cannot be called on the fs passthrough driver")


def new(fs: Any, path: str = "") -> FSDriver:
    """Return a driver reading the migrations in ``path`` below ``fs``."""
    driver = FSDriver()
    driver.init(fs, path)
    return driver