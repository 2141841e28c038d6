"""A driver reading migrations from named assets embedded in the program."""

from __future__ import annotations

import errno
import io
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, BinaryIO, TypeVar

from migsource.driver import Driver, register
from migsource.migration import Migration, Migrations, parse

AssetFunc = Callable[[str], bytes]

BINDATA_PATH = "<go-bindata>"

_T = TypeVar("_T")


@dataclass
class AssetSource:
    """Asset names and the function that returns an asset's bytes by name."""

    names: list[str] = field(default_factory=list)
    asset_func: AssetFunc | None = None


def resource(names: Sequence[str], asset_func: AssetFunc) -> AssetSource:
    """Bundle asset names with the function that loads them."""
    return AssetSource(names=list(names), asset_func=asset_func)


class BindataDriver(Driver):
    """Reads migrations from an AssetSource."""

    def __init__(self, asset_source: AssetSource | None = None) -> None:
        self.path = BINDATA_PATH
        self.asset_source = asset_source
        self.migrations = Migrations()

    def open(self, url: str) -> Driver:
        raise io.UnsupportedOperation(
            "open() cannot be called on the bindata driver; use with_instance"
        )

    def close(self) -> None:
        """Nothing to release."""

    def first(self) -> int:
        return self._found(self.migrations.first(), "first")

    def prev(self, version: int) -> int:
        return self._found(self.migrations.prev(version), f"prev for version {version}")

    def next(self, version: int) -> int:
        return self._found(self.migrations.next(version), f"next for version {version}")

    def read_up(self, version: int) -> tuple[BinaryIO, str]:
        return self._read(self.migrations.up(version), version)

    def read_down(self, version: int) -> tuple[BinaryIO, str]:
        return self._read(self.migrations.down(version), version)

    def _read(self, migration: Migration | None, version: int) -> tuple[BinaryIO, str]:
        loader = self.asset_source.asset_func if self.asset_source else None
        found = self._found(migration if loader else None, f"read version {version}")
        return io.BytesIO(loader(found.raw)), found.identifier

    def _found(self, value: _T | None, op: str) -> _T:
        if value is None:
            raise FileNotFoundError(errno.ENOENT, f"{op}: file does not exist", self.path)
        return value


def with_instance(instance: Any) -> BindataDriver:
    """Return a driver over ``instance``, which must be an AssetSource."""
    if not isinstance(instance, AssetSource):
        raise TypeError("expects AssetSource")

    driver = BindataDriver(instance)
    for name in instance.names:
        try:
            migration = parse(name)
        except ValueError:
            continue
        if not driver.migrations.append(migration):
            raise ValueError(f"unable to parse file {name}")
    return driver


register("go-bindata", BindataDriver())