"""An in-memory driver whose migrations are set directly, for testing."""

from __future__ import annotations

import errno
import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from migsource.driver import Driver, register
from migsource.migration import Migrations


@dataclass
class StubConfig:
    """Configuration of the stub driver; it has no settings."""


@dataclass(eq=False)
class StubDriver(Driver):
    """A driver over a Migrations collection; a body holds its migration's identifier."""

    url: str = ""
    instance: Any = None
    migrations: Migrations = field(default_factory=Migrations)
    config: StubConfig = field(default_factory=StubConfig)

    def open(self, url: str) -> Driver:
        return StubDriver(url=url)

    def close(self) -> None:
        """Nothing to release."""

    def first(self) -> int:
        return self._version("first", None)

    def prev(self, version: int) -> int:
        return self._version("prev", version)

    def next(self, version: int) -> int:
        return self._version("next", version)

    def read_up(self, version: int) -> tuple[BinaryIO, str]:
        return self._body("up", version)

    def read_down(self, version: int) -> tuple[BinaryIO, str]:
        return self._body("down", version)

    def _version(self, step: str, version: int | None) -> int:
        if version is None:
            found, op = self.migrations.first(), "first"
        else:
            found, op = getattr(self.migrations, step)(version), f"{step} for version {version}"
        if found is None:
            raise self._missing(op)
        return found

    def _body(self, direction: str, version: int) -> tuple[BinaryIO, str]:
        migration = getattr(self.migrations, direction)(version)
        if migration is None:
            raise self._missing(f"read {direction} version {version}")
        return io.BytesIO(migration.identifier.encode()), f"{version}.{direction}.stub"

    def _missing(self, op: str) -> FileNotFoundError:
        return FileNotFoundError(errno.ENOENT, f"{op}: file does not exist", self.url)


def with_instance(instance: Any, config: StubConfig | None = None) -> StubDriver:
    """Return an empty stub driver holding ``instance`` and ``config``."""
    return StubDriver(instance=instance, config=config if config is not None else StubConfig())


register("stub", StubDriver())