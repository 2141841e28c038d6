"""The source driver interface and the registry of named drivers.

A driver is registered under a URL scheme; ``open_driver`` picks the
driver by the scheme of a URL and asks it to open that URL.

Drivers raise FileNotFoundError when a requested version or migration
does not exist.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import BinaryIO
from urllib.parse import urlsplit

_drivers: dict[str, Driver] = {}
_drivers_lock = threading.RLock()


class Driver(ABC):
    """Interface every source driver implements."""

    @abstractmethod
    def open(self, url: str) -> Driver:
        """Return a new driver configured from ``url``."""

    @abstractmethod
    def close(self) -> None:
        """Release whatever the driver holds."""

    @abstractmethod
    def first(self) -> int:
        """Return the first version; raise FileNotFoundError if there is none."""

    @abstractmethod
    def prev(self, version: int) -> int:
        """Return the version before ``version``; raise FileNotFoundError if there is none."""

    @abstractmethod
    def next(self, version: int) -> int:
        """Return the version after ``version``; raise FileNotFoundError if there is none."""

    @abstractmethod
    def read_up(self, version: int) -> tuple[BinaryIO, str]:
        """Return an unread body and identifier of the up migration."""

    @abstractmethod
    def read_down(self, version: int) -> tuple[BinaryIO, str]:
        """Return an unread body and identifier of the down migration."""

    def __enter__(self) -> Driver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def register(name: str, driver: Driver) -> None:
    """Register ``driver`` under the URL scheme ``name``."""
    with _drivers_lock:
        if driver is None:
            raise ValueError("register: driver is None")
        if name in _drivers:
            raise ValueError(f"register called twice for driver {name}")
        _drivers[name] = driver


def open_driver(url: str) -> Driver:
    """Open ``url`` with the driver registered for its scheme."""
    scheme = urlsplit(url).scheme
    if not scheme:
        raise ValueError("source driver: invalid URL scheme")
    with _drivers_lock:
        driver = _drivers.get(scheme)
    if driver is None:
        raise ValueError(f"source driver: unknown driver '{scheme}' (forgotten import?)")
    return driver.open(url)


def list_drivers() -> list[str]:
    """Return the names of all registered drivers."""
    with _drivers_lock:
        return list(_drivers)