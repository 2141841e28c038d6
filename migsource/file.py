"""A driver reading migrations from a directory on the local file system."""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import unquote, urlsplit

from migsource.driver import Driver, register
from migsource.fsdriver import PartialDriver


class FileDriver(PartialDriver):
    """Reads migrations from the directory named by a ``file://`` URL."""

    def __init__(self) -> None:
        super().__init__()
        self.url = ""
        self.path = ""

    def open(self, url: str) -> Driver:
        path = parse_url(url)
        driver = FileDriver()
        driver.url = url
        driver.path = path
        driver.init(Path(path), ".")
        return driver


def parse_url(url: str) -> str:
    """Return the absolute directory named by ``url``; empty means the working directory."""
    parts = urlsplit(url)
    path = parts.netloc + unquote(parts.path)
    if not path:
        return os.getcwd()
    if not path.startswith("/"):
        return os.path.abspath(path)
    return path


register("file", FileDriver())