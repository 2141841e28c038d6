"""A driver reading migrations from an S3 bucket.

The client passed in follows the boto3 shape: ``list_objects(Bucket=,
Prefix=, Delimiter=)`` returns a mapping with ``"Contents"``, a list of
mappings with ``"Key"``; ``get_object(Bucket=, Key=)`` returns a mapping
whose ``"Body"`` is a readable stream.
"""

from __future__ import annotations

import errno
import posixpath
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, BinaryIO
from urllib.parse import urlsplit

from migsource.driver import Driver, register
from migsource.migration import Migration, Migrations, parse


@dataclass
class S3Config:
    """Bucket and key prefix holding the migrations."""

    bucket: str
    prefix: str = ""


def _not_exist() -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, "file does not exist")


class S3Driver(Driver):
    """Reads migrations stored as objects directly under a prefix in a bucket."""

    def __init__(self, client_factory: Callable[[], Any] | None = None) -> None:
        self._client_factory = client_factory
        self._client: Any = None
        self._config = S3Config(bucket="")
        self._migrations = Migrations()

    def open(self, url: str) -> Driver:
        config = parse_uri(url)
        if self._client_factory is None:
            raise ValueError("s3 driver: no client factory configured")
        driver = with_instance(self._client_factory(), config)
        driver._client_factory = self._client_factory
        return driver

    def close(self) -> None:
        """Nothing to release."""

    def first(self) -> int:
        version = self._migrations.first()
        if version is None:
            raise _not_exist()
        return version

    def prev(self, version: int) -> int:
        found = self._migrations.prev(version)
        if found is None:
            raise _not_exist()
        return found

    def next(self, version: int) -> int:
        found = self._migrations.next(version)
        if found is None:
            raise _not_exist()
        return found

    def read_up(self, version: int) -> tuple[BinaryIO, str]:
        return self._open(self._migrations.up(version))

    def read_down(self, version: int) -> tuple[BinaryIO, str]:
        return self._open(self._migrations.down(version))

    def _load_migrations(self) -> None:
        output = self._client.list_objects(
            Bucket=self._config.bucket,
            Prefix=self._config.prefix,
            Delimiter="/",
        )
        for obj in output.get("Contents") or []:
            key = obj["Key"]
            try:
                migration = parse(key.rpartition("/")[2])
            except ValueError:
                continue
            if not self._migrations.append(migration):
                raise ValueError(f"unable to parse file {key}")

    def _open(self, migration: Migration | None) -> tuple[BinaryIO, str]:
        if migration is None:
            raise _not_exist()
        key = posixpath.join(self._config.prefix, migration.raw)
        obj = self._client.get_object(Bucket=self._config.bucket, Key=key)
        return obj["Body"], migration.identifier


def with_instance(client: Any, config: S3Config) -> S3Driver:
    """Return a driver listing and reading migrations through ``client``."""
    driver = S3Driver()
    driver._client = client
    driver._config = config
    driver._load_migrations()
    return driver


def parse_uri(uri: str) -> S3Config:
    """Split ``s3://bucket/some/prefix`` into bucket and a slash-terminated prefix."""
    parts = urlsplit(uri)
    prefix = parts.path.strip("/")
    if prefix:
        prefix += "/"
    return S3Config(bucket=parts.netloc.rpartition("@")[2], prefix=prefix)


register("s3", S3Driver())