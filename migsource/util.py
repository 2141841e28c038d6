"""Small helpers shared across the package."""

from __future__ import annotations

from operator import itemgetter
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

CUSTOM_QUERY_PREFIX = "x-"


class MultiError(Exception):
    """An error that holds several errors at once.

    ``None`` entries are dropped. The message joins the messages of the
    held errors with ``" and "``, skipping empty ones.
    """

    def __init__(self, *args: BaseException | None) -> None:
        self.errors: list[BaseException] = [e for e in args if e is not None]
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return " and ".join(msg for msg in map(str, self.errors) if msg)


def suint(n: int) -> int:
    """Return ``n`` unchanged, refusing negative values."""
    if n < 0:
        raise ValueError(f"suint({n}) expects input >= 0")
    return n


def filter_custom_query(url: str) -> str:
    """Return ``url`` with every query parameter whose key starts with ``x-`` removed.

    The remaining parameters are re-encoded sorted by key; the values of a
    key keep their original order.
    """
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(key, value) for key, value in pairs if not key.startswith(CUSTOM_QUERY_PREFIX)]
    query = urlencode(sorted(kept, key=itemgetter(0)))
    return urlunsplit(parts._replace(query=query))