"""Source drivers for discovering, ordering and reading versioned migration files."""

__version__ = "0.1.0"