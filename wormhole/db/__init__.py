"""Database layer — one SQLite connection and a versioned migration chain."""

from wormhole.db.errors import (
    DatabaseNotConfiguredError,
    DatabaseUnavailableError,
    DBError,
    ErrorKind,
)
from wormhole.db.manager import DBManager
from wormhole.db.migrations import (
    LATEST_VERSION,
    MIGRATIONS,
    UNVERSIONED,
    Migration,
    MigrationEngine,
)
from wormhole.db.startup import open_database

__all__ = [
    "DBManager",
    "DBError",
    "ErrorKind",
    "DatabaseNotConfiguredError",
    "DatabaseUnavailableError",
    "Migration",
    "MigrationEngine",
    "MIGRATIONS",
    "LATEST_VERSION",
    "UNVERSIONED",
    "open_database",
]
