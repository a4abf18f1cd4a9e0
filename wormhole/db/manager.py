"""Connection manager — one lazily opened SQLite connection per database file."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from wormhole.db.errors import (
    DatabaseNotConfiguredError,
    DatabaseUnavailableError,
    DBError,
    ErrorKind,
)


class DBManager:
    """
    Owns the single connection to the wormhole database.

    The host creates one manager, points it at a database file with
    ``configure()`` and passes it to everything that needs storage.
    ``get_connection()`` reuses the held connection while it is healthy and
    reopens it otherwise; foreign-key enforcement is switched on every time a
    connection is handed out.

    Apart from ``DatabaseNotConfiguredError`` nothing here raises: failures
    are logged through the optional sink, kept in ``last_error`` and reported
    as ``None`` / ``False``.
    """

    def __init__(
        self,
        path: Optional[Path | str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._path: Optional[Path] = None
        self._logger: Optional[logging.Logger] = logger
        self._conn: Optional[sqlite3.Connection] = None
        self.last_error: Optional[DBError] = None
        if path is not None:
            self.configure(path, logger)

    def __enter__(self) -> "DBManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close_connection()

    # -- configuration ---------------------------------------------------------

    def configure(self, path: Path | str, logger: Optional[logging.Logger] = None) -> None:
        """Close any open connection, then target ``path`` and log to ``logger``."""
        self.close_connection()
        self._path = Path(path)
        self._logger = logger

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def is_configured(self) -> bool:
        return self._path is not None

    # -- connection lifecycle --------------------------------------------------

    def _ensure_dir(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _is_open(conn: sqlite3.Connection) -> bool:
        try:
            conn.execute("SELECT 1").close()
        except sqlite3.Error:
            return False
        return True

    def get_connection(self) -> Optional[sqlite3.Connection]:
        """
        Return the database connection, opening it if necessary.

        Returns ``None`` when the file cannot be opened or foreign keys
        cannot be enabled.
        """
        if self._path is None:
            raise DatabaseNotConfiguredError(
                "DBManager.configure() must be called before requesting a connection"
            )

        if self._conn is None or not self._is_open(self._conn):
            self._conn = None
            try:
                self._ensure_dir()
                conn = sqlite3.connect(str(self._path), check_same_thread=False)
            except (OSError, sqlite3.Error) as e:
                self.record_error(ErrorKind.CONNECT, "Failed to connect to database", e)
                self.log_severe(f"Failed to connect to database {self._path}: {e}")
                return None
            conn.row_factory = sqlite3.Row
            self._conn = conn

        try:
            self._conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            self.record_error(ErrorKind.PRAGMA, "Failed to enable database foreign keys", e)
            self.log_severe(f"Failed to enable database foreign keys: {e}")
            self.close_connection()
            return None

        return self._conn

    def close_connection(self) -> bool:
        """
        Commit pending changes and close the connection, if one is held.

        The held reference is dropped even when committing or closing fails,
        so the next ``get_connection()`` starts fresh.
        """
        if self._conn is None:
            return True

        conn, self._conn = self._conn, None
        if not self._is_open(conn):
            return True

        success = True
        if conn.in_transaction:
            try:
                conn.commit()
            except sqlite3.Error as e:
                self.record_error(
                    ErrorKind.COMMIT, "Failed to commit changes to database before closing", e
                )
                self.log_severe(f"Failed to commit changes to database before closing: {e}")
                success = False
        try:
            conn.close()
        except sqlite3.Error as e:
            self.record_error(ErrorKind.CLOSE, "Failed to close database connection", e)
            self.log_warning(f"Failed to close database connection: {e}")
            success = False
        return success

    # -- transaction helpers ---------------------------------------------------

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Commits on success, rolls back on exception."""
        conn = self.get_connection()
        if conn is None:
            raise DatabaseUnavailableError(
                str(self.last_error) if self.last_error else "Database unavailable"
            )
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    # -- diagnostics -----------------------------------------------------------

    def record_error(
        self,
        kind: ErrorKind,
        message: str,
        exc: Optional[BaseException] = None,
    ) -> DBError:
        if exc is not None:
            error = DBError.from_exception(kind, message, exc)
        else:
            error = DBError(kind=kind, message=message)
        self.last_error = error
        return error

    def clear_error(self) -> None:
        self.last_error = None

    def log_info(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.info(msg)

    def log_warning(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.warning(msg)

    def log_severe(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.error(msg)
