"""Schema migrations — an ordered chain of versioned steps over the ledger table.

The ledger (``schema_version``) holds at most one row: the version of the last
step applied. A missing table or row means the database is unversioned (-1).
``MigrationEngine.migrate()`` applies every step newer than the ledger, in
ascending order, and each step advances the ledger to its own version.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from wormhole.db.errors import DatabaseUnavailableError, ErrorKind
from wormhole.db.manager import DBManager
from wormhole.db.schema import BOOTSTRAP_TABLES, SCHEMA_VERSION_TABLE

UNVERSIONED = -1


@dataclass(frozen=True)
class Migration:
    """One step of the chain; ``apply`` returns True once the ledger holds ``version``."""

    version: int
    name: str
    apply: Callable[["MigrationEngine"], bool]


class MigrationEngine:
    """Brings the manager's database up to the latest known schema version."""

    def __init__(self, manager: DBManager, migrations: Optional[Iterable[Migration]] = None):
        steps = sorted(MIGRATIONS if migrations is None else migrations, key=lambda m: m.version)
        versions = [m.version for m in steps]
        if len(set(versions)) != len(versions):
            raise ValueError(f"Duplicate migration versions: {versions}")
        if versions and versions[0] < 0:
            raise ValueError(f"Migration versions must be >= 0, got {versions[0]}")
        self._manager = manager
        self._migrations: tuple[Migration, ...] = tuple(steps)

    @property
    def manager(self) -> DBManager:
        return self._manager

    @property
    def migrations(self) -> tuple[Migration, ...]:
        return self._migrations

    @property
    def latest_version(self) -> int:
        return self._migrations[-1].version if self._migrations else UNVERSIONED

    # -- ledger ----------------------------------------------------------------

    def current_version(self) -> int:
        """Return the applied schema version, or -1 if it cannot be read."""
        conn = self._manager.get_connection()
        if conn is None:
            return UNVERSIONED
        try:
            with closing(conn.cursor()) as cur:
                cur.execute(f"SELECT version FROM {SCHEMA_VERSION_TABLE} LIMIT 1")
                row = cur.fetchone()
            if row is None or row[0] is None:
                return UNVERSIONED
            return int(row[0])
        except (sqlite3.Error, TypeError, ValueError) as e:
            # missing table, corrupt or locked file, non-integer ledger value
            self._manager.record_error(ErrorKind.QUERY, "Failed to read database version", e)
            return UNVERSIONED

    def set_version(self, version: int) -> bool:
        """Replace the ledger contents with a single row holding ``version``."""
        try:
            with self._manager.transaction() as conn:
                with closing(conn.cursor()) as cur:
                    cur.execute(f"DELETE FROM {SCHEMA_VERSION_TABLE}")
                    cur.execute(
                        f"INSERT INTO {SCHEMA_VERSION_TABLE} (version) VALUES (?)",
                        (version,),
                    )
        except (sqlite3.Error, DatabaseUnavailableError) as e:
            self._manager.record_error(ErrorKind.MIGRATION_STEP, "Failed to set database version", e)
            self._manager.log_severe(f"Failed to set database version: {e}")
            return False
        return True

    # -- migration -------------------------------------------------------------

    def pending(self, current: Optional[int] = None) -> list[Migration]:
        if current is None:
            current = self.current_version()
        return [m for m in self._migrations if current < m.version <= self.latest_version]

    def migrate(self) -> bool:
        """
        Migrate the database to the latest version.

        Stops at the first failing step. Nothing is rolled back: every step
        is safe to run again, so a later call retries from the ledger version.
        """
        current = self.current_version()
        self._manager.clear_error()

        latest = self.latest_version
        if current > latest:
            self._manager.log_warning(
                f"Database version {current} is newer than the latest known version {latest}"
            )
            return True

        for step in self.pending(current):
            try:
                applied = step.apply(self)
            except (sqlite3.Error, DatabaseUnavailableError) as e:
                self._manager.record_error(
                    ErrorKind.MIGRATION_STEP,
                    f"Migration to v{step.version} ({step.name}) failed",
                    e,
                )
                self._manager.log_severe(f"Migration to v{step.version} ({step.name}) failed: {e}")
                return False
            if not applied:
                if self._manager.last_error is None:
                    self._manager.record_error(
                        ErrorKind.MIGRATION_STEP,
                        f"Migration to v{step.version} ({step.name}) failed",
                    )
                self._manager.log_severe(f"Migration to v{step.version} ({step.name}) failed")
                return False
        return True


# -- migrations ----------------------------------------------------------------

def _bootstrap(engine: MigrationEngine) -> bool:
    """v0: create the ledger, players, jumps and signs tables."""
    manager = engine.manager
    manager.log_info("Creating database v0...")

    conn = manager.get_connection()
    if conn is None:
        return False

    for table, ddl in BOOTSTRAP_TABLES:
        try:
            with closing(conn.cursor()) as cur:
                cur.execute(ddl)
        except sqlite3.Error as e:
            manager.record_error(ErrorKind.MIGRATION_STEP, f"Failed to create table '{table}'", e)
            manager.log_severe(f"Failed to create table '{table}': {e}")
            return False

    if not engine.set_version(0):
        manager.log_severe("Failed to set database version to 0")
        return False

    manager.log_info("Done.")
    return True


MIGRATIONS: tuple[Migration, ...] = (
    Migration(version=0, name="bootstrap", apply=_bootstrap),
)

LATEST_VERSION = MIGRATIONS[-1].version
