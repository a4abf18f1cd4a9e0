"""Startup helper: configure a manager and migrate its database in one call."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from wormhole.db.manager import DBManager
from wormhole.db.migrations import MigrationEngine

logger = logging.getLogger(__name__)


def open_database(
    path: Optional[Path | str] = None,
    log: Optional[logging.Logger] = None,
) -> Optional[DBManager]:
    """
    Return a manager whose database is at the latest schema version.

    ``path`` defaults to the configured database location and ``log`` to this
    module's logger. Returns ``None`` when migration fails; the host should
    then run without persistence rather than abort.
    """
    if path is None:
        from wormhole.config import get_db_path
        path = get_db_path()

    manager = DBManager(path, log if log is not None else logger)
    if not MigrationEngine(manager).migrate():
        manager.log_severe(f"Database at {manager.path} could not be migrated")
        manager.close_connection()
        return None
    return manager
