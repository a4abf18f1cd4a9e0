#!/usr/bin/env python3
"""Create or migrate the wormhole database and optionally seed players from YAML."""

from __future__ import annotations

import argparse
import logging
import sqlite3
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from wormhole.config import get_database_config
from wormhole.db import DatabaseUnavailableError, DBManager, MigrationEngine, open_database

logger = logging.getLogger("wormhole.init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the wormhole database")
    parser.add_argument("--db-path", type=str, help="Override database path")
    parser.add_argument("--seed-players", type=str, help="YAML file with player definitions")
    args = parser.parse_args(argv)

    cfg = get_database_config()
    logging.basicConfig(
        level=cfg.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    db_path = Path(args.db_path) if args.db_path else cfg.path
    manager = open_database(db_path, logger)
    if manager is None:
        print(f"Failed to migrate database at: {db_path}")
        return 1

    version = MigrationEngine(manager).current_version()
    print(f"Database ready at: {manager.path} (schema v{version})")

    if args.seed_players:
        _seed_players(manager, Path(args.seed_players))

    manager.close_connection()
    print("Done.")
    return 0


def _seed_players(manager: DBManager, path: Path) -> None:
    import yaml
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for p in data.get("players", []):
        try:
            with manager.transaction() as conn:
                conn.execute(
                    "INSERT INTO players (uuid, username) VALUES (?, ?)",
                    (str(p["uuid"]), p.get("username")),
                )
            print(f"  Created player: {p.get('username')} ({p['uuid']})")
        except (KeyError, sqlite3.Error, DatabaseUnavailableError) as e:
            print(f"  Skipping {p.get('username', '?')}: {e}")


if __name__ == "__main__":
    sys.exit(main())
