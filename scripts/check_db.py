#!/usr/bin/env python3
"""Quick check of database state."""

from __future__ import annotations

import argparse
import sqlite3
import sys
from contextlib import closing
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from wormhole.config import get_db_path
from wormhole.db import DBManager, MigrationEngine
from wormhole.db.schema import TABLE_NAMES


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Show wormhole database state")
    parser.add_argument("--db-path", type=str, help="Override database path")
    args = parser.parse_args(argv)

    db_path = Path(args.db_path) if args.db_path else get_db_path()
    if not db_path.exists():
        print(f"No database at: {db_path}")
        return 1

    with DBManager(db_path) as manager:
        conn = manager.get_connection()
        if conn is None:
            print(f"Cannot open database at: {db_path}")
            return 1

        print(f"=== {db_path} ===")
        print(f"Schema version: {MigrationEngine(manager).current_version()}")
        for table in TABLE_NAMES:
            try:
                with closing(conn.execute(f"SELECT COUNT(*) FROM {table}")) as cur:
                    count = cur.fetchone()[0]
            except sqlite3.Error:
                print(f"  {table:<15} missing")
                continue
            print(f"  {table:<15} {count} rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
