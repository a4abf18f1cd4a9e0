"""Storage-level constraints of the v0 schema: foreign keys, cascades, uniqueness."""

from __future__ import annotations

import sqlite3
import tempfile
import unittest
import uuid
from pathlib import Path

from wormhole.db.manager import DBManager
from wormhole.db.migrations import MigrationEngine


WORLD = "6f1c1d9e-2a4b-4c7e-9d3f-0a1b2c3d4e5f"


def _make_db(tmp: str) -> DBManager:
    mgr = DBManager(Path(tmp) / "wormhole.db")
    assert MigrationEngine(mgr).migrate()
    return mgr


class TestSchemaConstraints(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db = _make_db(self._tmp.name)

    def tearDown(self):
        self.db.close_connection()
        self._tmp.cleanup()

    # -- helpers ---------------------------------------------------------------

    def _add_player(self, username: str = "Steve") -> str:
        player_uuid = str(uuid.uuid4())
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT INTO players (uuid, username) VALUES (?, ?)",
                (player_uuid, username),
            )
        return player_uuid

    def _add_jump(self, player_uuid: str, name: str = "home") -> int:
        with self.db.transaction() as conn:
            cur = conn.execute(
                """INSERT INTO jumps (player_uuid, name, world_uuid, x, y, z, yaw)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (player_uuid, name, WORLD, 10.5, 64.0, -3.25, 90.0),
            )
            return cur.lastrowid

    def _add_sign(self, jump_id: int, x: int = 1, y: int = 65, z: int = 2) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT INTO signs (world_uuid, x, y, z, jump_id) VALUES (?, ?, ?, ?, ?)",
                (WORLD, x, y, z, jump_id),
            )

    def _count(self, table: str) -> int:
        return self.db.get_connection().execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    # -- tests -----------------------------------------------------------------

    def test_valid_rows_accepted(self):
        player = self._add_player()
        jump_id = self._add_jump(player)
        self._add_sign(jump_id)

        row = self.db.get_connection().execute(
            "SELECT * FROM jumps WHERE id = ?", (jump_id,)
        ).fetchone()
        self.assertEqual(row["player_uuid"], player)
        self.assertEqual(row["world_uuid"], WORLD)
        self.assertAlmostEqual(row["z"], -3.25)
        self.assertAlmostEqual(row["yaw"], 90.0)
        self.assertEqual(self._count("signs"), 1)

    def test_jump_ids_are_assigned(self):
        player = self._add_player()
        first = self._add_jump(player, "a")
        second = self._add_jump(player, "b")
        self.assertIsNotNone(first)
        self.assertGreater(second, first)

    def test_jump_requires_existing_player(self):
        with self.assertRaises(sqlite3.IntegrityError):
            self._add_jump(str(uuid.uuid4()))
        self.assertEqual(self._count("jumps"), 0)

    def test_sign_requires_existing_jump(self):
        with self.assertRaises(sqlite3.IntegrityError):
            self._add_sign(9999)

    def test_duplicate_jump_name_per_player_rejected(self):
        player = self._add_player()
        self._add_jump(player, "home")
        with self.assertRaises(sqlite3.IntegrityError):
            self._add_jump(player, "home")
        self._add_jump(player, "mine")
        self.assertEqual(self._count("jumps"), 2)

    def test_same_jump_name_for_different_players(self):
        self._add_jump(self._add_player("Alex"), "home")
        self._add_jump(self._add_player("Steve"), "home")
        self.assertEqual(self._count("jumps"), 2)

    def test_duplicate_sign_location_rejected(self):
        jump_id = self._add_jump(self._add_player())
        self._add_sign(jump_id, 1, 2, 3)
        with self.assertRaises(sqlite3.IntegrityError):
            self._add_sign(jump_id, 1, 2, 3)

    def test_deleting_player_deletes_jumps_and_signs(self):
        player = self._add_player()
        other = self._add_player("Alex")
        self._add_sign(self._add_jump(player, "a"), 1, 1, 1)
        self._add_jump(player, "b")
        self._add_jump(other, "a")

        with self.db.transaction() as conn:
            conn.execute("DELETE FROM players WHERE uuid = ?", (player,))

        self.assertEqual(self._count("jumps"), 1)
        self.assertEqual(self._count("signs"), 0)

    def test_deleting_jump_deletes_signs(self):
        player = self._add_player()
        kept = self._add_jump(player, "kept")
        dropped = self._add_jump(player, "dropped")
        self._add_sign(kept, 0, 0, 0)
        self._add_sign(dropped, 5, 5, 5)
        self._add_sign(dropped, 6, 6, 6)

        with self.db.transaction() as conn:
            conn.execute("DELETE FROM jumps WHERE id = ?", (dropped,))

        rows = self.db.get_connection().execute("SELECT jump_id FROM signs").fetchall()
        self.assertEqual([r["jump_id"] for r in rows], [kept])

    def test_player_uuid_update_cascades(self):
        player = self._add_player()
        self._add_jump(player)
        new_uuid = str(uuid.uuid4())

        with self.db.transaction() as conn:
            conn.execute("UPDATE players SET uuid = ? WHERE uuid = ?", (new_uuid, player))

        row = self.db.get_connection().execute("SELECT player_uuid FROM jumps").fetchone()
        self.assertEqual(row[0], new_uuid)

    def test_foreign_keys_enforced_after_reopen(self):
        self.db.close_connection()
        with self.assertRaises(sqlite3.IntegrityError):
            self._add_jump(str(uuid.uuid4()))


if __name__ == "__main__":
    unittest.main()
