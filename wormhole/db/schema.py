"""Database schema DDL — table layout of a version 0 wormhole database."""

SCHEMA_VERSION_TABLE = "schema_version"
PLAYERS_TABLE = "players"
JUMPS_TABLE = "jumps"
SIGNS_TABLE = "signs"

SCHEMA_VERSION_DDL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER
)
"""

# uuid is the platform's stable player id; usernames change
PLAYERS_DDL = """
CREATE TABLE IF NOT EXISTS players (
    uuid     CHAR(36) PRIMARY KEY,
    username VARCHAR(16)
)
"""

JUMPS_DDL = """
CREATE TABLE IF NOT EXISTS jumps (
    id          INTEGER PRIMARY KEY,
    player_uuid CHAR(36) REFERENCES players(uuid)
                ON DELETE CASCADE ON UPDATE CASCADE,
    name        TEXT,
    world_uuid  CHAR(36),
    x REAL, y REAL, z REAL, yaw REAL,
    UNIQUE (player_uuid, name)
)
"""

SIGNS_DDL = """
CREATE TABLE IF NOT EXISTS signs (
    world_uuid CHAR(36),
    x INTEGER, y INTEGER, z INTEGER,
    jump_id    INTEGER REFERENCES jumps(id)
               ON DELETE CASCADE ON UPDATE CASCADE,
    PRIMARY KEY (world_uuid, x, y, z)
)
"""

# Created in this order by the bootstrap migration.
BOOTSTRAP_TABLES = (
    (SCHEMA_VERSION_TABLE, SCHEMA_VERSION_DDL),
    (PLAYERS_TABLE, PLAYERS_DDL),
    (JUMPS_TABLE, JUMPS_DDL),
    (SIGNS_TABLE, SIGNS_DDL),
)

TABLE_NAMES = tuple(name for name, _ in BOOTSTRAP_TABLES)
