"""Wormhole persistence — SQLite storage for jumps, signs and players."""

__version__ = "0.1.0"
