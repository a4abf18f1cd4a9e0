"""Error kinds reported by the persistence layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    CONNECT = "connect"
    PRAGMA = "pragma"
    QUERY = "query"
    MIGRATION_STEP = "migration_step"
    CLOSE = "close"
    COMMIT = "commit"


@dataclass(frozen=True)
class DBError:
    """A failure recorded by the manager or the migration engine."""

    kind: ErrorKind
    message: str
    detail: Optional[str] = None

    @classmethod
    def from_exception(cls, kind: ErrorKind, message: str, exc: BaseException) -> "DBError":
        return cls(kind=kind, message=message, detail=str(exc))

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class DatabaseNotConfiguredError(RuntimeError):
    """A connection was requested before ``DBManager.configure()`` was called."""


class DatabaseUnavailableError(RuntimeError):
    """No connection could be obtained for a transaction."""
