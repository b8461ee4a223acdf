"""PaperLens database layer."""

from paperlens.db.connection import Database
from paperlens.db.migrations import MIGRATIONS, run_migrations
from paperlens.db.schema import initialize
from paperlens.db.storage import KeyValueStorage

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "KeyValueStorage",
]
