"""Database package."""

from tms.database.session import (
    SessionProvider,
    create_db_engine,
    create_all_tables,
    drop_all_tables,
)

__all__ = [
    "SessionProvider",
    "create_db_engine",
    "create_all_tables",
    "drop_all_tables",
]
