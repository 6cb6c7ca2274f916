"""Database helper utilities for ensuring schema consistency."""
from __future__ import annotations

import sqlite3
from typing import Set

from sqlalchemy import event, inspect
from sqlalchemy.engine import Engine

from .extensions import db


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on SQLite foreign key enforcement so ``ON DELETE CASCADE`` applies.

    SQLite ships with the pragma disabled per connection; other backends
    enforce referential actions natively and are left untouched.
    """

    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _get_table_names() -> Set[str]:
    inspector = inspect(db.engine)
    return set(inspector.get_table_names())


def ensure_database_schema() -> None:
    """Create any of the application tables that do not exist yet.

    Runs on every application start, so it only issues ``CREATE TABLE`` for
    missing tables and never alters existing ones. Tables are created parents
    first so foreign keys resolve.
    """

    # Import locally to avoid circular import issues during application setup.
    from .models import Breakdown, Scene, User

    required_tables = (
        ("users", User.__table__),
        ("scenes", Scene.__table__),
        ("breakdowns", Breakdown.__table__),
    )

    table_names = _get_table_names()
    for table_name, table in required_tables:
        if table_name not in table_names:
            table.create(bind=db.engine)
