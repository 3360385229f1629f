"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

RESTAURANT_AVAILABILITY_COLUMNS: dict[str, str] = {
    "status": "VARCHAR(9) NOT NULL DEFAULT 'inactive'",
    "verification_notes": "TEXT",
    "is_open": "BOOLEAN NOT NULL DEFAULT 0",
    "is_manual_override": "BOOLEAN NOT NULL DEFAULT 0",
}

OPENING_HOURS_COLUMNS: dict[str, str] = {
    "position": "INTEGER NOT NULL DEFAULT 0",
    "is_closed": "BOOLEAN NOT NULL DEFAULT 0",
}


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _add_missing_columns(connection: Connection, table_name: str, columns: dict[str, str]) -> list[str]:
    existing = _sqlite_column_names(connection, table_name)
    added: list[str] = []
    for column_name, ddl in columns.items():
        if column_name not in existing:
            connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
            added.append(column_name)
    return added


def ensure_sqlite_schema(engine: Engine) -> None:
    """Apply lightweight schema updates for legacy SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "restaurants" in table_names:
            _add_missing_columns(connection, "restaurants", RESTAURANT_AVAILABILITY_COLUMNS)
            if "ix_restaurants_status" not in _sqlite_index_names(connection, "restaurants"):
                connection.execute(
                    text("CREATE INDEX IF NOT EXISTS ix_restaurants_status ON restaurants(status)")
                )

        if "restaurant_opening_hours" in table_names:
            added = _add_missing_columns(connection, "restaurant_opening_hours", OPENING_HOURS_COLUMNS)
            if "position" in added:
                # Legacy rows keep their insertion order.
                connection.execute(text("UPDATE restaurant_opening_hours SET position = id"))
