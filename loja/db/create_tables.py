"""
Schema reconciliation for the SQL backend.

Tables are declared once in `models`; at startup `sync_schema` creates the
missing ones and adds columns that the live tables lack. Nothing is dropped
or retyped.
"""
from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)


def sync_schema() -> list[str]:
    """Create missing tables and add missing columns. Returns the DDL it ran."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    inspector = inspect(engine)
    preparer = engine.dialect.identifier_preparer
    statements: list[str] = []
    for table in Base.metadata.sorted_tables:
        existing = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            col_type = column.type.compile(dialect=engine.dialect)
            # Added as nullable: existing rows have no value for it.
            statements.append(
                f"ALTER TABLE {preparer.quote(table.name)} ADD COLUMN {preparer.quote(column.name)} {col_type}"
            )
    if statements:
        with engine.begin() as conn:
            for ddl in statements:
                conn.execute(text(ddl))
                logger.info("Schema atualizado: %s", ddl)
    return statements


if __name__ == "__main__":
    try:
        applied = sync_schema()
        print(f"Database schema in sync ({len(applied)} column(s) added).")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to sync schema: {exc}") from exc
