"""
Dialect-aware INSERT ... ON CONFLICT. Production runs on PostgreSQL; tests and local dev on SQLite.
Both dialects expose the same on_conflict_do_update / on_conflict_do_nothing API.
"""
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session


def insert_for(db: Session, model):
    """Return a dialect-specific insert() for model so callers can chain on_conflict_*."""
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)
