"""
Single source of truth for database tables that exist after migrations (001).

Use these names when writing raw SQL (e.g. TRUNCATE). Order is child-first so deletes respect FKs.
"""
from sqlalchemy import inspect, text

# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "claims",
    "responses",
    "plans",
    "availability_windows",
    "hang_requests",
)

ALEMBIC_VERSION_TABLE = "alembic_version"


def drop_all_tables(engine) -> list[str]:
    """
    Drop every tribe table plus Alembic's version table so `alembic upgrade head` starts
    from nothing. Child tables go first. Returns the names that existed and were dropped.
    """
    existing = set(inspect(engine).get_table_names())
    dropped = [t for t in (*ALL_TABLE_NAMES, ALEMBIC_VERSION_TABLE) if t in existing]
    with engine.begin() as conn:
        for name in dropped:
            conn.execute(text(f'DROP TABLE IF EXISTS "{name}"'))
    return dropped
