from tribe.db.base import Base
from tribe.db.session import get_db, engine, SessionLocal
from tribe.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
