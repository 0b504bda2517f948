#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from backend/:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

START_CMD = "uvicorn tribe.main:app --reload --host 0.0.0.0 --port 8000"


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        errors.append("backend/.env missing. Create it and set DATABASE_URL (and optionally CORS_ORIGINS).")
    else:
        print("OK  .env exists")

    # 2) DB connection
    try:
        from sqlalchemy import text
        from tribe.db.session import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) Tables from migrations
    try:
        from sqlalchemy import inspect
        from tribe.db.session import engine
        from tribe.db.tables import ALL_TABLE_NAMES
        existing = set(inspect(engine).get_table_names())
        missing = [t for t in ALL_TABLE_NAMES if t not in existing]
        if missing:
            errors.append(f"Missing tables {missing}. Run: alembic upgrade head")
            print("FAIL Tables missing:", ", ".join(missing))
        else:
            print("OK  Tables present")
    except Exception as e:
        errors.append(f"Tables: {e}")
        print("FAIL Tables:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from tribe.main import app  # noqa: F401
        print("OK  App import (tribe.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 5) Port 8000
    try:
        import socket
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        print(f"\nThen start backend: {START_CMD}")
        return 1

    print(f"\nAll checks passed. Start with: {START_CMD}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
