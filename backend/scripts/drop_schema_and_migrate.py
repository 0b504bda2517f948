#!/usr/bin/env python3
"""
Reset the tribe database: drop hang_requests, availability_windows, plans, responses,
claims and alembic_version, then rebuild them with `alembic upgrade head`.
Every request link, plan, RSVP and potluck claim is lost. Other tables in the same
database are left alone.

Run from backend dir:
  python scripts/drop_schema_and_migrate.py          # asks for confirmation
  python scripts/drop_schema_and_migrate.py --yes    # no prompt (CI, local resets)
"""
import subprocess
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from tribe.db.session import engine
from tribe.db.tables import drop_all_tables


def main(argv: list[str]) -> int:
    target = engine.url.render_as_string(hide_password=True)
    if "--yes" not in argv:
        answer = input(f"Drop all tribe tables on {target}? Type 'reset' to continue: ")
        if answer.strip() != "reset":
            print("Aborted; nothing dropped.")
            return 1

    dropped = drop_all_tables(engine)
    print(f"Dropped {len(dropped)} table(s): {', '.join(dropped) or 'none present'}")

    print("Running migrations...")
    result = subprocess.run([sys.executable, "-m", "alembic", "upgrade", "head"], cwd=backend_dir)
    if result.returncode != 0:
        print("Migration failed; tables are missing until `alembic upgrade head` succeeds.")
        return result.returncode
    print("Done. Schema rebuilt at head.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
