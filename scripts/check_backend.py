#!/usr/bin/env python3
"""
Quick checks so the API and the job worker can start. Run from the project root:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from the project root
root_dir = Path(__file__).resolve().parent.parent
os.chdir(root_dir)
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))


def main():
    errors = []

    # 1) .env
    env_file = root_dir / ".env"
    if not env_file.exists():
        errors.append(".env missing. Set DATABASE_URL, JWT_SECRET and SMTP_* there (or in the environment).")
    else:
        print("OK  .env exists")

    # 2) DB connection and schema
    try:
        from sqlalchemy import inspect, text

        from booking.db.session import engine
        from booking.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing:
            errors.append(f"Tables missing: {', '.join(sorted(missing))}. Run: alembic upgrade head")
            print("FAIL Schema: missing", ", ".join(sorted(missing)))
        else:
            print("OK  Schema (all tables present)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) App + worker import (catches missing deps, bad imports)
    try:
        from booking.main import app  # noqa: F401
        from booking.worker import main as worker_main  # noqa: F401
        print("OK  App import (booking.main, booking.worker)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 4) SMTP settings (optional: without them cancellation mails are skipped)
    from booking.config import settings

    if settings.smtp_user and settings.smtp_password:
        print(f"OK  SMTP configured ({settings.smtp_host}:{settings.smtp_port})")
    else:
        print("WARN SMTP_USER/SMTP_PASSWORD not set; cancellation emails will be skipped")

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
        return 1

    print("\nAll checks passed. Start with:")
    print("  uvicorn booking.main:app --reload --host 0.0.0.0 --port 8000")
    print("  python -m booking.worker")
    return 0


if __name__ == "__main__":
    sys.exit(main())
