#!/usr/bin/env python3
"""Delete all appointments, notifications and queued jobs (users are kept).
Run from the project root: python scripts/reset_db.py
"""
import sys
from pathlib import Path

# Ensure the project root is on path when run as script
root_dir = Path(__file__).resolve().parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from sqlalchemy import text

from booking.db.session import SessionLocal
from booking.db.tables import RESETTABLE_TABLE_NAMES


def main():
    db = SessionLocal()
    try:
        print("Rows deleted:")
        for table in RESETTABLE_TABLE_NAMES:
            count = db.execute(text(f"DELETE FROM {table}")).rowcount
            print(f"  {table}: {count}")
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
