#!/usr/bin/env python3
"""Create demo users (one provider, one client) and print bearer tokens for them.
Tokens normally come from the identity service; these are signed with JWT_SECRET for local use.
Run from the project root: python scripts/seed_users.py
"""
import argparse
import sys
from pathlib import Path

# Ensure the project root is on path when run as script
root_dir = Path(__file__).resolve().parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

import jwt

from booking.config import settings
from booking.db.session import SessionLocal
from booking.models.user import User

DEMO_USERS = (
    {"name": "Demo Provider", "email": "provider@example.com", "provider": True},
    {"name": "Demo Client", "email": "client@example.com", "provider": False},
)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--no-tokens", action="store_true", help="Only create the users")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        for demo in DEMO_USERS:
            user = db.query(User).filter(User.email == demo["email"]).first()
            if user is None:
                user = User(**demo)
                db.add(user)
                db.commit()
                db.refresh(user)
                print(f"Created {demo['email']} (id={user.id})")
            else:
                print(f"Exists  {demo['email']} (id={user.id})")
            if not args.no_tokens:
                token = jwt.encode({"id": user.id}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
                print(f"  Authorization: Bearer {token}")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
