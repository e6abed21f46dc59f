"""Create a user row for ProfileAPI.

Usage:
    python -m app.scripts.create_user --email ada@example.com --first-name Ada --last-name Lovelace
"""

from __future__ import annotations

import argparse
import sys

from app.db.session import SessionLocal
from app.models.user import User


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a ProfileAPI user")
    parser.add_argument("--email", required=True, help="Email address for the new user")
    parser.add_argument("--first-name", default=None, help="First name")
    parser.add_argument("--last-name", default=None, help="Last name")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        # Check if user already exists
        existing = db.query(User).filter(User.email == args.email).first()
        if existing:
            print(f"User '{args.email}' already exists (id={existing.id}).")
            sys.exit(1)

        user = User(email=args.email, first_name=args.first_name, last_name=args.last_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        print(f"User '{user.email}' created successfully (id={user.id}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
