"""Print a signed access token for an existing user (local testing only).

Usage:
    python -m app.scripts.issue_token --user-id 1 [--hours 1]
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from app.db.session import SessionLocal
from app.models.user import User
from app.services.auth import create_user_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue a ProfileAPI access token")
    parser.add_argument("--user-id", type=int, required=True, help="Id of an existing user")
    parser.add_argument("--hours", type=int, default=None, help="Token lifetime in hours")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        user = db.get(User, args.user_id)
        if user is None:
            print(f"User id={args.user_id} not found.")
            sys.exit(1)
    finally:
        db.close()

    expires = timedelta(hours=args.hours) if args.hours else None
    print(create_user_token(args.user_id, expires_delta=expires))


if __name__ == "__main__":
    main()
