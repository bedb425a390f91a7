#!/usr/bin/env python3
"""
Add an email to the allow-list.

Usage:
    python scripts/add_allowed_user.py someone@example.com
    python scripts/add_allowed_user.py admin@example.com --admin --name "Dr. Rao"

Environment Variables:
    DATABASE_URL: Database to write to
"""

import argparse
import asyncio
import sys

from app.core.exceptions import DatabaseException
from app.database import dispose_engine, get_engine
from app.services.access_control_service import AccessControlService


async def add_allowed_user(
    email: str, is_admin: bool, name: str | None, notes: str | None
) -> dict | None:
    """Insert the entry; None if the email is already listed."""
    try:
        return await AccessControlService(get_engine()).add_user(email, is_admin, name, notes)
    finally:
        await dispose_engine()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Add an email to the allow-list")
    parser.add_argument("email", help="Email address to allow")
    parser.add_argument("--admin", action="store_true", help="Grant admin rights")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument("--notes", default=None, help="Free-text notes")
    args = parser.parse_args()

    try:
        user = asyncio.run(add_allowed_user(args.email, args.admin, args.name, args.notes))
    except DatabaseException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    if user is None:
        print(f"{args.email} is already on the allow-list")
        sys.exit(0)

    role = "admin" if user["is_admin"] else "user"
    print(f"✓ Added {user['email']} (id={user['id']}, {role})")


if __name__ == "__main__":
    main()
