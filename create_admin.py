#!/usr/bin/env python3
"""
Promote an existing account to the admin role.

Admins can read and triage contact messages. There is no HTTP route for
granting the role, so run this against the configured DATABASE_URL:

    python create_admin.py user@example.com
"""
import argparse
import sys

from sqlmodel import Session

from health_companion.database import create_db_and_tables, engine
from health_companion.infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository


def promote(identifier: str) -> int:
    create_db_and_tables()
    with Session(engine) as session:
        repo = SqlUserRepository(session)
        user = repo.get_by_identifier(identifier)
        if not user:
            print(f"No user found for '{identifier}'")
            return 1
        if user.is_admin:
            print(f"{user.email} is already an admin")
            return 0
        repo.promote_to_admin(user.id)
        print(f"Promoted {user.email} ({user.id}) to admin")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Grant the admin role to a user")
    parser.add_argument("identifier", help="email address or phone number of the account")
    args = parser.parse_args()
    try:
        return promote(args.identifier)
    except Exception as e:
        print(f"Failed to promote user: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
