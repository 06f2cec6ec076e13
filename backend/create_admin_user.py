"""Create an admin account, or promote an existing one

Usage:
    python create_admin_user.py <username> [--password PASSWORD]

Without --password the password is read from SEED_ADMIN_PASSWORD or
prompted for.
"""
import argparse
import asyncio
import getpass

from scholarship.core.config import settings
from scholarship.core.database import get_session_local, init_db, close_db
from scholarship.services.admin_service import ensure_admin_account


async def create_admin(username: str, password: str):
    await init_db()
    session_local = get_session_local()
    async with session_local() as db:
        user, created = await ensure_admin_account(db, username, password)
        print(f"{'Created' if created else 'Updated existing'} admin user: {user.username}")
    await close_db()


def main():
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("username", nargs="?", default=settings.SEED_ADMIN_USERNAME or None)
    parser.add_argument("--password", default=settings.SEED_ADMIN_PASSWORD or None)
    args = parser.parse_args()

    if not args.username:
        parser.error("username is required (or set SEED_ADMIN_USERNAME)")

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        parser.error("password must be at least 6 characters")

    asyncio.run(create_admin(args.username, password))


if __name__ == "__main__":
    main()
