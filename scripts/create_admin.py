"""
Create an administrator account from the command line.

Uses the same DATABASE_URL as the API (environment or backend/.env).
Tables are created if missing, so this also works on a fresh database.

    python scripts/create_admin.py master --password s3cret! --national-id 123.456.789-00 --birthdate 1990-01-31
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# --- ensure backend/ on sys.path when run from a checkout ---
BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from printquote import models  # noqa: E402
from printquote.config import get_settings  # noqa: E402
from printquote.context import build_context  # noqa: E402
from printquote.errors import AppError  # noqa: E402
from printquote.services.accounts import create_admin_account  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a PrintQuote administrator.")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--national-id", default=None)
    parser.add_argument("--birthdate", default=None, help="YYYY-MM-DD")
    parser.add_argument("--hint", default=None, help="password hint shown on the login page")
    return parser.parse_args(argv)


async def create_admin(args: argparse.Namespace) -> int:
    context = build_context(get_settings())
    try:
        async with context.engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.create_all)

        async with context.sessionmaker() as session:
            try:
                user = await create_admin_account(
                    session,
                    context,
                    username=args.username,
                    password=args.password,
                    national_id=args.national_id,
                    birthdate=args.birthdate,
                    password_hint=args.hint,
                    require_identity=False,
                )
            except AppError as exc:
                print(f"Could not create admin: {exc.message}", file=sys.stderr)
                return 1
            await session.commit()
    finally:
        await context.engine.dispose()

    print(f"Created admin {user.username!r} (id={user.id})")
    if user.username == context.master_admin_username:
        print("This account is the master administrator.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.password:
        args.password = getpass.getpass("Password: ")
    return asyncio.run(create_admin(args))


if __name__ == "__main__":
    raise SystemExit(main())
