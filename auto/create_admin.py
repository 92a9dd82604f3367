#!/usr/bin/env python3
"""
Create Admin User Script.

Creates an admin account directly in the database. Registration through the
API always yields the ``user`` role, so this is how the first admin appears.

Usage:
    uv run python auto/create_admin.py
    uv run python auto/create_admin.py --email admin@example.com --password secret1

Environment Variables:
    ADMIN_EMAIL: Admin email (default: admin@example.com)
    ADMIN_USERNAME: Admin username (default: admin)
    ADMIN_PASSWORD: Admin password (default: prompt or auto-generated)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from getpass import getpass
from os import environ
from pathlib import Path
from secrets import token_urlsafe
from sys import exit as sys_exit
from sys import path as sys_path

from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlmodel import col

sys_path.insert(0, str(Path(__file__).parent.parent))

from techtalk.configs.settings import PASSWORD_MIN_LENGTH  # noqa: E402
from techtalk.db.database import transaction  # noqa: E402
from techtalk.managers.password_manager import hash_password  # noqa: E402
from techtalk.models import UserDB  # noqa: E402
from techtalk.schemas.auth import RegisterRequest  # noqa: E402


def generate_password() -> str:
    return token_urlsafe(12)


def input_with_default(prompt: str, default: str) -> str:
    user_input = input(f"{prompt} [{default}]: ").strip()
    return user_input or default


def input_password() -> tuple[str, bool]:
    """
    Prompt for a password; an empty answer auto-generates one.

    Returns
    -------
    tuple[str, bool]
        The password and whether it was generated.
    """
    while True:
        password = getpass("Password (leave empty to generate): ")
        if not password:
            return generate_password(), True
        if len(password) < PASSWORD_MIN_LENGTH:
            print(f"❌ Password must be at least {PASSWORD_MIN_LENGTH} characters.")
            continue
        if password != getpass("Confirm password: "):
            print("❌ Passwords do not match.")
            continue
        return password, False


def gather_input(args: Namespace) -> tuple[RegisterRequest, bool] | None:
    """
    Collect admin details from arguments, environment, then prompts.

    Returns
    -------
    tuple[RegisterRequest, bool] | None
        Validated details and whether the password was generated, or None if
        the user cancelled.
    """
    email = args.email or environ.get("ADMIN_EMAIL")
    username = args.username or environ.get("ADMIN_USERNAME")
    password = args.password or environ.get("ADMIN_PASSWORD")
    generated = False

    try:
        if args.interactive or email is None:
            email = input_with_default("Email", email or "admin@example.com")
            username = input_with_default("Username", username or "admin")
        if password is None:
            password, generated = input_password()
    except (KeyboardInterrupt, EOFError):
        print("\n\n❌ Cancelled by user.")
        return None

    try:
        data = RegisterRequest(
            username=username or "admin",
            email=email,
            password=password,
        )
    except ValidationError as e:
        for error in e.errors():
            print(f"❌ {'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}")
        return None
    return data, generated


async def create_admin_user(data: RegisterRequest) -> UserDB:
    """
    Insert the admin user.

    Raises
    ------
    ValueError
        If the email or username is already taken.
    """
    async with transaction() as session:
        result = await session.execute(
            select(UserDB).where(
                or_(col(UserDB.email) == data.email, col(UserDB.username) == data.username),
            ),
        )
        if result.scalars().first() is not None:
            msg = f"User with email '{data.email}' or username '{data.username}' already exists"
            raise ValueError(msg)

        admin = UserDB(
            username=data.username,
            email=data.email,
            password_hash=await hash_password(data.password),
            role="admin",
        )
        session.add(admin)
        await session.flush()
        await session.refresh(admin)
        return admin


def parse_args() -> Namespace:
    parser = ArgumentParser(
        description="Create an admin user in the database.",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  uv run python auto/create_admin.py

  # Command-line arguments
  uv run python auto/create_admin.py -e admin@techtalk.co.za -u admin -p secret1
        """,
    )
    parser.add_argument("-e", "--email", default=None, help="Admin email")
    parser.add_argument("-u", "--username", default=None, help="Admin username")
    parser.add_argument("-p", "--password", default=None, help="Admin password")
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Prompt for every value even if arguments are provided",
    )
    return parser.parse_args()


async def main() -> int:
    """
    Run the admin creation process.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    result = gather_input(parse_args())
    if result is None:
        return 1
    data, generated = result

    try:
        admin = await create_admin_user(data)
    except ValueError as e:
        print(f"\n❌ Error: {e}")
        return 1

    print("\n✅ Admin user created successfully!")
    print(f"   ID:       {admin.id}")
    print(f"   Username: {admin.username}")
    print(f"   Email:    {admin.email}")
    if generated:
        print(f"   Password: {data.password}")
        print("\n⚠️  This password was auto-generated. Save it now!")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
