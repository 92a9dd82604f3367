#!/usr/bin/env python3
"""
Seed Categories Script.

Clears the categories table and inserts the default set. Categories still
referenced by posts cannot be removed, so the script stops unless
``--keep-referenced`` is given, in which case those rows are kept and only
the missing defaults are added.

Usage:
    uv run python auto/seed_categories.py
    uv run python auto/seed_categories.py --keep-referenced
"""

from argparse import ArgumentParser, Namespace
from asyncio import run as asyncio_run
from pathlib import Path
from sys import exit as sys_exit
from sys import path as sys_path

from sqlalchemy import func, select
from sqlmodel import col

sys_path.insert(0, str(Path(__file__).parent.parent))

from techtalk.db.database import init_db, transaction  # noqa: E402
from techtalk.models import CategoryDB, PostDB  # noqa: E402
from techtalk.repositories import CategoryRepository  # noqa: E402
from techtalk.services.category import DEFAULT_CATEGORIES, CategoryService  # noqa: E402


async def referenced_categories() -> list[str]:
    """Names of categories that at least one post points at."""
    async with transaction() as session:
        result = await session.execute(
            select(CategoryDB.name)
            .join(PostDB, col(PostDB.category_id) == col(CategoryDB.id))
            .group_by(col(CategoryDB.name))
            .having(func.count(col(PostDB.id)) > 0),
        )
        return list(result.scalars().all())


async def seed(keep_referenced: bool) -> int:
    await init_db()

    in_use = await referenced_categories()
    if in_use and not keep_referenced:
        print("❌ These categories are used by posts and cannot be deleted:")
        for name in in_use:
            print(f"   - {name}")
        print("Re-run with --keep-referenced to keep them and reseed the rest.")
        return 1

    async with transaction() as session:
        categories = await CategoryService(CategoryRepository(session)).reseed_categories()

    print(f"✅ Seeded categories ({len(DEFAULT_CATEGORIES)} defaults):")
    for category in categories:
        print(f"   - {category.name}")
    return 0


def parse_args() -> Namespace:
    parser = ArgumentParser(description="Wipe and reseed the default blog categories.")
    parser.add_argument(
        "-k",
        "--keep-referenced",
        action="store_true",
        help="Keep categories that posts still use instead of aborting",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    sys_exit(asyncio_run(seed(args.keep_referenced)))
