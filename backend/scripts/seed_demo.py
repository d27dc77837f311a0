"""Rebuild the demo estate data set.

Usage (from repository root):
    python backend/scripts/seed_demo.py --estates 1000

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Make `gridquery` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from gridquery.config import get_settings
from gridquery.crypto import fernet_encryptor
from gridquery.db.session import get_engine, get_sessionmaker
from gridquery.services.seeding import DemoSeeder, SeedResult


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Drop and regenerate the demo estate data.")
    parser.add_argument("--estates", type=int, default=100_000, help="Estates to create (default: 100000)")
    parser.add_argument("--buildings", type=int, default=10_000, help="Buildings to create (default: 10000)")
    parser.add_argument("--partners", type=int, default=1_000, help="Partners to create (default: 1000)")
    parser.add_argument("--tags", type=int, default=200, help="Tags to create (default: 200)")
    return parser.parse_args()


async def run(args: argparse.Namespace) -> SeedResult:
    settings = get_settings()
    encryptor = fernet_encryptor(settings.encryption_key) if settings.encryption_key else None
    try:
        async with get_sessionmaker()() as db:
            seeder = DemoSeeder(db, encryptor=encryptor, batch_size=settings.seed_batch_size)
            return await seeder.recreate(
                estate_count=args.estates,
                building_count=args.buildings,
                partner_count=args.partners,
                tag_count=args.tags,
            )
    finally:
        await get_engine().dispose()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    result = asyncio.run(run(args))

    print("Seed complete")
    for name, count in result.to_dict().items():
        print(f"{name}_created={count}")
    print()
    print("Inspect:")
    print("  GET /estates/paged?page=1&page_size=20")
    print("  GET /estates/distinct?property_name=comment")
    print("  GET /estates/mappings")


if __name__ == "__main__":
    main()
