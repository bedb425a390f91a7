"""Script to initialize the database."""

import argparse
import asyncio

from sqlalchemy import insert, select

from app.database import dispose_engine, get_engine
from app.models import clinic_locations, metadata


async def init_db(locations: list[str]) -> None:
    """Create all tables and add any clinic locations not yet present."""
    async with get_engine().begin() as conn:
        await conn.run_sync(metadata.create_all)

        existing = set((await conn.execute(select(clinic_locations.c.name))).scalars())
        new_locations = [name for name in locations if name not in existing]
        if new_locations:
            await conn.execute(
                insert(clinic_locations), [{"name": name} for name in new_locations]
            )

    await dispose_engine()
    print("✓ Database initialized successfully!")
    for name in new_locations:
        print(f"  + clinic location: {name}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and seed clinic locations")
    parser.add_argument(
        "--location",
        action="append",
        default=[],
        help="Clinic location name to provision (repeatable)",
    )
    args = parser.parse_args()
    asyncio.run(init_db(args.location))


if __name__ == "__main__":
    main()
