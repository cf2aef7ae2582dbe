"""Seed the demo stores into the database.

Stores that already exist (matched by name) are left untouched, so the
script can be re-run safely.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from fulfilment.api.deps import DEFAULT_DATABASE_URL
from fulfilment.core.database import Base
from fulfilment.dao.store_dao import StoreDAO

DEMO_STORES = [
    ("TONSTAD", 10),
    ("KALLAX", 5),
    ("BESTÅ", 3),
]


async def seed(database_url: str) -> int:
    """Insert missing demo stores. Returns how many were created."""
    engine = create_async_engine(database_url)
    dao = StoreDAO()
    created = 0
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        factory = async_sessionmaker(engine, expire_on_commit=False)
        async with factory() as session:
            async with session.begin():
                for name, quantity in DEMO_STORES:
                    if await dao.get_by_name(session, name) is not None:
                        print(f"  skip    {name}")
                        continue
                    store = await dao.create(
                        session, name=name, quantity_products_in_stock=quantity
                    )
                    print(f"  created {store.name} (id={store.id})")
                    created += 1
    finally:
        await engine.dispose()
    return created


def main() -> None:
    url = os.environ.get("FULFILMENT_DATABASE_URL", DEFAULT_DATABASE_URL)
    created = asyncio.run(seed(url))
    print(f"Done: {created} store(s) created.")


if __name__ == "__main__":
    main()
