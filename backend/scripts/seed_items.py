"""
Seed a demo catalog (categories + items) for one store.

Run locally:
  python backend/scripts/seed_items.py --store PDD

Uses DATABASE_URL like the backend (dotenv supported by core.config).
Idempotent: existing (store, name) rows are left alone.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from core.logger import setup_logger  # noqa: E402
from db.database import create_db_and_tables, get_session_maker  # noqa: E402
from db.inventory import Category, Item  # noqa: E402

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedItem:
    name: str
    category: str
    shelf_life_days: int = 0
    sub_category: Optional[str] = None


SEED_CATEGORIES: list[tuple[str, int]] = [
    ("Bread", 10),
    ("Protein", 20),
    ("Vegetables", 30),
    ("Dairy", 40),
    ("Sauce", 50),
    ("Unopened Chiller", 60),
    ("Dry Goods", 70),
]

SEED_ITEMS: list[SeedItem] = [
    SeedItem("Bread", "Bread", 1),
    SeedItem("Honey Oat", "Bread", 2),
    SeedItem("Chicken Bacon", "Protein", 1),
    SeedItem("Tuna Packet", "Protein", 3),
    SeedItem("Shallot", "Vegetables", 2),
    SeedItem("Corn", "Vegetables", 3),
    SeedItem("Milk", "Dairy", 5),
    SeedItem("Ceddar Cheese", "Dairy", 5),
    SeedItem("Chipotle Southwest", "Sauce", 14, "Sandwich Unit"),
    SeedItem("Honey Mustard", "Sauce", 14, "Sandwich Unit"),
    SeedItem("Sweet Onion", "Sauce", 14, "Standby"),
    SeedItem("Jalapeños Cheese", "Unopened Chiller", 30),
    SeedItem("Olive Oil", "Dry Goods", 90),
    SeedItem("Cookies", "Dry Goods", 7),
]


async def seed_catalog(db: AsyncSession, store: str) -> dict:
    """Insert missing categories and items for a store. Returns created counts."""
    created = {"categories": 0, "items": 0}

    for name, sort_order in SEED_CATEGORIES:
        res = await db.execute(
            select(Category).where(Category.store == store).where(func.lower(Category.name) == name.lower())
        )
        if res.scalar_one_or_none():
            continue
        db.add(Category(store=store, name=name, sort_order=sort_order, is_active=True))
        created["categories"] += 1

    for s in SEED_ITEMS:
        res = await db.execute(
            select(Item).where(Item.store == store).where(func.lower(Item.name) == s.name.lower())
        )
        if res.scalar_one_or_none():
            continue
        db.add(
            Item(
                store=store,
                name=s.name,
                category=s.category,
                sub_category=s.sub_category,
                shelf_life_days=s.shelf_life_days,
                is_active=True,
            )
        )
        created["items"] += 1

    await db.commit()
    return created


async def main(store: str) -> None:
    await create_db_and_tables()
    async with get_session_maker()() as db:
        created = await seed_catalog(db, store)
    logger.info(
        "Seeded store %s: %d categories, %d items created",
        store,
        created["categories"],
        created["items"],
    )


if __name__ == "__main__":
    setup_logger()
    parser = argparse.ArgumentParser()
    parser.add_argument("--store", required=True, help="Store code the catalog belongs to (e.g. PDD)")
    args = parser.parse_args()
    asyncio.run(main(args.store.strip()))
