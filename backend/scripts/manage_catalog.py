"""
Maintain the store catalog (items + categories) from the command line.

Run locally:
  python backend/scripts/manage_catalog.py add-item --store PDD --name Milk --category Dairy --shelf-life-days 5
  python backend/scripts/manage_catalog.py update-item --store PDD --id 12 --sub-category ""
  python backend/scripts/manage_catalog.py delete-item --store PDD --id 12
  python backend/scripts/manage_catalog.py add-category --store PDD --name Dairy --sort-order 40
  python backend/scripts/manage_catalog.py update-category --store PDD --id 3 --sort-order 5
  python backend/scripts/manage_catalog.py delete-category --store PDD --id 3

Adding an existing (store, name) updates it and brings it back if it was deleted.
Deletes are soft: is_active=FALSE, deleted_at=now; the row and its logs stay.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from core.logger import setup_logger  # noqa: E402
from db.database import create_db_and_tables, get_session_maker  # noqa: E402
from db.inventory import Category, Item  # noqa: E402

logger = logging.getLogger(__name__)


def _required(value: Optional[str], field: str) -> str:
    v = (value or "").strip()
    if not v:
        raise ValueError(f"{field} is required")
    return v


def _shelf_life(value: Optional[int]) -> Optional[int]:
    if value is not None and value < 0:
        raise ValueError("shelf_life_days must be >= 0")
    return value


async def upsert_item(
    db: AsyncSession,
    store: str,
    name: str,
    category: str,
    sub_category: Optional[str] = None,
    shelf_life_days: int = 0,
) -> Item:
    store = _required(store, "store")
    name = _required(name, "name")
    category = _required(category, "category")
    shelf_life_days = _shelf_life(shelf_life_days) or 0
    sub_category = (sub_category or "").strip() or None

    res = await db.execute(select(Item).where(Item.store == store).where(Item.name == name))
    item = res.scalar_one_or_none()
    if item is None:
        item = Item(store=store, name=name)
        db.add(item)

    item.category = category
    item.sub_category = sub_category
    item.shelf_life_days = shelf_life_days
    item.is_active = True
    item.deleted_at = None

    await db.commit()
    await db.refresh(item)
    return item


async def update_item(
    db: AsyncSession,
    item_id: int,
    store: str,
    category: Optional[str] = None,
    sub_category: Optional[str] = None,
    shelf_life_days: Optional[int] = None,
) -> Optional[Item]:
    """Patch an item. None leaves a field unchanged; an empty sub_category clears it."""
    store = _required(store, "store")
    shelf_life_days = _shelf_life(shelf_life_days)

    res = await db.execute(select(Item).where(Item.id == item_id).where(Item.store == store))
    item = res.scalar_one_or_none()
    if item is None:
        return None

    if category is not None:
        item.category = _required(category, "category")
    if sub_category is not None:
        item.sub_category = sub_category.strip() or None
    if shelf_life_days is not None:
        item.shelf_life_days = shelf_life_days

    await db.commit()
    await db.refresh(item)
    return item


async def soft_delete_item(db: AsyncSession, item_id: int, store: str) -> Optional[Item]:
    store = _required(store, "store")
    res = await db.execute(select(Item).where(Item.id == item_id).where(Item.store == store))
    item = res.scalar_one_or_none()
    if item is None:
        return None

    item.is_active = False
    item.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(item)
    return item


async def upsert_category(db: AsyncSession, store: str, name: str, sort_order: Optional[int] = 100) -> Category:
    store = _required(store, "store")
    name = _required(name, "name")

    res = await db.execute(select(Category).where(Category.store == store).where(Category.name == name))
    category = res.scalar_one_or_none()
    if category is None:
        category = Category(store=store, name=name)
        db.add(category)

    category.sort_order = sort_order
    category.is_active = True
    category.deleted_at = None

    await db.commit()
    await db.refresh(category)
    return category


async def update_category(
    db: AsyncSession,
    category_id: int,
    store: str,
    name: Optional[str] = None,
    sort_order: Optional[int] = None,
) -> Optional[Category]:
    store = _required(store, "store")
    res = await db.execute(select(Category).where(Category.id == category_id).where(Category.store == store))
    category = res.scalar_one_or_none()
    if category is None:
        return None

    if name is not None:
        category.name = _required(name, "name")
    if sort_order is not None:
        category.sort_order = sort_order

    await db.commit()
    await db.refresh(category)
    return category


async def soft_delete_category(db: AsyncSession, category_id: int, store: str) -> Optional[Category]:
    store = _required(store, "store")
    res = await db.execute(select(Category).where(Category.id == category_id).where(Category.store == store))
    category = res.scalar_one_or_none()
    if category is None:
        return None

    category.is_active = False
    category.deleted_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(category)
    return category


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maintain the store catalog")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add-item", help="Create or update an item by (store, name)")
    p.add_argument("--store", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--category", required=True)
    p.add_argument("--sub-category")
    p.add_argument("--shelf-life-days", type=int, default=0)

    p = sub.add_parser("update-item", help="Patch an item by id")
    p.add_argument("--store", required=True)
    p.add_argument("--id", type=int, required=True)
    p.add_argument("--category")
    p.add_argument("--sub-category", help='Pass "" to clear')
    p.add_argument("--shelf-life-days", type=int)

    p = sub.add_parser("delete-item", help="Soft delete an item by id")
    p.add_argument("--store", required=True)
    p.add_argument("--id", type=int, required=True)

    p = sub.add_parser("add-category", help="Create or update a category by (store, name)")
    p.add_argument("--store", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--sort-order", type=int, default=100)

    p = sub.add_parser("update-category", help="Rename or reorder a category by id")
    p.add_argument("--store", required=True)
    p.add_argument("--id", type=int, required=True)
    p.add_argument("--name")
    p.add_argument("--sort-order", type=int)

    p = sub.add_parser("delete-category", help="Soft delete a category by id")
    p.add_argument("--store", required=True)
    p.add_argument("--id", type=int, required=True)

    return parser


async def run(db: AsyncSession, args: argparse.Namespace):
    if args.command == "add-item":
        return await upsert_item(db, args.store, args.name, args.category, args.sub_category, args.shelf_life_days)
    if args.command == "update-item":
        return await update_item(db, args.id, args.store, args.category, args.sub_category, args.shelf_life_days)
    if args.command == "delete-item":
        return await soft_delete_item(db, args.id, args.store)
    if args.command == "add-category":
        return await upsert_category(db, args.store, args.name, args.sort_order)
    if args.command == "update-category":
        return await update_category(db, args.id, args.store, args.name, args.sort_order)
    if args.command == "delete-category":
        return await soft_delete_category(db, args.id, args.store)
    raise ValueError(f"unknown command: {args.command}")


async def main(args: argparse.Namespace) -> int:
    await create_db_and_tables()
    async with get_session_maker()() as db:
        try:
            row = await run(db, args)
        except ValueError as e:
            logger.error("%s failed: %s", args.command, e)
            return 2

    if row is None:
        logger.error("%s: id %s not found in store %s", args.command, args.id, args.store)
        return 1
    logger.info("%s ok: %s", args.command, row.to_schema)
    return 0


if __name__ == "__main__":
    setup_logger()
    sys.exit(asyncio.run(main(build_parser().parse_args())))
