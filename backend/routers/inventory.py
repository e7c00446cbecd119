import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session
from db.inventory import Category as CategoryModel
from db.inventory import Item as ItemModel
from db.inventory import StockLog as StockLogModel
from schemas.inventory import CategoryRead, ItemRead, StockLogCreate, StockLogRead

logger = logging.getLogger(__name__)

router = APIRouter()


def must_store(store: Optional[str]) -> str:
    s = (store or "").strip()
    if not s:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="store is required")
    return s


@router.get("/items", response_model=List[ItemRead])
async def list_items(
    store: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """
    List active catalog items, sorted by category, sub_category, name.

    With a store, only that store's items plus shared (store-less) items are returned.
    """
    stmt = (
        select(ItemModel)
        .where(ItemModel.is_active.is_(True))
        .where(ItemModel.deleted_at.is_(None))
    )
    s = (store or "").strip()
    if s:
        stmt = stmt.where(or_(ItemModel.store == s, ItemModel.store.is_(None)))

    res = await db.execute(
        stmt.order_by(
            ItemModel.category.asc(),
            ItemModel.sub_category.asc().nulls_first(),
            ItemModel.name.asc(),
        )
    )
    return [ItemRead(**it.to_schema) for it in res.scalars().all()]


@router.get("/categories", response_model=List[CategoryRead])
async def list_categories(
    store: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    store = must_store(store)
    res = await db.execute(
        select(CategoryModel)
        .where(CategoryModel.store == store)
        .where(CategoryModel.is_active.is_(True))
        .where(CategoryModel.deleted_at.is_(None))
        .order_by(CategoryModel.sort_order.asc().nulls_last(), CategoryModel.name.asc())
    )
    return [CategoryRead(**c.to_schema) for c in res.scalars().all()]


@router.post("/log", response_model=StockLogRead, status_code=status.HTTP_201_CREATED)
async def create_log(
    payload: StockLogCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Append one stock check. Logs are never updated; the newest row per item is its current state."""
    store = must_store(payload.store)
    for field in ("staff", "shift", "item_id", "expiry"):
        if getattr(payload, field) is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} is required")

    try:
        item = await db.get(ItemModel, payload.item_id)
        # Shared items (no store) can be logged by any store.
        if item is None or (item.store is not None and item.store != store):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

        m = StockLogModel(
            store=store,
            staff=payload.staff,
            shift=payload.shift,
            item_id=item.id,
            item_name=payload.item_name or item.name,
            category=payload.category or item.category,
            sub_category=payload.sub_category or item.sub_category,
            quantity=payload.quantity,
            expiry=payload.expiry,
        )
        db.add(m)
        await db.commit()
        await db.refresh(m)
    except HTTPException:
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("create_log failed for store %s", store)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to save log: {e}")

    logger.info("Logged item %s for store %s (qty=%s)", m.item_id, store, m.quantity)
    return StockLogRead(**m.to_schema)
