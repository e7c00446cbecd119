import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.alerts import expiry_alerts, latest_per_item, low_stock_alerts, zero_stock_alerts
from core.config import settings
from db.database import get_async_session
from db.inventory import StockLog as StockLogModel
from routers.inventory import must_store
from schemas.alerts import AlertRead, AlertsRead

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_current_state(db: AsyncSession, store: str) -> Dict[int, Any]:
    # Bounded read of the newest logs; id breaks created_at ties.
    res = await db.execute(
        select(StockLogModel)
        .where(StockLogModel.store == store)
        .order_by(StockLogModel.created_at.desc(), StockLogModel.id.desc())
        .limit(settings.log_fetch_limit)
    )
    return latest_per_item(res.scalars().all())


async def _current_state_or_500(db: AsyncSession, store: str, what: str) -> Dict[int, Any]:
    try:
        return await _load_current_state(db, store)
    except Exception as e:
        logger.exception("%s failed for store %s", what, store)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load {what}: {e}",
        )


def _expiry_window() -> timedelta:
    return timedelta(hours=settings.expiry_window_hours)


@router.get("/expiry", response_model=List[AlertRead])
async def list_expiry_alerts(
    store: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """Current items already expired or expiring within the window, soonest first."""
    store = must_store(store)
    current = await _current_state_or_500(db, store, "expiry alerts")
    return expiry_alerts(current, datetime.now(timezone.utc), _expiry_window())


@router.get("/alerts", response_model=AlertsRead)
async def list_alerts(
    store: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Expiry alerts plus the low-stock view derived from them.

    low_stock only covers items already in the expiry window
    (quantity <= LOW_STOCK_THRESHOLD, sauces excluded). See /low_stock for
    the zero-quantity view over every item.
    """
    store = must_store(store)
    current = await _current_state_or_500(db, store, "alerts")
    expiring = expiry_alerts(current, datetime.now(timezone.utc), _expiry_window())
    return {
        "expiry": expiring,
        "low_stock": low_stock_alerts(expiring, settings.low_stock_threshold),
    }


@router.get("/low_stock", response_model=List[AlertRead])
async def list_zero_stock_alerts(
    store: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """Every current item at exactly zero quantity, most recently logged first."""
    store = must_store(store)
    current = await _current_state_or_500(db, store, "low stock alerts")
    return zero_stock_alerts(current)
