"""
Alert derivation over the append-only stock log.

Current state per item is never stored; it is rebuilt on every request:

1. latest_per_item() collapses a recency-ordered list of observations to the
   newest observation per item_id.
2. expiry_alerts() keeps items expiring at or before now + window.
3. low_stock_alerts() filters the expiry alerts (quantity <= threshold,
   sauces excluded). zero_stock_alerts() works over the whole reduced state
   and only flags quantity == 0.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_ITEM_NAME = "Item"
SAUCE_CATEGORIES = frozenset({"sauce", "sauces"})


def as_utc(value: datetime) -> datetime:
    # Naive timestamps (bare dates, SQLite reads) are taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_expiry(value: Any) -> Optional[datetime]:
    """Parse a stored expiry into an aware UTC datetime, or None if it isn't a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        try:
            return as_utc(value)
        except OverflowError:
            return None
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    s = str(value).strip()
    if not s:
        return None
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(s))
    except (ValueError, OverflowError):
        # Out-of-range offsets near year 1 or 9999 overflow when shifted to UTC.
        return None


def latest_per_item(observations: Iterable[Any]) -> Dict[int, Any]:
    """
    Reduce observations (newest first) to one entry per item_id.

    First seen wins, so the caller must pass rows ordered by created_at
    descending. Rows without an item_id are dropped.
    """
    current: Dict[int, Any] = {}
    for obs in observations:
        item_id = getattr(obs, "item_id", None)
        if item_id is None or item_id in current:
            continue
        current[item_id] = obs
    return current


def _display_name(obs: Any) -> str:
    name = (getattr(obs, "item_name", None) or "").strip()
    return name or DEFAULT_ITEM_NAME


def is_sauce_category(category: Optional[str]) -> bool:
    return (category or "").strip().lower() in SAUCE_CATEGORIES


def expiry_alerts(
    current: Dict[int, Any],
    now: Optional[datetime] = None,
    window: timedelta = timedelta(hours=24),
) -> List[dict]:
    """Items already expired or expiring within the rolling window, soonest first."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    horizon = now + window

    out = []
    for item_id, obs in current.items():
        expiry = parse_expiry(getattr(obs, "expiry", None))
        if expiry is None or expiry > horizon:
            continue
        out.append(
            {
                "item_id": item_id,
                "name": _display_name(obs),
                "category": getattr(obs, "category", None),
                "sub_category": getattr(obs, "sub_category", None),
                "expiry": expiry,
                "quantity": getattr(obs, "quantity", None),
                "created_at": getattr(obs, "created_at", None),
            }
        )
    out.sort(key=lambda a: a["expiry"])
    return out


def low_stock_alerts(alerts: Iterable[dict], threshold: int = 2) -> List[dict]:
    """Expiry alerts with quantity <= threshold, sauces excluded. Input order is kept."""
    return [
        a
        for a in alerts
        if a.get("quantity") is not None
        and a["quantity"] <= threshold
        and not is_sauce_category(a.get("category"))
    ]


def zero_stock_alerts(current: Dict[int, Any]) -> List[dict]:
    """Every item whose current quantity is exactly 0, most recently logged first."""
    out = [
        {
            "item_id": item_id,
            "name": _display_name(obs),
            "category": getattr(obs, "category", None),
            "sub_category": getattr(obs, "sub_category", None),
            "expiry": parse_expiry(getattr(obs, "expiry", None)),
            "quantity": obs.quantity,
            "created_at": getattr(obs, "created_at", None),
        }
        for item_id, obs in current.items()
        if getattr(obs, "quantity", None) == 0
    ]
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    out.sort(key=lambda a: as_utc(a["created_at"]) if a["created_at"] is not None else epoch, reverse=True)
    return out
