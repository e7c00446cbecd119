from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from core.config import settings


class StaffSession(BaseModel):
    """Who is checking stock, where, and until when (next local midnight)."""

    store: str
    shift: str
    staff: str
    started_at: datetime
    expires_at: datetime

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now < self.expires_at


def store_tz() -> tzinfo:
    name = (settings.store_timezone or "UTC").strip()
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def next_local_midnight(now: datetime, tz: tzinfo) -> datetime:
    local = now.astimezone(tz)
    # Rebuild through the zone so DST offsets apply to the new date.
    midnight = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return midnight.astimezone(timezone.utc)


def start_session(
    store: str,
    shift: str,
    staff: str,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> StaffSession:
    fields = {"store": store, "shift": shift, "staff": staff}
    for name, value in fields.items():
        if not (value or "").strip():
            raise ValueError(f"{name} is required")

    now = now or datetime.now(timezone.utc)
    tz = tz or store_tz()
    return StaffSession(
        store=store.strip(),
        shift=shift.strip(),
        staff=staff.strip(),
        started_at=now.astimezone(timezone.utc),
        expires_at=next_local_midnight(now, tz),
    )
