from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class ItemRead(BaseModel):
    id: int
    store: Optional[str] = None
    name: str
    category: str
    sub_category: Optional[str] = None
    shelf_life_days: int = 0


class CategoryRead(BaseModel):
    id: int
    store: str
    name: str
    sort_order: Optional[int] = None


class StockLogCreate(BaseModel):
    # Required fields are checked in the router so the 400 names the field.
    item_id: Optional[int] = None
    store: Optional[str] = None
    shift: Optional[str] = None
    staff: Optional[str] = None
    expiry: Optional[str] = None

    # None and "" both mean "not recorded"; 0 is a real count.
    quantity: Optional[int] = None

    item_name: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _blank_quantity(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("quantity")
    @classmethod
    def _non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("quantity must be >= 0")
        return v

    @field_validator("store", "shift", "staff", "expiry", "item_name", "category", "sub_category")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StockLogRead(BaseModel):
    id: int
    store: str
    staff: str
    shift: str
    item_id: Optional[int] = None
    item_name: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    quantity: Optional[int] = None
    expiry: str
    created_at: datetime
