from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AlertRead(BaseModel):
    item_id: int
    name: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    expiry: Optional[datetime] = None
    quantity: Optional[int] = None
    created_at: Optional[datetime] = None


class AlertsRead(BaseModel):
    expiry: List[AlertRead]
    low_stock: List[AlertRead]
