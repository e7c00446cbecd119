from typing import Optional

from pydantic import BaseModel


class StaffSessionCreate(BaseModel):
    store: Optional[str] = None
    shift: Optional[str] = None
    staff: Optional[str] = None
