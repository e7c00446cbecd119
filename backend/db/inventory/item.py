from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (UniqueConstraint("store", "name", name="ux_items_store_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)

    # NULL store means the item is shared by every store
    store = Column(Text, nullable=True, index=True)

    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    sub_category = Column(String, nullable=True)
    shelf_life_days = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    logs = relationship("StockLog", back_populates="item")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "store": self.store,
            "name": self.name,
            "category": self.category,
            "sub_category": self.sub_category,
            "shelf_life_days": int(self.shelf_life_days or 0),
        }
