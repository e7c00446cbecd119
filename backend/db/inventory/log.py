from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class StockLog(Base):
    """One staff stock check. Rows are never updated or deleted."""

    __tablename__ = "logs"
    __table_args__ = (Index("ix_logs_store_created_at", "store", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)

    store = Column(Text, nullable=False, index=True)
    staff = Column(Text, nullable=False)
    shift = Column(Text, nullable=False)

    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)

    # Snapshot of the catalog row at submission time
    item_name = Column(String, nullable=True)
    category = Column(String, nullable=True)
    sub_category = Column(String, nullable=True)

    quantity = Column(Integer, nullable=True)  # NULL = not recorded
    expiry = Column(Text, nullable=False)  # stored as submitted, parsed on read

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    item = relationship("Item", back_populates="logs")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "store": self.store,
            "staff": self.staff,
            "shift": self.shift,
            "item_id": self.item_id,
            "item_name": self.item_name,
            "category": self.category,
            "sub_category": self.sub_category,
            "quantity": self.quantity,
            "expiry": self.expiry,
            "created_at": self.created_at,
        }
