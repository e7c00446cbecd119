from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint

from ..database import Base


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("store", "name", name="ux_categories_store_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    store = Column(Text, nullable=False, index=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "store": self.store,
            "name": self.name,
            "sort_order": self.sort_order,
        }
