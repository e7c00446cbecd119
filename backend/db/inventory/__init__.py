"""
Stock-check inventory (store-separated).

Models:
- Item (catalog entry, optionally scoped to a store)
- Category (tile ordering per store)
- StockLog (append-only observations; current state is derived, never stored)
"""

from .category import Category
from .item import Item
from .log import StockLog

__all__ = ["Category", "Item", "StockLog"]
