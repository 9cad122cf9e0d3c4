"""
Stockflow Models.

Core models for inventory management:
- StockItem: On-hand quantity per product code (the ledger)
- Receipt / Delivery: Movement documents with their lines
- HistoryEntry: Immutable audit log
- Warehouse / Location: Reference data
"""

from stockflow.models.documents import (
    Delivery,
    DeliveryLine,
    MovementDocument,
    MovementLine,
    Receipt,
    ReceiptLine,
)
from stockflow.models.enums import DeliveryStatus, HistoryType, MovementKind, ReceiptStatus
from stockflow.models.history import HistoryEntry
from stockflow.models.sites import Location, Warehouse
from stockflow.models.stock_item import StockItem

__all__ = [
    'ReceiptStatus',
    'DeliveryStatus',
    'HistoryType',
    'MovementKind',
    'StockItem',
    'MovementDocument',
    'MovementLine',
    'Receipt',
    'ReceiptLine',
    'Delivery',
    'DeliveryLine',
    'HistoryEntry',
    'Warehouse',
    'Location',
]
