"""
Inventory services — modular organization of inventory operations.

    from stockflow.services import StockLedger, Receipts, Deliveries, StatusWorkflow
"""

from stockflow.services.documents import Deliveries, MovementDocuments, Receipts
from stockflow.services.history import HistoryRecorder
from stockflow.services.ledger import StockLedger
from stockflow.services.queries import InventoryQueries
from stockflow.services.sites import Locations, Warehouses
from stockflow.services.workflow import StatusWorkflow

__all__ = [
    'StockLedger',
    'HistoryRecorder',
    'MovementDocuments',
    'Receipts',
    'Deliveries',
    'StatusWorkflow',
    'Warehouses',
    'Locations',
    'InventoryQueries',
]
