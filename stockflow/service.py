"""
Inventory Service — The single public interface for all inventory operations.

Usage:
    from stockflow import inventory, Tenant, LineItem

    tenant = Tenant(user_id)
    receipt_id = inventory.receipts.create(
        tenant,
        {'receive_from': 'Acme Supplies'},
        [LineItem('Widget', 10, '2.50', product_code='W-1')],
    )
    inventory.set_status(tenant, 'receipt', receipt_id, 'ready')
    inventory.set_status(tenant, 'receipt', receipt_id, 'done')
    inventory.available(tenant, 'W-1')  # 10
"""

from stockflow.models.enums import MovementKind
from stockflow.services.alerts import check_low_stock
from stockflow.services.documents import Deliveries, Receipts
from stockflow.services.history import HistoryRecorder
from stockflow.services.ledger import StockLedger
from stockflow.services.queries import InventoryQueries
from stockflow.services.references import next_reference
from stockflow.services.sites import Locations, Warehouses
from stockflow.tenancy import Tenant


class Inventory:
    """
    Single interface for all inventory operations.

    Every method takes the caller's Tenant first. Component services are
    exposed as attributes (inventory.ledger, inventory.receipts, ...);
    the common calls are shortcuts on the facade itself.

    IMPORTANT: All state-changing methods use atomic transactions
    with appropriate locking. See each service's docstrings.
    """

    ledger = StockLedger
    history = HistoryRecorder
    receipts = Receipts
    deliveries = Deliveries
    warehouses = Warehouses
    locations = Locations
    queries = InventoryQueries

    DOCUMENTS = {
        MovementKind.RECEIPT: Receipts,
        MovementKind.DELIVERY: Deliveries,
    }

    # ══════════════════════════════════════════════════════════════
    # LEDGER
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def upsert(cls, tenant: Tenant, **kwargs) -> int:
        """Shortcut for StockLedger.upsert()."""
        return StockLedger.upsert(tenant, **kwargs)

    @classmethod
    def available(cls, tenant: Tenant, product_code: str) -> int:
        return StockLedger.available(tenant, product_code)

    # ══════════════════════════════════════════════════════════════
    # DOCUMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def documents(cls, kind):
        """Receipts or Deliveries for a MovementKind (or its value)."""
        return cls.DOCUMENTS[MovementKind(kind)]

    @classmethod
    def next_reference(cls, tenant: Tenant, kind, warehouse_code: str | None = None) -> str:
        return next_reference(tenant, kind, warehouse_code)

    @classmethod
    def set_status(cls, tenant: Tenant, kind, doc_id: int, status: str):
        """
        Move a receipt or delivery to its next status.

        Raises:
            InvalidTransition: `status` is not the single next status
            InsufficientStock: Delivery `done` with a short product
        """
        return cls.documents(kind).set_status(tenant, doc_id, status)

    # ══════════════════════════════════════════════════════════════
    # DASHBOARD
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def summary(cls, tenant: Tenant) -> dict:
        """Stock figures plus receipt and delivery counts."""
        return {
            'stock': InventoryQueries.stock_summary(tenant),
            'receipts': InventoryQueries.movement_summary(tenant, MovementKind.RECEIPT),
            'deliveries': InventoryQueries.movement_summary(tenant, MovementKind.DELIVERY),
        }

    @classmethod
    def low_stock(cls, tenant: Tenant) -> list:
        return check_low_stock(tenant)
