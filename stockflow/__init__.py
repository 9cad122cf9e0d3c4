"""
Django Stockflow — multi-tenant inventory with receipts, deliveries and an audit trail.

Usage:
    from stockflow import inventory, Tenant, InventoryError

    tenant = Tenant(user_id)
    inventory.upsert(tenant, product_code='W-1', product_name='Widget', quantity=5)
    inventory.available(tenant, 'W-1')  # 5
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from stockflow.service import Inventory
        return Inventory
    elif name == 'Tenant':
        from stockflow.tenancy import Tenant
        return Tenant
    elif name == 'LineItem':
        from stockflow.snapshots import LineItem
        return LineItem
    elif name in ('InventoryError', 'ValidationError', 'InsufficientStock',
                  'InvalidTransition', 'DuplicateError', 'NotFound', 'StorageError'):
        from stockflow import exceptions
        return getattr(exceptions, name)
    elif name in ('StockItem', 'Receipt', 'Delivery', 'HistoryEntry',
                  'Warehouse', 'Location'):
        from stockflow import models
        return getattr(models, name)
    elif name in ('ReceiptStatus', 'DeliveryStatus', 'HistoryType', 'MovementKind'):
        from stockflow.models import enums
        return getattr(enums, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'Tenant',
    'LineItem',
    'InventoryError',
    'ValidationError',
    'InsufficientStock',
    'InvalidTransition',
    'DuplicateError',
    'NotFound',
    'StorageError',
    'StockItem',
    'Receipt',
    'Delivery',
    'HistoryEntry',
    'Warehouse',
    'Location',
    'ReceiptStatus',
    'DeliveryStatus',
    'HistoryType',
    'MovementKind',
]

__version__ = '0.1.0'
