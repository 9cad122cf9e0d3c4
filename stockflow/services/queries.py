"""
Inventory queries — read-only dashboard operations.

All methods are classmethod on InventoryQueries and use no locking.
"""

from datetime import date
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce

from stockflow.conf import stockflow_settings
from stockflow.models.enums import DONE, DeliveryStatus, MovementKind, ReceiptStatus
from stockflow.models.stock_item import StockItem
from stockflow.services.references import MODELS
from stockflow.tenancy import Tenant

STATUSES = {
    MovementKind.RECEIPT: ReceiptStatus,
    MovementKind.DELIVERY: DeliveryStatus,
}


class InventoryQueries:
    """Read-only summary and search methods."""

    @classmethod
    def stock_summary(cls, tenant: Tenant) -> dict:
        """
        Headline stock figures.

        Returns:
            Dict with total_items, low_stock (0 < quantity < LOW_STOCK_THRESHOLD),
            out_of_stock, total_quantity and total_value
        """
        threshold = stockflow_settings.LOW_STOCK_THRESHOLD
        return StockItem.objects.for_tenant(tenant).aggregate(
            total_items=Count('id'),
            low_stock=Count('id', filter=Q(quantity__gt=0, quantity__lt=threshold)),
            out_of_stock=Count('id', filter=Q(quantity=0)),
            total_quantity=Coalesce(Sum('quantity'), 0),
            total_value=Coalesce(Sum('total_value'), Decimal('0')),
        )

    @classmethod
    def movement_summary(cls, tenant: Tenant, kind, today: date | None = None) -> dict:
        """
        Document counts per status, plus `expected_today`.

        expected_today counts documents scheduled for today that are not done.
        """
        kind = MovementKind(kind)
        today = today or date.today()
        qs = MODELS[kind].objects.for_tenant(tenant)

        counts = {
            row['status']: row['n']
            for row in qs.order_by().values('status').annotate(n=Count('id'))
        }
        summary = {status.value: counts.get(status.value, 0) for status in STATUSES[kind]}
        summary['total'] = sum(counts.values())
        summary['expected_today'] = qs.filter(scheduled_date=today).exclude(status=DONE).count()
        return summary

    @classmethod
    def search_stock(cls, tenant: Tenant, query: str):
        """Items matching `query` on name, code, category or supplier."""
        return StockItem.objects.for_tenant(tenant).search(query).order_by('product_name', 'id')

    @classmethod
    def below_minimum(cls, tenant: Tenant):
        return StockItem.objects.for_tenant(tenant).below_minimum().order_by('product_name', 'id')
