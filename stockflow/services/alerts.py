"""
Stock alerts — items below their own minimum level.

Usage:
    from stockflow.services.alerts import check_low_stock

    # Run periodically (cron) or after a delivery is done
    triggered = check_low_stock(tenant)
    # Returns list of (StockItem, shortfall) tuples
"""

import logging

from stockflow.models.stock_item import StockItem
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')


def check_low_stock(tenant: Tenant) -> list[tuple[StockItem, int]]:
    """
    Items whose quantity is under min_stock_level.

    Items with min_stock_level 0 never trigger.

    Returns:
        List of (item, shortfall) tuples, most urgent first.
    """
    triggered = []
    for item in StockItem.objects.for_tenant(tenant).below_minimum().order_by('quantity', 'id'):
        shortfall = item.min_stock_level - item.quantity
        triggered.append((item, shortfall))
        logger.warning(
            "stockflow.alert.low_stock",
            extra={
                "tenant": tenant.user_id,
                "item_id": item.pk,
                "product_code": item.product_code,
                "min_stock_level": item.min_stock_level,
                "available": item.quantity,
            },
        )
    return triggered
