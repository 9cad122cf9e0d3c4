"""
Stockflow configuration.

Usage in settings.py:
    STOCKFLOW = {
        "TENANT_STORE": "stockflow.adapters.django_auth.DjangoUserTenantStore",
        "VERIFY_TENANTS": True,
        "DEFAULT_WAREHOUSE_CODE": "WH1",
        "DELIVERY_SEQUENCING": "last_suffix",
        "REVERSE_LEDGER_ON_DELETE": False,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockflowSettings:
    """Stockflow configuration settings."""

    # Tenant store backend (dotted path)
    TENANT_STORE: str = ""

    # Check every Tenant.for_user() id against the tenant store
    VERIFY_TENANTS: bool = False

    # Reference prefix used when the tenant has no warehouse yet
    DEFAULT_WAREHOUSE_CODE: str = "WH1"

    # Minimum digits of the reference sequence (grows past it)
    REFERENCE_PADDING: int = 4

    # "last_suffix" or "row_count"
    DELIVERY_SEQUENCING: str = "last_suffix"

    # Take stock back out (receipts) or put it back (deliveries) when a done document is deleted
    REVERSE_LEDGER_ON_DELETE: bool = False

    # Dashboard "low stock" bound (exclusive)
    LOW_STOCK_THRESHOLD: int = 10


def get_stockflow_settings() -> StockflowSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKFLOW", {})
    return StockflowSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockflowSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockflow_settings(), name)


stockflow_settings = _LazySettings()
