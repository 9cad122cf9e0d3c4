"""
Stockflow Adapters.

Implementations of protocols for external systems.
"""

from stockflow.adapters.loader import get_tenant_store, reset_tenant_store

__all__ = [
    "get_tenant_store",
    "reset_tenant_store",
]
