"""
Stockflow Protocols.

Defines interfaces for external system integration.
"""

from stockflow.protocols.tenants import (
    TenantRecord,
    TenantStore,
)

__all__ = [
    "TenantRecord",
    "TenantStore",
]
