"""
Noop Tenant Store — Stub adapter for development and testing.

This adapter implements the TenantStore protocol with trivial defaults:
- Every positive user id is a known, verified tenant
- Login and email lookups find nothing
- Credentials never verify

Usage in settings.py:
    STOCKFLOW = {
        "TENANT_STORE": "stockflow.adapters.noop.NoopTenantStore",
    }

WARNING: Do NOT use in production. This adapter performs no real lookup
and will accept any user id.
"""

from __future__ import annotations

from stockflow.protocols.tenants import TenantRecord


class NoopTenantStore:
    """
    No-operation tenant store for development and testing.

    Implements the ``TenantStore`` protocol without any external
    dependencies, making it suitable for local development and for tests
    that only need a partition key.
    """

    def get_by_id(self, user_id: int) -> TenantRecord | None:
        """Any positive id resolves to a placeholder record."""
        if user_id <= 0:
            return None
        return TenantRecord(user_id=user_id, login_id=f"user-{user_id}")

    def find_by_login_id(self, login_id: str) -> TenantRecord | None:
        return None

    def find_by_email_id(self, email: str) -> TenantRecord | None:
        return None

    def verify_credentials(self, login_id: str, password: str) -> bool:
        return False
