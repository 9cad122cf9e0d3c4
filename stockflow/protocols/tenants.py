"""
Tenant Store Protocol — Interface for the account/credential store.

Stockflow defines this protocol. The host project (or any identity service)
implements it. Stockflow never validates credentials on its own: it only needs
a stable integer user id to partition every other table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TenantRecord:
    """Account information exposed by the tenant store."""

    user_id: int
    login_id: str
    email: str | None = None
    is_verified: bool = True


@runtime_checkable
class TenantStore(Protocol):
    """
    Protocol for tenant lookup.

    Implementations should provide methods to:
    - Resolve an account by id, login or email
    - Verify a login/password pair
    """

    def get_by_id(self, user_id: int) -> TenantRecord | None:
        """
        Get an account by its user id.

        Args:
            user_id: Integer id issued by the store

        Returns:
            TenantRecord or None if not found
        """
        ...

    def find_by_login_id(self, login_id: str) -> TenantRecord | None:
        """Get an account by login id."""
        ...

    def find_by_email_id(self, email: str) -> TenantRecord | None:
        """Get an account by email address (case-insensitive)."""
        ...

    def verify_credentials(self, login_id: str, password: str) -> bool:
        """
        Check a login/password pair.

        Returns:
            True only when the account exists and the password matches
        """
        ...
