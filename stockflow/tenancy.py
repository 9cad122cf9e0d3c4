"""
Tenant context.

A Tenant is the explicit partition handle passed to every service call.
It replaces any ambient "current user" state: whoever holds a Tenant can
act on that user's inventory and nothing else.

Usage:
    tenant = Tenant.for_user(request.user.pk)
    inventory.receipts.list(tenant)
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models

from stockflow.conf import stockflow_settings
from stockflow.exceptions import NotFound, ValidationError


@dataclass(frozen=True)
class Tenant:
    """Partition key for one user's inventory."""

    user_id: int

    def __post_init__(self):
        if isinstance(self.user_id, bool) or not isinstance(self.user_id, int) or self.user_id <= 0:
            raise ValidationError('INVALID_TENANT', field='user_id', value=self.user_id)

    @classmethod
    def for_user(cls, user_id: int) -> Tenant:
        """
        Build a tenant from a user id.

        When VERIFY_TENANTS is on, the id must be known to the tenant store.

        Raises:
            ValidationError('INVALID_TENANT'): id is not a positive integer
            NotFound('TENANT_NOT_FOUND'): store does not know the id
        """
        tenant = cls(user_id)
        if stockflow_settings.VERIFY_TENANTS:
            from stockflow.adapters import get_tenant_store

            if get_tenant_store().get_by_id(user_id) is None:
                raise NotFound('TENANT_NOT_FOUND', entity='tenant', id=user_id)
        return tenant

    @classmethod
    def from_login(cls, login_id: str, password: str | None = None) -> Tenant:
        """
        Resolve a login id through the tenant store.

        If a password is given it must verify.
        """
        from stockflow.adapters import get_tenant_store

        store = get_tenant_store()
        record = store.find_by_login_id(login_id)
        if record is None:
            raise NotFound('TENANT_NOT_FOUND', entity='tenant', login_id=login_id)
        if password is not None and not store.verify_credentials(login_id, password):
            raise ValidationError('INVALID_CREDENTIALS', login_id=login_id)
        return cls(record.user_id)

    def __str__(self) -> str:
        return f"tenant:{self.user_id}"


class TenantQuerySet(models.QuerySet):
    """QuerySet with tenant scoping."""

    def for_tenant(self, tenant: Tenant):
        """Filter rows owned by tenant."""
        return self.filter(tenant_id=tenant.user_id)


TenantManager = models.Manager.from_queryset(TenantQuerySet)
