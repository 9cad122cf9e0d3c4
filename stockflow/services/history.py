"""
History recorder — append-only audit log.

record() is called inside the caller's transaction, so an audit entry
commits or rolls back together with the change it describes.
"""

import logging

from django.db.models import Q
from django.utils import timezone

from stockflow.models.history import HistoryEntry
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')


class HistoryRecorder:
    """Insert-only access to HistoryEntry."""

    @classmethod
    def record(cls, tenant: Tenant, history_type, operation: str, *,
               product_name: str = '', product_code=None, quantity=None,
               previous_quantity=None, new_quantity=None, price=None,
               related_id=None, description: str = '') -> HistoryEntry:
        """
        Append one entry.

        created_at is clamped to the tenant's latest entry so the log stays
        monotonic even if the wall clock steps backwards.
        """
        now = timezone.now()
        latest = (
            HistoryEntry.objects.for_tenant(tenant)
            .order_by('-id')
            .values_list('created_at', flat=True)
            .first()
        )
        if latest is not None and now < latest:
            now = latest

        entry = HistoryEntry.objects.create(
            tenant_id=tenant.user_id,
            type=history_type,
            operation=operation,
            product_name=product_name or '',
            product_code=product_code or None,
            quantity=quantity,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            price=price,
            related_id=related_id,
            description=description or '',
            created_at=now,
        )
        logger.debug(
            "stockflow.history.recorded",
            extra={
                "tenant": tenant.user_id,
                "type": str(history_type),
                "operation": operation,
                "entry_id": entry.pk,
            },
        )
        return entry

    @classmethod
    def list(cls, tenant: Tenant, history_type=None, search: str | None = None):
        """
        Entries for display, newest first.

        Args:
            history_type: Optional HistoryType filter
            search: Optional case-insensitive text matched on operation,
                product name, product code or description
        """
        qs = HistoryEntry.objects.for_tenant(tenant)
        if history_type:
            qs = qs.of_type(history_type)
        if search:
            qs = qs.filter(
                Q(operation__icontains=search)
                | Q(product_name__icontains=search)
                | Q(product_code__icontains=search)
                | Q(description__icontains=search)
            )
        return qs.order_by('-created_at', '-id')

    @classmethod
    def for_document(cls, tenant: Tenant, history_type, document_id: int):
        """Entries about one document, oldest first."""
        return (
            HistoryEntry.objects.for_tenant(tenant)
            .of_type(history_type)
            .related_to(document_id)
            .order_by('created_at', 'id')
        )
