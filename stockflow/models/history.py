"""
HistoryEntry model — Immutable audit log.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockflow.models.enums import HistoryType
from stockflow.tenancy import TenantQuerySet


IMMUTABLE_MESSAGE = "History entries are immutable. Record a new entry instead."


class HistoryQuerySet(TenantQuerySet):
    """Tenant-scoped queryset that refuses bulk mutation."""

    def update(self, **kwargs):
        raise ValueError(IMMUTABLE_MESSAGE)

    def delete(self):
        raise ValueError(IMMUTABLE_MESSAGE)

    def of_type(self, history_type):
        return self.filter(type=history_type)

    def related_to(self, related_id: int):
        return self.filter(related_id=related_id)


class HistoryEntry(models.Model):
    """
    Immutable record of a state-changing operation.

    Rules:
    - NEVER update() or delete()
    - created_at never goes backwards within a tenant
    """

    tenant_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Tenant'))
    type = models.CharField(
        max_length=20,
        choices=HistoryType.choices,
        db_index=True,
        verbose_name=_('Type'),
    )
    operation = models.CharField(max_length=100, verbose_name=_('Operation'))
    product_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Product'))
    product_code = models.CharField(max_length=64, null=True, blank=True, verbose_name=_('Product code'))
    quantity = models.IntegerField(null=True, blank=True, verbose_name=_('Quantity'))
    previous_quantity = models.IntegerField(null=True, blank=True, verbose_name=_('Previous quantity'))
    new_quantity = models.IntegerField(null=True, blank=True, verbose_name=_('New quantity'))
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, verbose_name=_('Price'))
    related_id = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Related id'))
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    objects = HistoryQuerySet.as_manager()

    class Meta:
        verbose_name = _('History entry')
        verbose_name_plural = _('History')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['tenant_id', 'created_at'], name='history_tenant_created_idx'),
            models.Index(fields=['tenant_id', 'type'], name='history_tenant_type_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(IMMUTABLE_MESSAGE)
        if not self.operation:
            raise ValueError("Operation is required")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(IMMUTABLE_MESSAGE)

    def __str__(self) -> str:
        return f"{self.type} | {self.operation} | {self.product_name}"
