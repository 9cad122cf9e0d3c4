"""
Warehouse and Location models — reference data for documents and stock.
"""

from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from stockflow.tenancy import TenantManager

SHORT_CODE_PATTERN = r'^[A-Z0-9]+$'

validate_short_code = RegexValidator(
    SHORT_CODE_PATTERN,
    message='Short code must be upper-case letters and digits.',
    code='invalid_short_code',
)


class Warehouse(models.Model):
    """
    A tenant's warehouse.

    short_code is upper-case alphanumeric and prefixes document
    references (`WH1/IN/0001`).
    """

    tenant_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Tenant'))
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    short_code = models.CharField(max_length=20, validators=[validate_short_code], verbose_name=_('Short code'))
    address = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Address'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'short_code'],
                name='unique_warehouse_code_per_tenant',
            )
        ]

    def __str__(self) -> str:
        return f"{self.short_code} - {self.name}"


class Location(models.Model):
    """
    A named place, optionally inside a warehouse.

    The warehouse is resolved by name when the location is saved; the
    name itself is kept so the link survives warehouse deletion.
    """

    tenant_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Tenant'))
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    short_code = models.CharField(max_length=20, verbose_name=_('Short code'))
    warehouse_name = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Warehouse name'))
    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='locations',
        verbose_name=_('Warehouse'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        verbose_name = _('Location')
        verbose_name_plural = _('Locations')
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'short_code'],
                name='unique_location_code_per_tenant',
            )
        ]

    def __str__(self) -> str:
        return f"{self.short_code} - {self.name}"
