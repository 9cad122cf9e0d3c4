"""
StockItem model — on-hand quantity per product code.
"""

from decimal import ROUND_HALF_UP, Decimal

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from stockflow.tenancy import TenantQuerySet

CENTS = Decimal('0.01')


def compute_total(quantity: int, unit_price) -> Decimal:
    """quantity * unit_price, rounded to cents."""
    return (Decimal(quantity) * Decimal(unit_price or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


class StockItemQuerySet(TenantQuerySet):
    """Helpers for StockItem queries."""

    def by_code(self, product_code: str):
        return self.filter(product_code=product_code)

    def in_stock(self):
        return self.filter(quantity__gt=0)

    def out_of_stock(self):
        return self.filter(quantity=0)

    def below_minimum(self):
        """Items under their own min_stock_level."""
        return self.filter(min_stock_level__gt=0, quantity__lt=F('min_stock_level'))

    def search(self, query: str):
        """Case-insensitive match on name, code, category or supplier."""
        query = (query or '').strip()
        if not query:
            return self
        return self.filter(
            Q(product_name__icontains=query)
            | Q(product_code__icontains=query)
            | Q(category__icontains=query)
            | Q(supplier_name__icontains=query)
        )


class StockItem(models.Model):
    """
    Ledger row: how much of a product a tenant holds.

    Rules:
    - quantity never goes below zero (also enforced by a check constraint)
    - total_value always equals quantity * unit_price
    - quantity only changes through StockLedger

    product_code is optional, but unique within a tenant when present.
    """

    tenant_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Tenant'))

    product_name = models.CharField(max_length=200, verbose_name=_('Product'))
    product_code = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        verbose_name=_('Product code'),
    )
    category = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Category'))

    quantity = models.IntegerField(default=0, verbose_name=_('Quantity'))
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Unit price'),
    )
    total_value = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total value'),
    )

    supplier_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Supplier'))
    location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Location'))
    min_stock_level = models.IntegerField(default=0, verbose_name=_('Minimum stock'))
    max_stock_level = models.IntegerField(null=True, blank=True, verbose_name=_('Maximum stock'))
    status = models.CharField(max_length=30, default='in_stock', verbose_name=_('Status'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock item')
        verbose_name_plural = _('Stock items')
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'product_code'],
                name='unique_stock_item_code_per_tenant',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='stock_item_quantity_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['tenant_id', 'status'], name='stock_item_tenant_status_idx'),
        ]

    def recompute_total(self) -> Decimal:
        self.total_value = compute_total(self.quantity, self.unit_price)
        return self.total_value

    def __str__(self) -> str:
        code = f" [{self.product_code}]" if self.product_code else ""
        return f"{self.product_name}{code}: {self.quantity}"
