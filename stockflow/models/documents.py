"""
Movement document models — Receipt (inbound) and Delivery (outbound).
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from stockflow.models.enums import DeliveryStatus, ReceiptStatus
from stockflow.tenancy import TenantManager

MULTIPLE_PRODUCTS = 'Multiple Products'


def product_label(names) -> str:
    """The single product name, or the generic label for mixed/empty documents."""
    distinct = set(names)
    if len(distinct) == 1:
        return distinct.pop()
    return MULTIPLE_PRODUCTS


class MovementDocument(models.Model):
    """
    Header of a planned or completed stock transfer.

    LIFECYCLE (forward only, see services.workflow):

        Receipt:   draft ──► ready ──► done
        Delivery:  draft ──► waiting ──► ready ──► done

    Entering `done` is the only step that touches the ledger.
    The reference never changes once assigned.
    """

    tenant_id = models.PositiveIntegerField(db_index=True, verbose_name=_('Tenant'))
    reference = models.CharField(max_length=64, verbose_name=_('Reference'))
    responsible = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Responsible'))
    scheduled_date = models.DateField(null=True, blank=True, verbose_name=_('Scheduled date'))
    contact = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Contact'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        abstract = True
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'reference'],
                name='%(app_label)s_%(class)s_unique_reference',
            ),
        ]

    @property
    def line_list(self) -> list:
        return list(self.lines.all())

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.line_list)

    @property
    def product_label(self) -> str:
        return product_label(line.product_name for line in self.line_list)

    @property
    def is_done(self) -> bool:
        return self.status == 'done'

    def __str__(self) -> str:
        return f"{self.reference} ({self.status})"


class MovementLine(models.Model):
    """
    Snapshot of one product moved by a document.

    product_code is a copy, not a foreign key: the line stays readable
    after the StockItem is renamed or deleted.
    """

    position = models.PositiveIntegerField(default=0, verbose_name=_('Position'))
    product_name = models.CharField(max_length=200, verbose_name=_('Product'))
    product_code = models.CharField(max_length=64, null=True, blank=True, verbose_name=_('Product code'))
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'), verbose_name=_('Unit price'))
    total_price = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'), verbose_name=_('Total price'))

    class Meta:
        abstract = True
        ordering = ['position', 'id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='%(app_label)s_%(class)s_quantity_positive',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product_name}"


class Receipt(MovementDocument):
    """Inbound movement: stock received from a supplier."""

    receive_from = models.CharField(max_length=200, verbose_name=_('Receive from'))
    to_location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('To location'))
    status = models.CharField(
        max_length=20,
        choices=ReceiptStatus.choices,
        default=ReceiptStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(MovementDocument.Meta):
        verbose_name = _('Receipt')
        verbose_name_plural = _('Receipts')


class ReceiptLine(MovementLine):
    receipt = models.ForeignKey(
        Receipt,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Receipt'),
    )

    class Meta(MovementLine.Meta):
        verbose_name = _('Receipt line')
        verbose_name_plural = _('Receipt lines')


class Delivery(MovementDocument):
    """Outbound movement: stock shipped to a customer address."""

    delivery_address = models.CharField(max_length=255, verbose_name=_('Delivery address'))
    operation_type = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Operation type'))
    from_location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('From location'))
    to_location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('To location'))
    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(MovementDocument.Meta):
        verbose_name = _('Delivery')
        verbose_name_plural = _('Deliveries')


class DeliveryLine(MovementLine):
    delivery = models.ForeignKey(
        Delivery,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Delivery'),
    )

    class Meta(MovementLine.Meta):
        verbose_name = _('Delivery line')
        verbose_name_plural = _('Delivery lines')
