"""
Enums for Stockflow models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ReceiptStatus(models.TextChoices):
    """Receipt lifecycle status: draft → ready → done."""
    DRAFT = 'draft', _('Draft')
    READY = 'ready', _('Ready')
    DONE = 'done', _('Done')       # Stock received into the ledger


class DeliveryStatus(models.TextChoices):
    """Delivery lifecycle status: draft → waiting → ready → done."""
    DRAFT = 'draft', _('Draft')
    WAITING = 'waiting', _('Waiting')
    READY = 'ready', _('Ready')
    DONE = 'done', _('Done')       # Stock taken out of the ledger


class HistoryType(models.TextChoices):
    """Subject of a history entry."""
    RECEIPT = 'Receipt', _('Receipt')
    DELIVERY = 'Delivery', _('Delivery')
    INVENTORY = 'Inventory', _('Inventory')


class MovementKind(models.TextChoices):
    """
    Direction of a movement document.

    RECEIPT:  inbound, references use the IN tag
    DELIVERY: outbound, references use the OUT tag
    """
    RECEIPT = 'receipt', _('Receipt')
    DELIVERY = 'delivery', _('Delivery')

    @property
    def tag(self) -> str:
        return 'IN' if self is MovementKind.RECEIPT else 'OUT'


DONE = 'done'
