"""
Tests for the movement status workflow.
"""

from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from stockflow import inventory
from stockflow.exceptions import InsufficientStock, InvalidTransition, NotFound, StorageError
from stockflow.models import HistoryEntry, HistoryType, StockItem
from stockflow.services.workflow import StatusWorkflow, next_status
from stockflow.snapshots import LineItem


pytestmark = pytest.mark.django_db


def complete_receipt(tenant, receipt_id):
    inventory.receipts.set_status(tenant, receipt_id, 'ready')
    return inventory.receipts.set_status(tenant, receipt_id, 'done')


def complete_delivery(tenant, delivery_id):
    for status in ('waiting', 'ready', 'done'):
        doc = inventory.deliveries.set_status(tenant, delivery_id, status)
    return doc


class TestNextStatus:
    """Tests for the transition tables."""

    def test_receipt_flow(self):
        assert next_status('receipt', 'draft') == 'ready'
        assert next_status('receipt', 'ready') == 'done'
        assert next_status('receipt', 'done') is None

    def test_delivery_flow(self):
        assert next_status('delivery', 'draft') == 'waiting'
        assert next_status('delivery', 'waiting') == 'ready'
        assert next_status('delivery', 'ready') == 'done'
        assert next_status('delivery', 'done') is None


class TestReceiptCompletion:
    """Receipt done adds stock."""

    def test_done_creates_stock_item(self, tenant, receipt_header, widget_line):
        """New product code: item seeded from the line."""
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])
        receipt = inventory.receipts.get(tenant, receipt_id)
        assert receipt.reference == 'WH1/IN/0001'

        complete_receipt(tenant, receipt_id)

        item = StockItem.objects.get(tenant_id=tenant.user_id, product_code='ABCDE')
        assert item.quantity == 10
        assert item.total_value == Decimal('25.00')
        operations = set(HistoryEntry.objects.for_tenant(tenant).values_list('operation', flat=True))
        assert 'Item Added' in operations
        assert 'Receipt Status: done' in operations

    def test_done_adds_to_existing_item(self, tenant, receipt_header, widget, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])
        complete_receipt(tenant, receipt_id)

        widget.refresh_from_db()
        assert widget.quantity == 20
        assert widget.total_value == Decimal('50.00')

    def test_done_seeds_location(self, tenant, widget_line):
        receipt_id = inventory.receipts.create(
            tenant,
            {'receive_from': 'Acme', 'to_location': 'Shelf A'},
            [widget_line],
        )
        complete_receipt(tenant, receipt_id)

        assert inventory.ledger.get_by_code(tenant, 'ABCDE').location == 'Shelf A'

    def test_ready_does_not_touch_ledger(self, tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])
        inventory.receipts.set_status(tenant, receipt_id, 'ready')

        assert inventory.ledger.get_by_code(tenant, 'ABCDE') is None

    def test_status_history_recorded(self, tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])
        complete_receipt(tenant, receipt_id)

        operations = list(
            inventory.history.for_document(tenant, HistoryType.RECEIPT, receipt_id)
            .values_list('operation', flat=True)
        )
        assert operations == [
            'Receipt Created',
            'Receipt Status: ready',
            'Receipt Status: done',
        ]


class TestDeliveryCompletion:
    """Delivery done deducts stock, never below zero."""

    def test_shortfall_rejected(self, tenant, delivery_header, widget):
        """Requesting 15 of 10: rejected, ledger unchanged."""
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 15, product_code='ABCDE')],
        )
        inventory.deliveries.set_status(tenant, delivery_id, 'waiting')
        inventory.deliveries.set_status(tenant, delivery_id, 'ready')

        with pytest.raises(InsufficientStock) as exc:
            inventory.deliveries.set_status(tenant, delivery_id, 'done')

        assert exc.value.product_code == 'ABCDE'
        assert exc.value.available == 10
        assert exc.value.requested == 15
        assert exc.value.shortfall == 5
        widget.refresh_from_db()
        assert widget.quantity == 10
        assert inventory.deliveries.get(tenant, delivery_id).status == 'ready'

    def test_done_deducts(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 4, product_code='ABCDE')],
        )
        complete_delivery(tenant, delivery_id)

        widget.refresh_from_db()
        assert widget.quantity == 6
        assert widget.total_value == Decimal('15.00')
        entry = HistoryEntry.objects.for_tenant(tenant).filter(operation='Stock Updated').first()
        assert entry.previous_quantity == 10
        assert entry.new_quantity == 6
        assert entry.quantity == -4

    def test_exact_quantity_empties_item(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 10, product_code='ABCDE')],
        )
        complete_delivery(tenant, delivery_id)

        widget.refresh_from_db()
        assert widget.quantity == 0

    def test_lines_for_same_code_are_summed(self, tenant, delivery_header, widget):
        """Two lines of 6 exceed 10 even though each fits."""
        delivery_id = inventory.deliveries.create(
            tenant,
            delivery_header,
            [
                LineItem('Widget', 6, product_code='ABCDE'),
                LineItem('Widget', 6, product_code='ABCDE'),
            ],
        )

        with pytest.raises(InsufficientStock):
            complete_delivery(tenant, delivery_id)

        widget.refresh_from_db()
        assert widget.quantity == 10

    def test_unknown_code_rejected(self, tenant, delivery_header):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Gadget', 1, product_code='NOPE')],
        )

        with pytest.raises(InsufficientStock) as exc:
            complete_delivery(tenant, delivery_id)

        assert exc.value.available == 0

    def test_line_without_code_is_skipped(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Loose item', 3)],
        )
        doc = complete_delivery(tenant, delivery_id)

        assert doc.status == 'done'
        widget.refresh_from_db()
        assert widget.quantity == 10

    def test_failed_done_writes_no_history(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 50, product_code='ABCDE')],
        )
        inventory.deliveries.set_status(tenant, delivery_id, 'waiting')
        inventory.deliveries.set_status(tenant, delivery_id, 'ready')
        before = HistoryEntry.objects.for_tenant(tenant).count()

        with pytest.raises(InsufficientStock):
            inventory.deliveries.set_status(tenant, delivery_id, 'done')

        assert HistoryEntry.objects.for_tenant(tenant).count() == before

    def test_failed_history_write_rolls_back_done(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 4, product_code='ABCDE')],
        )
        inventory.deliveries.set_status(tenant, delivery_id, 'waiting')
        inventory.deliveries.set_status(tenant, delivery_id, 'ready')

        with mock.patch.object(HistoryEntry.objects, 'create', side_effect=DatabaseError('disk full')):
            with pytest.raises(StorageError):
                inventory.deliveries.set_status(tenant, delivery_id, 'done')

        widget.refresh_from_db()
        assert widget.quantity == 10
        assert inventory.deliveries.get(tenant, delivery_id).status == 'ready'

    def test_check_stock_reports_shortages(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 12, product_code='ABCDE')],
        )

        assert inventory.deliveries.check_stock(tenant, delivery_id) == [{
            'product_code': 'ABCDE',
            'product_name': 'Widget',
            'available': 10,
            'requested': 12,
            'shortfall': 2,
        }]


class TestForwardOnly:
    """Only the single next status is accepted."""

    def test_cannot_skip(self, tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])

        with pytest.raises(InvalidTransition) as exc:
            inventory.receipts.set_status(tenant, receipt_id, 'done')

        assert exc.value.current == 'draft'
        assert exc.value.expected == 'ready'
        assert inventory.ledger.get_by_code(tenant, 'ABCDE') is None

    def test_cannot_go_back(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 1, product_code='ABCDE')],
        )
        inventory.deliveries.set_status(tenant, delivery_id, 'waiting')

        with pytest.raises(InvalidTransition):
            inventory.deliveries.set_status(tenant, delivery_id, 'draft')

    def test_done_is_terminal(self, tenant, receipt_header, widget_line):
        """A second done is refused and stock is added once."""
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])
        complete_receipt(tenant, receipt_id)

        with pytest.raises(InvalidTransition) as exc:
            inventory.receipts.set_status(tenant, receipt_id, 'done')

        assert exc.value.expected is None
        assert inventory.ledger.available(tenant, 'ABCDE') == 10

    def test_unknown_status_rejected(self, tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])

        with pytest.raises(InvalidTransition):
            inventory.receipts.set_status(tenant, receipt_id, 'shipped')

    def test_advance(self, tenant, delivery_header, widget):
        delivery_id = inventory.deliveries.create(
            tenant, delivery_header, [LineItem('Widget', 2, product_code='ABCDE')],
        )

        statuses = [inventory.deliveries.advance(tenant, delivery_id).status for _ in range(3)]

        assert statuses == ['waiting', 'ready', 'done']
        with pytest.raises(InvalidTransition):
            inventory.deliveries.advance(tenant, delivery_id)

    def test_facade_dispatch(self, tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])

        doc = inventory.set_status(tenant, 'receipt', receipt_id, 'ready')

        assert doc.status == 'ready'

    def test_other_tenant_document_not_found(self, tenant, other_tenant, receipt_header, widget_line):
        receipt_id = inventory.receipts.create(tenant, receipt_header, [widget_line])

        with pytest.raises(NotFound):
            inventory.receipts.set_status(other_tenant, receipt_id, 'ready')


class TestShortages:
    """Tests for StatusWorkflow.shortages()."""

    def test_enough_stock(self, tenant, widget):
        assert StatusWorkflow.shortages(tenant, [LineItem('Widget', 10, product_code='ABCDE')]) == []

    def test_other_tenant_stock_not_counted(self, tenant, other_tenant, widget):
        short = StatusWorkflow.shortages(other_tenant, [LineItem('Widget', 1, product_code='ABCDE')])

        assert short[0]['available'] == 0
