"""
Tests for the stock ledger.
"""

from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError, IntegrityError, transaction

from stockflow import inventory
from stockflow.exceptions import (
    DuplicateProductCode,
    InsufficientStock,
    NotFound,
    StorageError,
    ValidationError,
)
from stockflow.models import HistoryEntry, StockItem


pytestmark = pytest.mark.django_db


class TestUpsertInsert:
    """upsert() for a code that is not in the ledger yet."""

    def test_insert_defaults(self, tenant):
        item_id = inventory.ledger.upsert(tenant, product_code='ABCDE', product_name='Widget')

        item = StockItem.objects.get(pk=item_id)
        assert item.quantity == 0
        assert item.status == 'in_stock'
        assert item.total_value == Decimal('0.00')

    def test_insert_with_quantity_and_price(self, tenant):
        item_id = inventory.ledger.upsert(
            tenant, product_code='ABCDE', product_name='Widget', quantity=10, unit_price='2.50',
        )

        item = StockItem.objects.get(pk=item_id)
        assert item.total_value == Decimal('25.00')

    def test_insert_records_item_added(self, tenant):
        item_id = inventory.ledger.upsert(tenant, product_code='ABCDE', product_name='Widget', quantity=3)

        entry = HistoryEntry.objects.get(tenant_id=tenant.user_id)
        assert entry.operation == 'Item Added'
        assert entry.previous_quantity == 0
        assert entry.new_quantity == 3
        assert entry.related_id == item_id

    def test_insert_requires_name(self, tenant):
        with pytest.raises(ValidationError) as exc:
            inventory.ledger.upsert(tenant, product_code='ABCDE', quantity=1)

        assert exc.value.field == 'product_name'
        assert not StockItem.objects.exists()

    def test_insert_negative_change_rejected(self, tenant):
        with pytest.raises(InsufficientStock):
            inventory.ledger.upsert(tenant, product_code='ABCDE', product_name='Widget', quantity_change=-1)

        assert not StockItem.objects.exists()

    def test_blank_code_stored_as_null(self, tenant):
        first = inventory.ledger.upsert(tenant, product_code='  ', product_name='Loose')
        second = inventory.ledger.upsert(tenant, product_name='Loose too')

        assert first != second
        assert StockItem.objects.filter(product_code__isnull=True).count() == 2


class TestUpsertUpdate:
    """upsert() for an existing code."""

    def test_quantity_change_added(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=5)

        widget.refresh_from_db()
        assert widget.quantity == 15
        assert widget.total_value == Decimal('37.50')

    def test_absolute_quantity(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity=2)

        widget.refresh_from_db()
        assert widget.quantity == 2

    def test_omitted_fields_preserved(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='ABCDE', category='Hardware')
        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=1)

        widget.refresh_from_db()
        assert widget.category == 'Hardware'
        assert widget.product_name == 'Widget'
        assert widget.unit_price == Decimal('2.50')

    def test_price_change_recomputes_total(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='ABCDE', unit_price=Decimal('1.10'))

        widget.refresh_from_db()
        assert widget.total_value == Decimal('11.00')

    def test_negative_result_rejected(self, tenant, widget):
        with pytest.raises(InsufficientStock) as exc:
            inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=-11)

        assert exc.value.shortfall == 1
        widget.refresh_from_db()
        assert widget.quantity == 10
        assert HistoryEntry.objects.filter(operation='Stock Updated').count() == 0

    def test_update_records_history(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=-3, description='Breakage')

        entry = HistoryEntry.objects.filter(operation='Stock Updated').get()
        assert entry.previous_quantity == 10
        assert entry.new_quantity == 7
        assert entry.quantity == -3
        assert entry.description == 'Breakage'

    def test_one_history_entry_per_upsert(self, tenant, widget):
        before = HistoryEntry.objects.count()

        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=1)
        inventory.ledger.upsert(tenant, product_code='ABCDE', quantity=4)

        assert HistoryEntry.objects.count() == before + 2

    def test_codes_are_per_tenant(self, tenant, other_tenant, widget):
        other_id = inventory.ledger.upsert(other_tenant, product_code='ABCDE', product_name='Widget', quantity=1)

        assert other_id != widget.pk
        widget.refresh_from_db()
        assert widget.quantity == 10

    def test_failed_history_write_rolls_back(self, tenant, widget):
        with mock.patch.object(HistoryEntry.objects, 'create', side_effect=DatabaseError('disk full')):
            with pytest.raises(StorageError):
                inventory.ledger.upsert(tenant, product_code='ABCDE', quantity_change=5)

        widget.refresh_from_db()
        assert widget.quantity == 10
        assert widget.total_value == Decimal('25.00')


class TestValidation:
    def test_unknown_field(self, tenant):
        with pytest.raises(ValidationError) as exc:
            inventory.ledger.upsert(tenant, product_code='X', product_name='X', colour='red')

        assert exc.value.code == 'UNKNOWN_FIELD'

    def test_float_quantity(self, tenant):
        with pytest.raises(ValidationError) as exc:
            inventory.ledger.upsert(tenant, product_code='X', product_name='X', quantity=1.5)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_negative_price(self, tenant):
        with pytest.raises(ValidationError) as exc:
            inventory.ledger.upsert(tenant, product_code='X', product_name='X', unit_price=-1)

        assert exc.value.code == 'INVALID_PRICE'

    def test_check_constraint_blocks_negative_quantity(self, tenant, widget):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                StockItem.objects.filter(pk=widget.pk).update(quantity=-1)


class TestUpdateById:
    def test_edit_fields(self, tenant, widget):
        item = inventory.ledger.update(tenant, widget.pk, product_name='Widget XL', quantity=12)

        assert item.product_name == 'Widget XL'
        assert item.quantity == 12
        assert item.total_value == Decimal('30.00')

    def test_code_taken(self, tenant, widget):
        other_id = inventory.ledger.upsert(tenant, product_code='OTHER', product_name='Other')

        with pytest.raises(DuplicateProductCode):
            inventory.ledger.update(tenant, other_id, product_code='ABCDE')

    def test_missing(self, tenant):
        with pytest.raises(NotFound):
            inventory.ledger.update(tenant, 999, quantity=1)


class TestDelete:
    def test_delete(self, tenant, widget):
        assert inventory.ledger.delete(tenant, widget.pk) is True

        assert not StockItem.objects.exists()
        entry = HistoryEntry.objects.get(operation='Item Deleted')
        assert entry.previous_quantity == 10

    def test_delete_other_tenant_item(self, other_tenant, widget):
        with pytest.raises(NotFound):
            inventory.ledger.delete(other_tenant, widget.pk)

        assert StockItem.objects.filter(pk=widget.pk).exists()


class TestLookups:
    def test_get_by_code(self, tenant, other_tenant, widget):
        assert inventory.ledger.get_by_code(tenant, 'ABCDE') == widget
        assert inventory.ledger.get_by_code(other_tenant, 'ABCDE') is None
        assert inventory.ledger.get_by_code(tenant, None) is None

    def test_available(self, tenant, widget):
        assert inventory.available(tenant, 'ABCDE') == 10
        assert inventory.available(tenant, 'NOPE') == 0

    def test_list_search(self, tenant, widget):
        inventory.ledger.upsert(tenant, product_code='G-1', product_name='Gadget', supplier_name='Globex')

        assert [i.product_code for i in inventory.ledger.list(tenant, search='globex')] == ['G-1']
        assert inventory.ledger.list(tenant).count() == 2


class TestRecalculateValues:
    def test_detects_and_fixes_drift(self, tenant, widget):
        StockItem.objects.filter(pk=widget.pk).update(total_value=Decimal('1.00'))

        drifted = inventory.ledger.recalculate_values(tenant)

        assert [(item.pk, stored, expected) for item, stored, expected in drifted] == [
            (widget.pk, Decimal('1.00'), Decimal('25.00')),
        ]
        widget.refresh_from_db()
        assert widget.total_value == Decimal('25.00')

    def test_dry_run_writes_nothing(self, tenant, widget):
        StockItem.objects.filter(pk=widget.pk).update(total_value=Decimal('1.00'))

        assert len(inventory.ledger.recalculate_values(dry_run=True)) == 1

        widget.refresh_from_db()
        assert widget.total_value == Decimal('1.00')
