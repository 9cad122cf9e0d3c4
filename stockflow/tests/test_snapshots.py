"""
Tests for LineItem snapshots and error serialization.
"""

from decimal import Decimal

import pytest

from stockflow.exceptions import InsufficientStock, ValidationError
from stockflow.snapshots import LineItem, coerce_lines, to_decimal


class TestLineItem:
    def test_normalizes(self):
        item = LineItem('  Widget ', 4, 2.5, product_code='  ')

        assert item.product_name == 'Widget'
        assert item.product_code is None
        assert item.unit_price == Decimal('2.5')
        assert item.total_price == Decimal('10.00')

    def test_total_rounds_to_cents(self):
        assert LineItem('Bolt', 3, '0.335').total_price == Decimal('1.01')

    def test_frozen(self):
        item = LineItem('Widget', 1)

        with pytest.raises(AttributeError):
            item.quantity = 2

    @pytest.mark.parametrize('quantity', [0, -1, 1.5, '2', True, None])
    def test_bad_quantity(self, quantity):
        with pytest.raises(ValidationError) as exc:
            LineItem('Widget', quantity)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_unknown_key(self):
        with pytest.raises(ValidationError) as exc:
            LineItem.from_mapping({'product_name': 'Widget', 'quantity': 1, 'qty': 1})

        assert exc.value.field == 'qty'

    def test_coerce_mixed(self):
        items = coerce_lines([LineItem('A', 1), {'product_name': 'B', 'quantity': 2}])

        assert [i.product_name for i in items] == ['A', 'B']


class TestToDecimal:
    @pytest.mark.parametrize('value', ['abc', -1, 'NaN', 'Infinity', False])
    def test_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            to_decimal(value)

        assert exc.value.code == 'INVALID_PRICE'

    def test_blank_is_zero(self):
        assert to_decimal('') == Decimal('0')
        assert to_decimal(None) == Decimal('0')


class TestErrors:
    def test_as_dict(self):
        err = InsufficientStock(product_code='ABCDE', available=10, requested=15, shortfall=5)

        assert err.as_dict() == {
            'code': 'INSUFFICIENT_STOCK',
            'message': 'Insufficient stock for this operation',
            'data': {'product_code': 'ABCDE', 'available': 10, 'requested': 15, 'shortfall': 5},
        }

    def test_decimal_data_serialized(self):
        err = ValidationError('INVALID_PRICE', value=Decimal('-1.5'))

        assert err.as_dict()['data']['value'] == '-1.5'
        assert str(err) == 'Price must be zero or positive'
