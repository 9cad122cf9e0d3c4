"""
Line item snapshots — isolated, testable, reusable.

A LineItem is the value a caller hands to a movement document: what was
moved, how many, and at what price, frozen at the time of the movement.
Documents store copies of these values, never references to StockItem rows,
so a historical document reads the same after the product is renamed or
deleted.

Examples:
    LineItem("Widget", 10, unit_price=Decimal("2.50"), product_code="ABCDE")
    LineItem.from_mapping({"product_name": "Widget", "quantity": 10})
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation

from stockflow.exceptions import ValidationError
from stockflow.models.stock_item import compute_total


def to_decimal(value, field: str = 'unit_price') -> Decimal:
    """Coerce a price to Decimal. Floats go through str() to avoid binary noise."""
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, bool):
        raise ValidationError('INVALID_PRICE', field=field, value=value)
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError('INVALID_PRICE', field=field, value=value) from None
    if not price.is_finite() or price < 0:
        raise ValidationError('INVALID_PRICE', field=field, value=value)
    return price


def is_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class LineItem:
    """Immutable snapshot of one product moved by a document."""

    product_name: str
    quantity: int
    unit_price: Decimal = Decimal('0')
    product_code: str | None = None

    def __post_init__(self):
        name = (self.product_name or '').strip()
        if not name:
            raise ValidationError('REQUIRED_FIELD', field='product_name')
        if not is_quantity(self.quantity) or self.quantity <= 0:
            raise ValidationError(
                'INVALID_QUANTITY',
                field='quantity',
                product_name=name,
                value=self.quantity,
            )
        code = (self.product_code or '').strip() or None
        object.__setattr__(self, 'product_name', name)
        object.__setattr__(self, 'product_code', code)
        object.__setattr__(self, 'unit_price', to_decimal(self.unit_price))

    @property
    def total_price(self) -> Decimal:
        return compute_total(self.quantity, self.unit_price)

    @classmethod
    def from_mapping(cls, data: Mapping) -> LineItem:
        """Build from a dict, rejecting keys that are not LineItem fields."""
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise ValidationError('UNKNOWN_FIELD', field=sorted(unknown)[0])
        return cls(
            product_name=data.get('product_name', ''),
            quantity=data.get('quantity'),
            unit_price=data.get('unit_price', Decimal('0')),
            product_code=data.get('product_code'),
        )

    @classmethod
    def from_line(cls, line) -> LineItem:
        """Snapshot of a stored document line."""
        return cls(
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            product_code=line.product_code,
        )


def coerce_lines(lines: Iterable | None) -> list[LineItem]:
    """
    Normalize caller input into LineItems.

    Raises:
        ValidationError('NO_LINES'): empty or missing list
    """
    items = [
        line if isinstance(line, LineItem) else LineItem.from_mapping(line)
        for line in (lines or [])
    ]
    if not items:
        raise ValidationError('NO_LINES', field='lines')
    return items
