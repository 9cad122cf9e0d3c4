"""
Stock ledger — the only code that writes StockItem.quantity.

Every mutation runs under one transaction together with its history
entry, with the affected row locked via select_for_update().
"""

import logging

from stockflow.exceptions import (
    DuplicateProductCode,
    InsufficientStock,
    NotFound,
    ValidationError,
)
from stockflow.models.enums import HistoryType
from stockflow.models.stock_item import StockItem, compute_total
from stockflow.services.base import atomic_write
from stockflow.services.history import HistoryRecorder
from stockflow.snapshots import is_quantity, to_decimal
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')

EDITABLE_FIELDS = frozenset({
    'product_name',
    'category',
    'unit_price',
    'supplier_name',
    'location',
    'min_stock_level',
    'max_stock_level',
    'status',
    'notes',
})


def _clean_code(product_code) -> str | None:
    return (product_code or '').strip() or None


def _clean_fields(fields: dict) -> dict:
    """Validate editable fields and drop the unset (None) ones."""
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError('UNKNOWN_FIELD', field=sorted(unknown)[0])

    cleaned = {k: v for k, v in fields.items() if v is not None}
    if 'product_name' in cleaned:
        cleaned['product_name'] = str(cleaned['product_name']).strip()
        if not cleaned['product_name']:
            raise ValidationError('REQUIRED_FIELD', field='product_name')
    if 'unit_price' in cleaned:
        cleaned['unit_price'] = to_decimal(cleaned['unit_price'])
    for level in ('min_stock_level', 'max_stock_level'):
        if level in cleaned and (not is_quantity(cleaned[level]) or cleaned[level] < 0):
            raise ValidationError('INVALID_QUANTITY', field=level, value=cleaned[level])
    return cleaned


def _check_quantities(quantity, quantity_change):
    if quantity is not None and (not is_quantity(quantity) or quantity < 0):
        raise ValidationError('INVALID_QUANTITY', field='quantity', value=quantity)
    if quantity_change is not None and not is_quantity(quantity_change):
        raise ValidationError('INVALID_QUANTITY', field='quantity_change', value=quantity_change)


class StockLedger:
    """Ledger mutation and lookup methods."""

    @classmethod
    def upsert(cls, tenant: Tenant, *, product_code=None, quantity=None,
               quantity_change=None, description=None, **fields) -> int:
        """
        Create or update a stock item, looked up by product code.

        Existing item:
            quantity is set absolutely when `quantity` is given, otherwise
            adjusted by the signed `quantity_change`. Provided fields
            overwrite, omitted ones are kept. History: "Stock Updated".
        New item:
            product_name is required; quantity defaults to 0 and status
            to "in_stock". History: "Item Added".

        Returns:
            StockItem id

        Raises:
            InsufficientStock: If the resulting quantity would be negative
            ValidationError: Bad quantity, price or field name

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on the existing row
        """
        _check_quantities(quantity, quantity_change)
        fields = _clean_fields(fields)
        code = _clean_code(product_code)

        with atomic_write(
            'stock.upsert',
            duplicate=DuplicateProductCode(field='product_code', value=code),
        ):
            existing = None
            if code:
                existing = (
                    StockItem.objects.select_for_update()
                    .for_tenant(tenant)
                    .by_code(code)
                    .first()
                )

            if existing is not None:
                item = cls._apply(tenant, existing, quantity, quantity_change, fields, description)
            else:
                item = cls._insert(tenant, code, quantity, quantity_change, fields, description)
        return item.pk

    @classmethod
    def update(cls, tenant: Tenant, item_id: int, *, product_code=None,
               quantity=None, quantity_change=None, **fields) -> StockItem:
        """
        Direct edit of one item by id (items without a code included).

        A new product_code must not belong to another item of the tenant.
        """
        _check_quantities(quantity, quantity_change)
        fields = _clean_fields(fields)
        code = _clean_code(product_code)

        with atomic_write(
            'stock.update',
            duplicate=DuplicateProductCode(field='product_code', value=code),
        ):
            item = (
                StockItem.objects.select_for_update()
                .for_tenant(tenant)
                .filter(pk=item_id)
                .first()
            )
            if item is None:
                raise NotFound(entity='stock_item', id=item_id)

            if code and code != item.product_code:
                taken = (
                    StockItem.objects.for_tenant(tenant)
                    .by_code(code)
                    .exclude(pk=item.pk)
                    .exists()
                )
                if taken:
                    raise DuplicateProductCode(field='product_code', value=code)
                item.product_code = code

            return cls._apply(tenant, item, quantity, quantity_change, fields, None)

    @classmethod
    def _apply(cls, tenant, item, quantity, quantity_change, fields, description):
        previous = item.quantity
        if quantity is not None:
            new = quantity
        else:
            new = previous + (quantity_change or 0)

        if new < 0:
            raise InsufficientStock(
                product_code=item.product_code,
                available=previous,
                requested=previous - new,
                shortfall=-new,
            )

        for name, value in fields.items():
            setattr(item, name, value)
        item.quantity = new
        item.recompute_total()
        item.save()

        HistoryRecorder.record(
            tenant,
            HistoryType.INVENTORY,
            'Stock Updated',
            product_name=item.product_name,
            product_code=item.product_code,
            quantity=quantity_change if quantity_change is not None else new - previous,
            previous_quantity=previous,
            new_quantity=new,
            price=item.unit_price,
            related_id=item.pk,
            description=description or f"Stock updated for {item.product_name}",
        )
        logger.info(
            "stockflow.ledger.updated",
            extra={
                "tenant": tenant.user_id,
                "item_id": item.pk,
                "product_code": item.product_code,
                "previous": previous,
                "new": new,
            },
        )
        return item

    @classmethod
    def _insert(cls, tenant, code, quantity, quantity_change, fields, description):
        if not fields.get('product_name'):
            raise ValidationError('REQUIRED_FIELD', field='product_name')

        if quantity is not None:
            initial = quantity
        else:
            initial = quantity_change or 0
        if initial < 0:
            raise InsufficientStock(
                product_code=code,
                available=0,
                requested=-initial,
                shortfall=-initial,
            )

        fields.setdefault('status', 'in_stock')
        item = StockItem(
            tenant_id=tenant.user_id,
            product_code=code,
            quantity=initial,
            **fields,
        )
        item.recompute_total()
        item.save()

        HistoryRecorder.record(
            tenant,
            HistoryType.INVENTORY,
            'Item Added',
            product_name=item.product_name,
            product_code=code,
            quantity=initial,
            previous_quantity=0,
            new_quantity=initial,
            price=item.unit_price,
            related_id=item.pk,
            description=description or f"New item added: {item.product_name}",
        )
        logger.info(
            "stockflow.ledger.added",
            extra={
                "tenant": tenant.user_id,
                "item_id": item.pk,
                "product_code": code,
                "qty": initial,
            },
        )
        return item

    @classmethod
    def delete(cls, tenant: Tenant, item_id: int) -> bool:
        """
        Hard delete. Document lines keep their own snapshot of the product.

        Raises:
            NotFound: If the item does not belong to the tenant
        """
        with atomic_write('stock.delete'):
            item = (
                StockItem.objects.select_for_update()
                .for_tenant(tenant)
                .filter(pk=item_id)
                .first()
            )
            if item is None:
                raise NotFound(entity='stock_item', id=item_id)

            HistoryRecorder.record(
                tenant,
                HistoryType.INVENTORY,
                'Item Deleted',
                product_name=item.product_name,
                product_code=item.product_code,
                previous_quantity=item.quantity,
                new_quantity=0,
                related_id=item.pk,
                description=f"Item deleted: {item.product_name}",
            )
            item.delete()

        logger.info(
            "stockflow.ledger.deleted",
            extra={"tenant": tenant.user_id, "item_id": item_id},
        )
        return True

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get(cls, tenant: Tenant, item_id: int) -> StockItem:
        item = StockItem.objects.for_tenant(tenant).filter(pk=item_id).first()
        if item is None:
            raise NotFound(entity='stock_item', id=item_id)
        return item

    @classmethod
    def get_by_code(cls, tenant: Tenant, product_code) -> StockItem | None:
        code = _clean_code(product_code)
        if code is None:
            return None
        return StockItem.objects.for_tenant(tenant).by_code(code).first()

    @classmethod
    def list(cls, tenant: Tenant, search: str | None = None):
        """Items newest first, optionally filtered by a search term."""
        return StockItem.objects.for_tenant(tenant).search(search).order_by('-created_at', '-id')

    @classmethod
    def available(cls, tenant: Tenant, product_code) -> int:
        """On-hand quantity for a code (0 when unknown)."""
        item = cls.get_by_code(tenant, product_code)
        return item.quantity if item else 0

    @classmethod
    def recalculate_values(cls, tenant: Tenant | None = None, dry_run: bool = False) -> list:
        """
        Audit total_value against quantity * unit_price.

        Use for:
        - Integrity audit
        - Correction after a direct database edit

        Returns:
            List of (item, stored_value, expected_value) for drifted rows
        """
        qs = StockItem.objects.all()
        if tenant is not None:
            qs = qs.for_tenant(tenant)

        drifted = []
        for item in qs.order_by('id'):
            expected = compute_total(item.quantity, item.unit_price)
            if item.total_value != expected:
                drifted.append((item, item.total_value, expected))

        if dry_run:
            return drifted

        for item, stored, expected in drifted:
            with atomic_write('stock.recalculate'):
                StockItem.objects.filter(pk=item.pk).update(total_value=expected)
            logger.warning(
                f"StockItem {item.pk} total_value recalculated: {stored} → {expected}",
                extra={"tenant": item.tenant_id, "item_id": item.pk},
            )
        return drifted
