"""
Document references — `{WAREHOUSE}/{IN|OUT}/{seq}`.

Sequencing reads the most recently inserted document of the same kind
(by id, not by reference order) and increments the number after its last
slash. Reference generation never blocks document creation: a database
error falls back to sequence 1.
"""

import logging
import re

from django.db import DatabaseError, transaction

from stockflow.conf import stockflow_settings
from stockflow.exceptions import ValidationError
from stockflow.models.documents import Delivery, Receipt
from stockflow.models.enums import MovementKind
from stockflow.models.sites import Warehouse
from stockflow.services.sites import SHORT_CODE_RE
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')

SUFFIX_RE = re.compile(r'/(\d+)$')

LAST_SUFFIX = 'last_suffix'
ROW_COUNT = 'row_count'

MODELS = {
    MovementKind.RECEIPT: Receipt,
    MovementKind.DELIVERY: Delivery,
}


def format_reference(warehouse_code: str, kind, sequence: int) -> str:
    """`WH1/IN/0007`; sequences wider than the padding are not truncated."""
    padding = stockflow_settings.REFERENCE_PADDING
    return f"{warehouse_code.strip().upper()}/{MovementKind(kind).tag}/{sequence:0{padding}d}"


def warehouse_prefix(code) -> str:
    """
    Normalize a warehouse code for use as a reference prefix.

    Raises:
        ValidationError('INVALID_SHORT_CODE'): anything but letters and digits
    """
    prefix = (code or '').strip().upper()
    if not SHORT_CODE_RE.match(prefix):
        raise ValidationError('INVALID_SHORT_CODE', field='warehouse_code', value=code)
    return prefix


def parse_sequence(reference: str | None) -> int | None:
    """Trailing number of a reference, or None."""
    if not reference:
        return None
    match = SUFFIX_RE.search(reference)
    return int(match.group(1)) if match else None


def default_warehouse_code(tenant: Tenant) -> str:
    """Short code of the tenant's most recent warehouse, else the configured default."""
    code = (
        Warehouse.objects.for_tenant(tenant)
        .order_by('-created_at', '-id')
        .values_list('short_code', flat=True)
        .first()
    )
    return code or stockflow_settings.DEFAULT_WAREHOUSE_CODE


def _sequencing(kind) -> str:
    if kind == MovementKind.DELIVERY:
        return stockflow_settings.DELIVERY_SEQUENCING
    return LAST_SUFFIX


def _next_sequence(tenant: Tenant, kind) -> int:
    model = MODELS[MovementKind(kind)]
    documents = model.objects.for_tenant(tenant)

    if _sequencing(kind) == ROW_COUNT:
        return documents.count() + 1

    last = documents.order_by('-id').values_list('reference', flat=True).first()
    sequence = parse_sequence(last)
    return sequence + 1 if sequence is not None else 1


def next_reference(tenant: Tenant, kind, warehouse_code: str | None = None) -> str:
    """
    Next free reference for a document kind.

    The candidate is bumped past references that already exist, so a
    generated reference never collides with one supplied by a caller.

    Args:
        tenant: Owner of the documents
        kind: MovementKind (or its value)
        warehouse_code: Prefix; defaults to the tenant's warehouse

    Returns:
        Reference string, e.g. "WH1/IN/0001"

    Raises:
        ValidationError('INVALID_SHORT_CODE'): prefix is not alphanumeric
    """
    kind = MovementKind(kind)
    code = warehouse_prefix(warehouse_code) if warehouse_code else None
    try:
        with transaction.atomic():
            if not code:
                code = warehouse_prefix(default_warehouse_code(tenant))
            sequence = _next_sequence(tenant, kind)
            documents = MODELS[kind].objects.for_tenant(tenant)
            reference = format_reference(code, kind, sequence)
            while documents.filter(reference=reference).exists():
                sequence += 1
                reference = format_reference(code, kind, sequence)
        return reference
    except DatabaseError as exc:
        code = code or warehouse_prefix(stockflow_settings.DEFAULT_WAREHOUSE_CODE)
        logger.warning(
            "stockflow.reference.fallback",
            extra={"tenant": tenant.user_id, "kind": kind.value, "error": str(exc)},
        )
        return format_reference(code, kind, 1)
