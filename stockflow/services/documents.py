"""
Movement documents — receipts and deliveries (header + lines).

Receipts and Deliveries share one implementation; subclasses only declare
their model, counterpart field and header fields. Documents never touch the
ledger themselves: that happens in the status workflow when `done` is set.
"""

import logging
from datetime import date, datetime

from django.utils.dateparse import parse_date

from stockflow.conf import stockflow_settings
from stockflow.exceptions import (
    DuplicateReference,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from stockflow.models.documents import (
    Delivery,
    DeliveryLine,
    Receipt,
    ReceiptLine,
    product_label,
)
from stockflow.models.enums import DONE, HistoryType, MovementKind
from stockflow.services.base import atomic_write
from stockflow.services.history import HistoryRecorder
from stockflow.services.references import next_reference
from stockflow.services.workflow import StatusWorkflow, next_status
from stockflow.snapshots import coerce_lines
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')


def _parse_scheduled(value):
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip()[:10])
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise ValidationError('INVALID_DATE', field='scheduled_date', value=value)


class MovementDocuments:
    """CRUD for one kind of movement document."""

    kind: MovementKind
    model = None
    line_model = None
    line_fk: str = ''
    party_field: str = ''
    header_fields: tuple = ()
    history_type: HistoryType
    label: str = ''

    @classmethod
    def _clean_header(cls, header) -> dict:
        """
        Validate a header mapping.

        Raises:
            ValidationError('UNKNOWN_FIELD'): key that is not a header field
                (status included: use set_status())
            ValidationError('REQUIRED_FIELD'): empty counterpart field
        """
        header = dict(header or {})
        unknown = set(header) - set(cls.header_fields)
        if unknown:
            raise ValidationError('UNKNOWN_FIELD', field=sorted(unknown)[0])

        cleaned = {}
        for name in cls.header_fields:
            value = header.get(name)
            if name == 'scheduled_date':
                cleaned[name] = _parse_scheduled(value)
            else:
                cleaned[name] = str(value).strip() if value is not None else ''
        cleaned['reference'] = cleaned['reference'] or None

        if not cleaned[cls.party_field]:
            raise ValidationError('REQUIRED_FIELD', field=cls.party_field)
        return cleaned

    @classmethod
    def _write_lines(cls, doc, items):
        cls.line_model.objects.bulk_create([
            cls.line_model(
                **{cls.line_fk: doc},
                position=index,
                product_name=item.product_name,
                product_code=item.product_code,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for index, item in enumerate(items)
        ])

    @classmethod
    def _locked(cls, tenant: Tenant, doc_id: int):
        doc = (
            cls.model.objects.select_for_update()
            .for_tenant(tenant)
            .filter(pk=doc_id)
            .first()
        )
        if doc is None:
            raise NotFound(entity=cls.kind.value, id=doc_id)
        return doc

    # ══════════════════════════════════════════════════════════════
    # CRUD
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create(cls, tenant: Tenant, header, lines, warehouse_code: str | None = None) -> int:
        """
        Create a draft document.

        A reference is generated when the header has none.

        Returns:
            Document id

        Raises:
            ValidationError: Missing counterpart, no lines, bad line
            DuplicateReference: Supplied reference already used by the tenant
        """
        cleaned = cls._clean_header(header)
        items = coerce_lines(lines)
        supplied = cleaned.pop('reference')

        with atomic_write(
            f'{cls.kind.value}.create',
            duplicate=DuplicateReference(field='reference', value=supplied),
        ):
            if supplied:
                if cls.model.objects.for_tenant(tenant).filter(reference=supplied).exists():
                    raise DuplicateReference(field='reference', value=supplied)
                reference = supplied
            else:
                reference = next_reference(tenant, cls.kind, warehouse_code)

            doc = cls.model.objects.create(
                tenant_id=tenant.user_id,
                reference=reference,
                **cleaned,
            )
            cls._write_lines(doc, items)

            HistoryRecorder.record(
                tenant,
                cls.history_type,
                f"{cls.label} Created",
                product_name=product_label(item.product_name for item in items),
                quantity=sum(item.quantity for item in items),
                related_id=doc.pk,
                description=f"{cls.label} {reference} created",
            )

        logger.info(
            f"stockflow.{cls.kind.value}.created",
            extra={
                "tenant": tenant.user_id,
                "reference": reference,
                "lines": len(items),
            },
        )
        return doc.pk

    @classmethod
    def update(cls, tenant: Tenant, doc_id: int, header, lines) -> bool:
        """
        Overwrite the header and replace every line.

        Status is left alone and the ledger is not touched. Line identity
        is not preserved across edits. A `done` document is frozen: its lines
        are what the ledger applied, and deletion reverses exactly those.

        Raises:
            NotFound: Document does not belong to the tenant
            ValidationError('DOCUMENT_DONE'): Document is already done
            ValidationError('REFERENCE_IMMUTABLE'): Header tries to change the reference
        """
        cleaned = cls._clean_header(header)
        items = coerce_lines(lines)
        reference = cleaned.pop('reference')

        with atomic_write(f'{cls.kind.value}.update'):
            doc = cls._locked(tenant, doc_id)
            if doc.status == DONE:
                raise ValidationError('DOCUMENT_DONE', reference=doc.reference)
            if reference and reference != doc.reference:
                raise ValidationError(
                    'REFERENCE_IMMUTABLE',
                    field='reference',
                    current=doc.reference,
                    value=reference,
                )

            for name, value in cleaned.items():
                setattr(doc, name, value)
            doc.save()

            doc.lines.all().delete()
            cls._write_lines(doc, items)

            HistoryRecorder.record(
                tenant,
                cls.history_type,
                f"{cls.label} Updated",
                product_name=product_label(item.product_name for item in items),
                quantity=sum(item.quantity for item in items),
                related_id=doc.pk,
                description=f"{cls.label} {doc.reference} updated",
            )

        logger.info(
            f"stockflow.{cls.kind.value}.updated",
            extra={"tenant": tenant.user_id, "reference": doc.reference, "lines": len(items)},
        )
        return True

    @classmethod
    def delete(cls, tenant: Tenant, doc_id: int) -> bool:
        """
        Delete lines and header, in any status.

        Ledger effects of a done document are kept unless
        REVERSE_LEDGER_ON_DELETE is set, in which case they are undone
        in the same transaction.
        """
        with atomic_write(f'{cls.kind.value}.delete'):
            doc = cls._locked(tenant, doc_id)
            reversed_ledger = doc.status == DONE and stockflow_settings.REVERSE_LEDGER_ON_DELETE
            if reversed_ledger:
                StatusWorkflow.reverse(tenant, cls, doc)

            label = doc.product_label
            reference = doc.reference
            doc.lines.all().delete()
            doc.delete()

            HistoryRecorder.record(
                tenant,
                cls.history_type,
                f"{cls.label} Deleted",
                product_name=label,
                related_id=doc_id,
                description=f"{cls.label} {reference} deleted",
            )

        logger.info(
            f"stockflow.{cls.kind.value}.deleted",
            extra={
                "tenant": tenant.user_id,
                "reference": reference,
                "reversed": reversed_ledger,
            },
        )
        return True

    @classmethod
    def get(cls, tenant: Tenant, doc_id: int):
        doc = (
            cls.model.objects.for_tenant(tenant)
            .prefetch_related('lines')
            .filter(pk=doc_id)
            .first()
        )
        if doc is None:
            raise NotFound(entity=cls.kind.value, id=doc_id)
        return doc

    @classmethod
    def list(cls, tenant: Tenant, status: str | None = None):
        """Documents newest first, with their lines prefetched."""
        qs = cls.model.objects.for_tenant(tenant).prefetch_related('lines')
        if status:
            qs = qs.filter(status=status)
        return qs.order_by('-created_at', '-id')

    # ══════════════════════════════════════════════════════════════
    # STATUS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def set_status(cls, tenant: Tenant, doc_id: int, status: str):
        """Move to `status`; see StatusWorkflow.transition()."""
        return StatusWorkflow.transition(tenant, cls, doc_id, status)

    @classmethod
    def advance(cls, tenant: Tenant, doc_id: int):
        """Move to the single next status."""
        doc = cls.get(tenant, doc_id)
        successor = next_status(cls.kind, doc.status)
        if successor is None:
            raise InvalidTransition(current=doc.status, requested=None, expected=None, reference=doc.reference)
        return cls.set_status(tenant, doc_id, successor)


class Receipts(MovementDocuments):
    """Inbound documents: `{WH}/IN/{seq}`, draft → ready → done."""

    kind = MovementKind.RECEIPT
    model = Receipt
    line_model = ReceiptLine
    line_fk = 'receipt'
    party_field = 'receive_from'
    history_type = HistoryType.RECEIPT
    label = 'Receipt'
    header_fields = (
        'reference',
        'receive_from',
        'responsible',
        'scheduled_date',
        'to_location',
        'contact',
        'notes',
    )


class Deliveries(MovementDocuments):
    """Outbound documents: `{WH}/OUT/{seq}`, draft → waiting → ready → done."""

    kind = MovementKind.DELIVERY
    model = Delivery
    line_model = DeliveryLine
    line_fk = 'delivery'
    party_field = 'delivery_address'
    history_type = HistoryType.DELIVERY
    label = 'Delivery'
    header_fields = (
        'reference',
        'delivery_address',
        'responsible',
        'scheduled_date',
        'operation_type',
        'from_location',
        'to_location',
        'contact',
        'notes',
    )

    @classmethod
    def check_stock(cls, tenant: Tenant, doc_id: int) -> list[dict]:
        """
        Shortages for a delivery as it stands now (form-time check).

        Advisory only: set_status('done') re-validates under lock.
        """
        doc = cls.get(tenant, doc_id)
        return StatusWorkflow.shortages(tenant, doc.line_list)
