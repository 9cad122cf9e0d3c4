"""
Movement status workflow — forward-only transitions and their ledger effects.

    Receipt:   draft ──► ready ──► done
    Delivery:  draft ──► waiting ──► ready ──► done

Only the single next status is accepted. Entering `done` applies the
document to the ledger; every transition is recorded in history. The
status check, the stock check and the ledger writes run in one
transaction with the document row locked, so a second `done` on the same
document (re-entrant or concurrent) sees the committed status and fails.
"""

import logging
from collections import OrderedDict

from stockflow.exceptions import InsufficientStock, InvalidTransition, NotFound
from stockflow.models.enums import DONE, DeliveryStatus, MovementKind, ReceiptStatus
from stockflow.models.stock_item import StockItem
from stockflow.services.base import atomic_write
from stockflow.services.history import HistoryRecorder
from stockflow.services.ledger import StockLedger
from stockflow.snapshots import LineItem
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')

FLOWS = {
    MovementKind.RECEIPT: {
        ReceiptStatus.DRAFT.value: ReceiptStatus.READY.value,
        ReceiptStatus.READY.value: ReceiptStatus.DONE.value,
    },
    MovementKind.DELIVERY: {
        DeliveryStatus.DRAFT.value: DeliveryStatus.WAITING.value,
        DeliveryStatus.WAITING.value: DeliveryStatus.READY.value,
        DeliveryStatus.READY.value: DeliveryStatus.DONE.value,
    },
}


def next_status(kind, current: str) -> str | None:
    """The single legal successor of `current`, or None from a terminal status."""
    successor = FLOWS[MovementKind(kind)].get(current)
    return str(successor) if successor is not None else None


def requested_by_code(lines) -> OrderedDict:
    """Sum requested quantities per product code, ignoring lines without one."""
    totals = OrderedDict()
    for line in lines:
        if line.product_code:
            name, qty = totals.get(line.product_code, (line.product_name, 0))
            totals[line.product_code] = (name, qty + line.quantity)
    return totals


class StatusWorkflow:
    """Transition engine shared by receipts and deliveries."""

    @classmethod
    def shortages(cls, tenant: Tenant, lines, lock: bool = False) -> list[dict]:
        """
        Compare requested quantities with the ledger.

        Lines sharing a product code are summed. A code missing from the
        ledger counts as zero available.

        Args:
            lines: LineItems (or stored lines)
            lock: select_for_update() the ledger rows (inside a transaction)

        Returns:
            One dict per short product: product_code, product_name,
            available, requested, shortfall
        """
        requested = requested_by_code(lines)
        if not requested:
            return []

        qs = StockItem.objects.for_tenant(tenant).filter(product_code__in=list(requested))
        if lock:
            qs = qs.select_for_update()
        on_hand = dict(qs.values_list('product_code', 'quantity'))

        short = []
        for code, (name, qty) in requested.items():
            available = on_hand.get(code, 0)
            if available < qty:
                short.append({
                    'product_code': code,
                    'product_name': name,
                    'available': available,
                    'requested': qty,
                    'shortfall': qty - available,
                })
        return short

    @classmethod
    def ensure_available(cls, tenant: Tenant, lines, reference: str | None = None,
                         kind=MovementKind.DELIVERY):
        """
        Raise InsufficientStock for the first short product.

        Must run inside the transaction that applies the deduction.
        `kind` names the document being checked in the log event.
        """
        short = cls.shortages(tenant, lines, lock=True)
        if short:
            first = short[0]
            logger.warning(
                f"stockflow.{MovementKind(kind).value}.insufficient",
                extra={"tenant": tenant.user_id, "reference": reference, **first},
            )
            raise InsufficientStock(reference=reference, **first)

    @classmethod
    def transition(cls, tenant: Tenant, documents, doc_id: int, new_status: str):
        """
        Move a document to `new_status`.

        Args:
            documents: Receipts or Deliveries (provides model, kind, label)

        Returns:
            The updated document

        Raises:
            NotFound: Document does not belong to the tenant
            InvalidTransition: `new_status` is not the single next status
            InsufficientStock: Delivery `done` with a short product
                (document keeps its previous status, ledger untouched)
        """
        flow = FLOWS[documents.kind]

        with atomic_write(f'{documents.kind.value}.status'):
            doc = (
                documents.model.objects.select_for_update()
                .for_tenant(tenant)
                .filter(pk=doc_id)
                .first()
            )
            if doc is None:
                raise NotFound(entity=documents.kind.value, id=doc_id)

            expected = flow.get(doc.status)
            if expected is None or new_status != expected:
                raise InvalidTransition(
                    current=doc.status,
                    requested=new_status,
                    expected=str(expected) if expected is not None else None,
                    reference=doc.reference,
                )

            lines = [LineItem.from_line(line) for line in doc.lines.all()]
            if new_status == DONE:
                if documents.kind == MovementKind.RECEIPT:
                    cls._receive(tenant, doc, lines)
                else:
                    cls.ensure_available(tenant, lines, doc.reference)
                    cls._deliver(tenant, doc, lines)

            previous = doc.status
            doc.status = str(expected)
            doc.save(update_fields=['status', 'updated_at'])

            HistoryRecorder.record(
                tenant,
                documents.history_type,
                f"{documents.label} Status: {doc.status}",
                product_name=doc.product_label,
                related_id=doc.pk,
                description=f"{documents.label} {doc.reference} status changed to {doc.status}",
            )

        logger.info(
            f"stockflow.{documents.kind.value}.status",
            extra={
                "tenant": tenant.user_id,
                "reference": doc.reference,
                "from": previous,
                "to": doc.status,
            },
        )
        return doc

    @classmethod
    def _receive(cls, tenant, receipt, lines):
        """Add every line to the ledger, creating items for unknown codes."""
        note = f"Receipt {receipt.reference} done"
        for line in lines:
            existing = StockLedger.get_by_code(tenant, line.product_code)
            if existing is not None:
                StockLedger.upsert(
                    tenant,
                    product_code=line.product_code,
                    quantity_change=line.quantity,
                    description=note,
                )
            else:
                StockLedger.upsert(
                    tenant,
                    product_code=line.product_code,
                    quantity=line.quantity,
                    product_name=line.product_name,
                    unit_price=line.unit_price,
                    location=receipt.to_location or None,
                    description=note,
                )

    @classmethod
    def _deliver(cls, tenant, delivery, lines):
        """Deduct every coded line. Availability was checked under lock."""
        note = f"Delivery {delivery.reference} done"
        for line in lines:
            if not line.product_code:
                continue
            current = StockLedger.available(tenant, line.product_code)
            StockLedger.upsert(
                tenant,
                product_code=line.product_code,
                quantity=current - line.quantity,
                quantity_change=-line.quantity,
                description=note,
            )

    @classmethod
    def reverse(cls, tenant: Tenant, documents, doc):
        """
        Undo the ledger effect of a done document (used on deletion).

        Receipt: stock is taken back out; refused if already consumed.
        Delivery: stock is put back, recreating items deleted since.
        Lines without a product code cannot be traced and are skipped.
        """
        lines = [LineItem.from_line(line) for line in doc.lines.all()]
        note = f"{documents.label} {doc.reference} deleted"

        if documents.kind == MovementKind.RECEIPT:
            cls.ensure_available(tenant, lines, doc.reference, kind=documents.kind)
            for line in lines:
                if not line.product_code:
                    continue
                current = StockLedger.available(tenant, line.product_code)
                StockLedger.upsert(
                    tenant,
                    product_code=line.product_code,
                    quantity=current - line.quantity,
                    quantity_change=-line.quantity,
                    description=note,
                )
            return

        for line in lines:
            if not line.product_code:
                continue
            if StockLedger.get_by_code(tenant, line.product_code) is not None:
                StockLedger.upsert(
                    tenant,
                    product_code=line.product_code,
                    quantity_change=line.quantity,
                    description=note,
                )
            else:
                StockLedger.upsert(
                    tenant,
                    product_code=line.product_code,
                    quantity=line.quantity,
                    product_name=line.product_name,
                    unit_price=line.unit_price,
                    description=note,
                )
