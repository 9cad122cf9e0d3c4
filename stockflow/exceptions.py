"""
Exceptions for Stockflow.

Every error raised by the service layer is an InventoryError with a
structured code for programmatic handling. Subclasses group the codes by
how a caller is expected to react (fix input, pick another quantity,
resolve a conflict, ...).
"""

from decimal import Decimal
from typing import Any


class InventoryError(Exception):
    """
    Structured exception for inventory operations.

    Usage:
        try:
            inventory.deliveries.set_status(tenant, delivery_id, 'done')
        except InsufficientStock as e:
            print(f"{e.product_code}: only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    default_code = 'INVENTORY_ERROR'
    _default_messages: dict[str, str] = {}

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class ValidationError(InventoryError):
    """Invalid input. Raised before anything is written."""

    default_code = 'VALIDATION_ERROR'
    _default_messages = {
        'REQUIRED_FIELD': 'Required field is missing',
        'INVALID_QUANTITY': 'Quantity must be a positive integer',
        'INVALID_PRICE': 'Price must be zero or positive',
        'NO_LINES': 'At least one line item is required',
        'UNKNOWN_FIELD': 'Unknown field',
        'INVALID_DATE': 'Date must be a date or an ISO string (YYYY-MM-DD)',
        'REFERENCE_IMMUTABLE': 'Reference cannot be changed once assigned',
        'DOCUMENT_DONE': 'Completed documents cannot be edited',
        'INVALID_SHORT_CODE': 'Short code must be alphanumeric',
        'INVALID_TENANT': 'Tenant id must be a positive integer',
        'INVALID_CREDENTIALS': 'Invalid login or password',
    }

    @property
    def field(self) -> str | None:
        return self.data.get('field')


class InsufficientStock(InventoryError):
    """Requested quantity exceeds what the ledger holds."""

    default_code = 'INSUFFICIENT_STOCK'
    _default_messages = {
        'INSUFFICIENT_STOCK': 'Insufficient stock for this operation',
    }

    @property
    def product_code(self) -> str | None:
        return self.data.get('product_code')

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    @property
    def shortfall(self) -> int:
        return self.data.get('shortfall', self.requested - self.available)


class InvalidTransition(InventoryError):
    """Status change that is not the single legal next step."""

    default_code = 'INVALID_TRANSITION'
    _default_messages = {
        'INVALID_TRANSITION': 'Status transition not allowed',
    }

    @property
    def current(self) -> str | None:
        return self.data.get('current')

    @property
    def expected(self) -> str | None:
        return self.data.get('expected')


class DuplicateError(InventoryError):
    """Uniqueness violation. `field` names the duplicated attribute."""

    default_code = 'DUPLICATE'
    _default_messages = {
        'DUPLICATE': 'Value already exists',
        'DUPLICATE_REFERENCE': 'Reference already exists',
        'DUPLICATE_SHORT_CODE': 'Short code already exists',
        'DUPLICATE_PRODUCT_CODE': 'Product code already exists',
    }

    @property
    def field(self) -> str | None:
        return self.data.get('field')

    @property
    def value(self):
        return self.data.get('value')


class DuplicateReference(DuplicateError):
    default_code = 'DUPLICATE_REFERENCE'


class DuplicateShortCode(DuplicateError):
    default_code = 'DUPLICATE_SHORT_CODE'


class DuplicateProductCode(DuplicateError):
    default_code = 'DUPLICATE_PRODUCT_CODE'


class NotFound(InventoryError):
    """Missing document, stock item, site or tenant."""

    default_code = 'NOT_FOUND'
    _default_messages = {
        'NOT_FOUND': 'Not found',
        'TENANT_NOT_FOUND': 'Tenant not found',
    }

    @property
    def entity(self) -> str | None:
        return self.data.get('entity')


class StorageError(InventoryError):
    """Underlying persistence failure. Writes are never retried."""

    default_code = 'STORAGE_ERROR'
    _default_messages = {
        'STORAGE_ERROR': 'Storage failure',
    }
