"""
Exceptions for SupplyBank.

Every error is an InventoryError with a structured code for programmatic
handling. Subclasses group the codes by how callers react to them.
"""

from typing import Any


class InventoryError(Exception):
    """
    Structured exception for inventory operations.

    Usage:
        try:
            inventory.distribute(warehouse, [(wipes, 15)], partner=pantry)
        except InsufficientStockError as e:
            print(f"Only {e.available} on hand")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'EMPTY_LINE_ITEMS': 'At least one line item is required',
        'INVALID_QUANTITY': 'Quantity must be a positive whole number',
        'INVALID_KIND': 'Unknown transaction kind',
        'INVALID_FIELD': 'Field does not apply to this kind of transaction',
        'INVALID_AMOUNT': 'Amount is not a valid money value',
        'INACTIVE_ITEM': 'Item is inactive',
        'INACTIVE_LOCATION': 'Storage location is inactive',
        'INACTIVE_VENDOR': 'Vendor is inactive',
        'INACTIVE_PARTNER': 'Partner is deactivated',
        'CROSS_ORGANIZATION': 'Record belongs to another organization',
        'MISSING_FIELD': 'A required field is missing',
        'SAME_LOCATION': 'Transfer source and destination must differ',
        'LOCATION_NOT_EMPTY': 'Storage location still holds inventory',
        'INSUFFICIENT_STOCK': 'Not enough inventory on hand',
        'NOT_FOUND': 'Record not found',
        'REVERSAL_FAILED': 'Transaction could not be reversed',
        'LOCK_TIMEOUT': 'Timed out waiting for a storage location lock',
        'INVALID_LINE_ITEM': 'Line item must be an (item, quantity) pair',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, float, bool, type(None))) else str(v)
                for k, v in self.data.items()
            }
        }


class ValidationError(InventoryError):
    """Malformed input, raised before any ledger effect."""


class InsufficientStockError(InventoryError):
    """A line item would drive an on-hand quantity negative."""

    def __init__(self, message: str | None = None, **data: Any):
        super().__init__('INSUFFICIENT_STOCK', message, **data)

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class NotFoundError(InventoryError):
    """A referenced record does not exist."""

    def __init__(self, model: str, pk: Any):
        super().__init__('NOT_FOUND', f"{model} {pk} not found", model=model, pk=pk)


class IntegrityViolation(InventoryError):
    """
    The ledger cannot be reversed without breaking an invariant.

    Not recoverable by the caller: the data needs investigating.
    """
