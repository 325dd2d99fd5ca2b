"""
SupplyBank: inventory ledger for essential-supply banks.

Tracks what a diaper bank holds at each storage location and how it
changes through adjustments, purchases, donations, distributions and
transfers.

Usage:
    from supplybank import inventory, InventoryError

    inventory.purchase(warehouse, [(wipes, 50)], vendor=target)
    inventory.distribute(warehouse, [(wipes, 20)], partner=pantry)
    inventory.quantity_for(warehouse, wipes)  # 30
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from supplybank.service import Inventory
        return Inventory
    elif name == 'InventoryError':
        from supplybank.exceptions import InventoryError
        return InventoryError
    elif name == 'ValidationError':
        from supplybank.exceptions import ValidationError
        return ValidationError
    elif name == 'InsufficientStockError':
        from supplybank.exceptions import InsufficientStockError
        return InsufficientStockError
    elif name == 'NotFoundError':
        from supplybank.exceptions import NotFoundError
        return NotFoundError
    elif name == 'StockTransaction':
        from supplybank.models.stock_transaction import StockTransaction
        return StockTransaction
    elif name == 'TransactionKind':
        from supplybank.models.enums import TransactionKind
        return TransactionKind
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'InventoryError',
    'ValidationError',
    'InsufficientStockError',
    'NotFoundError',
    'StockTransaction',
    'TransactionKind',
]

__version__ = '0.1.0'
