"""
Inventory services: modular organization of inventory operations.

    from supplybank.services import (
        InventoryAggregate, InventoryTransactions, StorageLocationLedger,
    )
"""

from supplybank.services.aggregate import InventoryAggregate
from supplybank.services.ledger import Delta, StorageLocationLedger
from supplybank.services.transactions import InventoryTransactions

__all__ = [
    'Delta',
    'InventoryAggregate',
    'InventoryTransactions',
    'StorageLocationLedger',
]
