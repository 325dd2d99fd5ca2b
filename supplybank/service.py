"""
Inventory Service: the single public interface for inventory operations.

Usage:
    from supplybank import inventory, InventoryError

    inventory.purchase(warehouse, [(wipes, 50)], vendor=target)
    inventory.transfer(warehouse, office, [(wipes, 10)])
    inventory.inventory_snapshot(organization.pk)  # {warehouse.pk: {wipes.pk: 40}, ...}
"""

from supplybank.models.catalog import Item
from supplybank.models.enums import AdjustmentDirection, DonationSource, TransactionKind
from supplybank.models.stock_transaction import StockTransaction
from supplybank.services.aggregate import InventoryAggregate
from supplybank.services.alerts import check_low_stock
from supplybank.services.transactions import InventoryTransactions


class Inventory(InventoryTransactions, InventoryAggregate):
    """
    Single interface for all inventory operations.

    Parameter convention: (storage_location, line_items, ...)
    line_items is a list of (item, quantity) pairs or
    {"item_id": ..., "quantity": ...} mappings; records may be given
    as instances or primary keys.

    IMPORTANT: All state-changing methods commit through
    create_transaction(), which validates, locks the affected locations
    and applies the ledger atomically.
    """

    # ══════════════════════════════════════════════════════════════
    # SHORTCUTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def adjust(cls, storage_location, line_items,
               direction: str = AdjustmentDirection.INCREASE, **fields) -> StockTransaction:
        """Manual correction (ex: starting inventory, damaged goods)."""
        return cls.create_transaction(
            TransactionKind.ADJUSTMENT, storage_location, line_items,
            direction=direction, **fields
        )

    @classmethod
    def purchase(cls, storage_location, line_items, **fields) -> StockTransaction:
        """Goods bought from a vendor enter a location."""
        return cls.create_transaction(
            TransactionKind.PURCHASE, storage_location, line_items, **fields
        )

    @classmethod
    def donate(cls, storage_location, line_items,
               source: str = DonationSource.MISC, **fields) -> StockTransaction:
        """Donated goods enter a location."""
        return cls.create_transaction(
            TransactionKind.DONATION, storage_location, line_items,
            source=source, **fields
        )

    @classmethod
    def distribute(cls, storage_location, line_items, partner, **fields) -> StockTransaction:
        """
        Goods leave a location for a partner agency.

        Raises:
            InsufficientStockError: If any item is short at the location
        """
        return cls.create_transaction(
            TransactionKind.DISTRIBUTION, storage_location, line_items,
            partner=partner, **fields
        )

    @classmethod
    def transfer(cls, from_location, to_location, line_items, **fields) -> StockTransaction:
        """
        Move goods between two locations of one organization.

        Both sides apply in one unit of work, or neither does.
        """
        return cls.create_transaction(
            TransactionKind.TRANSFER, from_location, line_items,
            to_storage_location=to_location, **fields
        )

    # ══════════════════════════════════════════════════════════════
    # REPORTING
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def low_stock(cls, organization) -> list[tuple[Item, int]]:
        return check_low_stock(organization)
