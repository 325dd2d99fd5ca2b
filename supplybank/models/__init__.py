"""
SupplyBank Models.

Core models for inventory management:
- Organization: The bank owning everything else
- Item, ItemCategory: What is tracked
- StorageLocation: Where stock exists
- Vendor, Partner, DonationSite, Manufacturer, ProductDrive: Who goods come from / go to
- StockTransaction, LineItem: Units of inventory change
- InventoryItem: Quantity cache per (location, item)
- LedgerEntry: Immutable ledger of changes
- Event: Append-only log for downstream projections
"""

from supplybank.models.catalog import Item, ItemCategory
from supplybank.models.enums import (
    AdjustmentDirection,
    DeliveryMethod,
    DonationSource,
    LedgerPhase,
    PartnerStatus,
    TransactionKind,
    TransactionStatus,
    WarehouseType,
)
from supplybank.models.event import Event
from supplybank.models.inventory_item import InventoryItem
from supplybank.models.ledger_entry import LedgerEntry
from supplybank.models.location import StorageLocation
from supplybank.models.organization import Organization
from supplybank.models.parties import (
    DonationSite,
    Manufacturer,
    Partner,
    ProductDrive,
    ProductDriveParticipant,
    Vendor,
)
from supplybank.models.stock_transaction import LineItem, StockTransaction

__all__ = [
    'AdjustmentDirection',
    'DeliveryMethod',
    'DonationSource',
    'LedgerPhase',
    'PartnerStatus',
    'TransactionKind',
    'TransactionStatus',
    'WarehouseType',
    'Organization',
    'Item',
    'ItemCategory',
    'StorageLocation',
    'Vendor',
    'Partner',
    'DonationSite',
    'Manufacturer',
    'ProductDrive',
    'ProductDriveParticipant',
    'StockTransaction',
    'LineItem',
    'InventoryItem',
    'LedgerEntry',
    'Event',
]
