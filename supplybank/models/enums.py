"""
Enums for SupplyBank models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransactionKind(models.TextChoices):
    """
    Kind of inventory-changing transaction.

    ADJUSTMENT:   Manual correction, in either direction.
    PURCHASE:     Goods bought from a vendor, enter a location.
    DONATION:     Goods given to the bank, enter a location.
    DISTRIBUTION: Goods handed to a partner agency, leave a location.
    TRANSFER:     Goods moved between two locations of one organization.
    """
    ADJUSTMENT = 'adjustment', _('Adjustment')
    PURCHASE = 'purchase', _('Purchase')
    DONATION = 'donation', _('Donation')
    DISTRIBUTION = 'distribution', _('Distribution')
    TRANSFER = 'transfer', _('Transfer')


class TransactionStatus(models.TextChoices):
    """Transaction lifecycle status."""
    DRAFT = 'draft', _('Draft')              # Staged, no ledger effect yet
    COMMITTED = 'committed', _('Committed')  # Ledger applied


class AdjustmentDirection(models.TextChoices):
    INCREASE = 'increase', _('Increase')
    DECREASE = 'decrease', _('Decrease')


class DonationSource(models.TextChoices):
    PRODUCT_DRIVE = 'product_drive', _('Product Drive')
    MANUFACTURER = 'manufacturer', _('Manufacturer')
    DONATION_SITE = 'donation_site', _('Donation Site')
    MISC = 'misc', _('Misc. Donation')


class DeliveryMethod(models.TextChoices):
    PICK_UP = 'pick_up', _('Pick up')
    DELIVERY = 'delivery', _('Delivery')
    SHIPPED = 'shipped', _('Shipped')


class WarehouseType(models.TextChoices):
    RESIDENTIAL = 'residential', _('Residential space used')
    SELF_STORAGE = 'self_storage', _('Consumer, self-storage or container space')
    COMMERCIAL = 'commercial', _('Commercial/office/business space that includes warehouse space')
    WAREHOUSE = 'warehouse', _('Warehouse with loading bay')


class PartnerStatus(models.TextChoices):
    INVITED = 'invited', _('Invited')
    APPROVED = 'approved', _('Approved')
    DEACTIVATED = 'deactivated', _('Deactivated')


class LedgerPhase(models.TextChoices):
    """Whether a ledger entry applies a transaction or undoes it."""
    APPLY = 'apply', _('Apply')
    REVERSE = 'reverse', _('Reverse')
