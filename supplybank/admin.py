"""
SupplyBank Admin: read-only views for debugging.

Catalog, locations and parties are editable. Everything the ledger owns
is read-only:
- StockTransaction: read-only with "reverse and delete" action
- InventoryItem: read-only (location, item, quantity)
- LedgerEntry: read-only audit trail (timestamp, delta, reference)
- Event: read-only event log
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from supplybank.exceptions import InventoryError
from supplybank.models import (
    DonationSite,
    Event,
    InventoryItem,
    Item,
    ItemCategory,
    LedgerEntry,
    LineItem,
    Manufacturer,
    Organization,
    Partner,
    ProductDrive,
    ProductDriveParticipant,
    StockTransaction,
    StorageLocation,
    Vendor,
)
from supplybank.money import format_cents

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Stock only changes via the inventory service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# ORGANIZATION & CATALOG
# =========================================================================

@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['name', 'short_name', 'default_storage_location']
    search_fields = ['name', 'short_name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ItemCategory)
class ItemCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization']
    list_filter = ['organization']
    search_fields = ['name']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin: editable."""

    list_display = ['name', 'organization', 'category', 'value_display',
                    'on_hand_minimum_quantity', 'active']
    list_filter = ['organization', 'active', 'category']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description=_('Value'))
    def value_display(self, obj):
        return format_cents(obj.value_in_cents)


@admin.register(StorageLocation)
class StorageLocationAdmin(admin.ModelAdmin):
    """Storage location admin: editable, quantities shown read-only."""

    list_display = ['name', 'organization', 'warehouse_type', 'size_display', 'is_active_display']
    list_filter = ['organization', 'warehouse_type']
    search_fields = ['name', 'address']
    readonly_fields = ['discarded_at', 'created_at', 'updated_at']

    @admin.display(description=_('Units on hand'))
    def size_display(self, obj):
        return obj.size()

    @admin.display(description=_('Active?'), boolean=True)
    def is_active_display(self, obj):
        return obj.is_active


# =========================================================================
# PARTIES
# =========================================================================

@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['business_name', 'contact_name', 'organization', 'active']
    list_filter = ['organization', 'active']
    search_fields = ['business_name', 'contact_name', 'email']


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'organization', 'status']
    list_filter = ['organization', 'status']
    search_fields = ['name', 'email']


@admin.register(DonationSite)
class DonationSiteAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization', 'active']
    list_filter = ['organization', 'active']
    search_fields = ['name']


@admin.register(Manufacturer)
class ManufacturerAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization']
    list_filter = ['organization']
    search_fields = ['name']


@admin.register(ProductDrive)
class ProductDriveAdmin(admin.ModelAdmin):
    list_display = ['name', 'organization', 'start_date', 'end_date']
    list_filter = ['organization']
    search_fields = ['name']


@admin.register(ProductDriveParticipant)
class ProductDriveParticipantAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'contact_name', 'organization']
    list_filter = ['organization']
    search_fields = ['business_name', 'contact_name']


# =========================================================================
# TRANSACTIONS (read-only with reverse action)
# =========================================================================

class LineItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = LineItem
    fields = ['item', 'quantity']
    readonly_fields = ['item', 'quantity']
    extra = 0


@admin.register(StockTransaction)
class StockTransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Transaction admin: read-only. Deleting reverses the ledger first."""

    list_display = ['id', 'kind', 'organization', 'storage_location', 'to_storage_location',
                    'status', 'total_quantity_display', 'issued_at']
    list_filter = ['kind', 'status', 'organization']
    search_fields = ['comment', 'agency_rep', 'purchased_from']
    date_hierarchy = 'issued_at'
    inlines = [LineItemInline]
    actions = ['destroy_transactions']

    @admin.display(description=_('Units'))
    def total_quantity_display(self, obj):
        return obj.total_quantity

    @admin.action(description=_('Reverse and delete selected transactions'))
    def destroy_transactions(self, request, queryset):
        from supplybank import inventory

        count = 0
        for stock_transaction in queryset:
            try:
                inventory.destroy(stock_transaction)
                count += 1
            except InventoryError as exc:
                logger.warning("destroy_transactions: failed to destroy %s: %s",
                               stock_transaction.reference, exc)

        self.message_user(request, _('{count} transaction(s) reversed and deleted.').format(count=count))


# =========================================================================
# LEDGER (read-only audit trail)
# =========================================================================

@admin.register(InventoryItem)
class InventoryItemAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """InventoryItem admin: read-only cache of the ledger."""

    list_display = ['item', 'storage_location', 'quantity_display', 'updated_at']
    list_filter = ['storage_location__organization', 'storage_location']
    search_fields = ['item__name']

    @admin.display(description=_('Quantity'))
    def quantity_display(self, obj):
        return obj.quantity


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """LedgerEntry admin: read-only. Immutable audit trail."""

    list_display = ['timestamp', 'inventory_item', 'phase', 'delta', 'reference']
    list_filter = ['phase', 'timestamp']
    search_fields = ['reference']
    date_hierarchy = 'timestamp'


@admin.register(Event)
class EventAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['event_time', 'event_type', 'organization', 'eventable_kind', 'eventable_id']
    list_filter = ['event_type', 'organization']
    date_hierarchy = 'event_time'
