"""
Inventory aggregate: read-only views over on-hand quantities.

Snapshots come from InventoryItem rows, optionally through the Django
cache. Cache keys carry a per-organization version that every commit and
destroy bumps, so a finished write is never followed by a stale read.
"""

from django.core.cache import caches
from django.db.models import Sum
from django.db.models.functions import Coalesce

from supplybank.conf import supplybank_settings
from supplybank.models.inventory_item import InventoryItem
from supplybank.models.location import StorageLocation

Snapshot = dict[int, dict[int, int]]


def _pk(obj_or_pk) -> int:
    return getattr(obj_or_pk, 'pk', obj_or_pk)


class InventoryAggregate:
    """Read-only inventory queries. No locking."""

    @classmethod
    def inventory_for(cls, organization) -> Snapshot:
        """
        Snapshot of every location of an organization.

        Returns:
            {storage_location_id: {item_id: quantity}}; locations without
            stock map to an empty dict
        """
        organization_id = _pk(organization)
        timeout = supplybank_settings.CACHE_TIMEOUT
        if not timeout:
            return cls._compute(organization_id)

        cache = cls._cache()
        key = cls._snapshot_key(organization_id, cls._version(organization_id))
        snapshot = cache.get(key)
        if snapshot is None:
            snapshot = cls._compute(organization_id)
            cache.set(key, snapshot, timeout)
        return snapshot

    @classmethod
    def inventory_snapshot(cls, organization_id) -> Snapshot:
        return cls.inventory_for(organization_id)

    @classmethod
    def quantity_for(cls, storage_location, item) -> int:
        """On-hand quantity at one (location, item): O(1)."""
        quantity = InventoryItem.objects.filter(
            storage_location_id=_pk(storage_location),
            item_id=_pk(item),
        ).values_list('_quantity', flat=True).first()
        return quantity or 0

    @classmethod
    def item_totals(cls, organization) -> dict[int, int]:
        """Quantity per item id, summed over the active locations."""
        rows = InventoryItem.objects.filter(
            storage_location__organization_id=_pk(organization),
            storage_location__discarded_at__isnull=True,
        ).values('item_id').annotate(
            total=Coalesce(Sum('_quantity'), 0)
        ).values_list('item_id', 'total')
        return dict(rows)

    @classmethod
    def items_for_location(cls, storage_location, include_empty: bool = False):
        """InventoryItem rows of one location, with their items."""
        qs = InventoryItem.objects.filter(
            storage_location_id=_pk(storage_location)
        ).select_related('item').order_by('item__name')
        if not include_empty:
            qs = qs.non_empty()
        return qs

    @classmethod
    def audit(cls, organization=None, fix: bool = True) -> list[tuple[InventoryItem, int, int]]:
        """
        Compare every cached quantity with its ledger.

        Args:
            organization: Limit to one organization (None = all)
            fix: Write the ledger total back when they differ

        Returns:
            List of (inventory_item, cached, ledger_total) for rows that drifted
        """
        qs = InventoryItem.objects.annotate(
            ledger_total=Coalesce(Sum('ledger_entries__delta'), 0)
        ).select_related('storage_location')
        if organization is not None:
            qs = qs.filter(storage_location__organization_id=_pk(organization))

        drifted = []
        touched = set()
        for row in qs:
            if row.ledger_total == row._quantity:
                continue
            drifted.append((row, row._quantity, row.ledger_total))
            if fix:
                row.recalculate()
                touched.add(row.storage_location.organization_id)

        for organization_id in touched:
            cls.invalidate(organization_id)
        return drifted

    # ══════════════════════════════════════════════════════════════
    # CACHE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def invalidate(cls, organization) -> None:
        """Retire every cached snapshot of an organization."""
        if not supplybank_settings.CACHE_TIMEOUT:
            return
        cache = cls._cache()
        key = cls._version_key(_pk(organization))
        cache.add(key, 0, None)
        try:
            cache.incr(key)
        except ValueError:
            # Evicted between add() and incr()
            cache.set(key, 1, None)

    @classmethod
    def _compute(cls, organization_id: int) -> Snapshot:
        snapshot: Snapshot = {
            pk: {} for pk in StorageLocation.objects.filter(
                organization_id=organization_id
            ).values_list('pk', flat=True)
        }
        rows = InventoryItem.objects.filter(
            storage_location__organization_id=organization_id,
        ).values_list('storage_location_id', 'item_id', '_quantity')
        for location_id, item_id, quantity in rows:
            snapshot[location_id][item_id] = quantity
        return snapshot

    @classmethod
    def _cache(cls):
        return caches[supplybank_settings.CACHE_ALIAS]

    @classmethod
    def _version(cls, organization_id: int) -> int:
        key = cls._version_key(organization_id)
        version = cls._cache().get(key)
        if version is None:
            cls._cache().add(key, 0, None)
            version = cls._cache().get(key, 0)
        return version

    @classmethod
    def _version_key(cls, organization_id: int) -> str:
        return f"supplybank:inventory:{organization_id}:version"

    @classmethod
    def _snapshot_key(cls, organization_id: int, version: int) -> str:
        return f"supplybank:inventory:{organization_id}:v{version}"
