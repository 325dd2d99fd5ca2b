"""
InventoryItem model: on-hand quantity cache per location and item.
"""

import logging

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger('supplybank')


class InventoryItemQuerySet(models.QuerySet):

    def for_organization(self, organization):
        return self.filter(storage_location__organization=organization)

    def at_location(self, storage_location):
        return self.filter(storage_location=storage_location)

    def non_empty(self):
        return self.filter(_quantity__gt=0)


class InventoryItem(models.Model):
    """
    Quantity of one item at one storage location.

    Performance:
    - _quantity is a cache updated atomically by LedgerEntry
    - Read is O(1), not O(N)
    - Use recalculate() for audit/correction

    Invariant: _quantity == sum(ledger_entries.delta) >= 0
    """

    storage_location = models.ForeignKey(
        'supplybank.StorageLocation',
        on_delete=models.PROTECT,
        related_name='inventory_items',
        verbose_name=_('Storage location'),
    )
    item = models.ForeignKey(
        'supplybank.Item',
        on_delete=models.PROTECT,
        related_name='inventory_items',
        verbose_name=_('Item'),
    )

    # Quantity cache (updated atomically by LedgerEntry)
    _quantity = models.IntegerField(
        default=0,
        verbose_name=_('Quantity'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InventoryItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Inventory item')
        verbose_name_plural = _('Inventory items')
        constraints = [
            models.UniqueConstraint(
                fields=['storage_location', 'item'],
                name='unique_inventory_item_per_location',
            ),
            models.CheckConstraint(
                condition=Q(_quantity__gte=0),
                name='inventory_item_quantity_non_negative',
            ),
        ]

    @property
    def quantity(self) -> int:
        """On-hand quantity: O(1) cache read."""
        return self._quantity

    def recalculate(self) -> int:
        """
        Recalculate quantity from the ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            New calculated quantity
        """
        total = self.ledger_entries.aggregate(
            t=Coalesce(Sum('delta'), 0)
        )['t']

        if total != self._quantity:
            old = self._quantity
            self._quantity = total
            self.save(update_fields=['_quantity', 'updated_at'])
            logger.warning(
                "inventory.recalculated",
                extra={
                    "inventory_item_id": self.pk,
                    "old": old,
                    "new": total,
                },
            )

        return total

    def __str__(self) -> str:
        return f"{self.item} [{self.storage_location}]: {self._quantity}"
