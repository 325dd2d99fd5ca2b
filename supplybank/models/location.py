"""
StorageLocation model: where inventory is kept.
"""

from django.db import models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from supplybank.exceptions import ValidationError
from supplybank.locks import location_locks
from supplybank.models.enums import WarehouseType


class StorageLocationQuerySet(models.QuerySet):

    def active(self):
        return self.filter(discarded_at__isnull=True)

    def discarded(self):
        return self.filter(discarded_at__isnull=False)


class StorageLocation(models.Model):
    """
    A warehouse, office or closet that holds inventory.

    Quantities are not stored here: they live in InventoryItem rows,
    which only the ledger changes. Deactivating a location is a soft
    delete (``discarded_at``) so its history survives, and is refused
    while anything is still on hand.
    """

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='storage_locations',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    address = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Address'))
    warehouse_type = models.CharField(
        max_length=20,
        choices=WarehouseType.choices,
        blank=True,
        default='',
        verbose_name=_('Warehouse type'),
    )
    square_footage = models.PositiveIntegerField(null=True, blank=True)
    discarded_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Deactivated at'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StorageLocationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Storage location')
        verbose_name_plural = _('Storage locations')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'name'],
                name='unique_storage_location_name_per_organization',
            )
        ]

    @property
    def is_active(self) -> bool:
        return self.discarded_at is None

    def size(self) -> int:
        """Total units on hand, all items combined."""
        return self.inventory_items.aggregate(
            t=Coalesce(Sum('_quantity'), 0)
        )['t']

    def item_total(self, item) -> int:
        """Units of one item on hand here."""
        row = self.inventory_items.filter(item=item).first()
        return row.quantity if row else 0

    def deactivate(self) -> None:
        """
        Soft-delete the location.

        Holds the location lock, so no commit lands stock between the
        emptiness check and the save.

        Raises:
            ValidationError('LOCATION_NOT_EMPTY'): If any item is still on hand
            InventoryError('LOCK_TIMEOUT'): If a commit holds the location too long
        """
        with location_locks((self.organization_id, self.pk)):
            with transaction.atomic():
                StorageLocation.objects.select_for_update().get(pk=self.pk)
                if self.inventory_items.exclude(_quantity=0).exists():
                    raise ValidationError(
                        'LOCATION_NOT_EMPTY',
                        storage_location_id=self.pk,
                        on_hand=self.size(),
                    )
                self.discarded_at = timezone.now()
                self.save(update_fields=['discarded_at', 'updated_at'])

    def reactivate(self) -> None:
        self.discarded_at = None
        self.save(update_fields=['discarded_at', 'updated_at'])

    def __str__(self) -> str:
        return self.name
