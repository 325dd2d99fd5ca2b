"""
StockTransaction and LineItem: units of inventory change.
"""

from django.conf import settings
from django.db import models
from django.db.models import F, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from supplybank.models.enums import (
    AdjustmentDirection,
    DeliveryMethod,
    DonationSource,
    TransactionKind,
    TransactionStatus,
)


class StockTransactionQuerySet(models.QuerySet):

    def for_organization(self, organization):
        return self.filter(organization=organization)

    def of_kind(self, kind):
        return self.filter(kind=kind)

    def committed(self):
        return self.filter(status=TransactionStatus.COMMITTED)

    def drafts(self):
        return self.filter(status=TransactionStatus.DRAFT)

    def touching(self, storage_location):
        """Transactions that move stock in or out of a location."""
        return self.filter(
            models.Q(storage_location=storage_location)
            | models.Q(to_storage_location=storage_location)
        )


class StockTransaction(models.Model):
    """
    One inventory-changing event: adjustment, purchase, donation,
    distribution or transfer.

    A single table tagged by ``kind``. Columns that only make sense for
    one kind (vendor, partner, donation source, ...) stay empty for the
    others; the transaction service rejects them when misused.

    LIFECYCLE:

        DRAFT ──commit()──► COMMITTED ──destroy()──► (deleted)
          │                                     ▲
          └──────────────destroy()──────────────┘

    Only commit() and destroy() touch the ledger, each exactly once.
    """

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='stock_transactions',
    )
    kind = models.CharField(
        max_length=20,
        choices=TransactionKind.choices,
        db_index=True,
        verbose_name=_('Kind'),
    )
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    storage_location = models.ForeignKey(
        'supplybank.StorageLocation',
        on_delete=models.PROTECT,
        related_name='stock_transactions',
        verbose_name=_('Storage location'),
        help_text=_('Transfers move stock out of this location.'),
    )
    to_storage_location = models.ForeignKey(
        'supplybank.StorageLocation',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='incoming_transfers',
        verbose_name=_('Destination'),
    )
    issued_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        verbose_name=_('Issued at'),
    )
    comment = models.TextField(blank=True, default='', verbose_name=_('Comment'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('User'),
    )
    committed_at = models.DateTimeField(null=True, blank=True)

    # Adjustment
    direction = models.CharField(
        max_length=10,
        choices=AdjustmentDirection.choices,
        blank=True,
        default='',
    )

    # Purchase
    vendor = models.ForeignKey(
        'supplybank.Vendor',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchases',
    )
    purchased_from = models.CharField(max_length=255, blank=True, default='')
    amount_spent_in_cents = models.PositiveIntegerField(default=0)

    # Donation
    source = models.CharField(
        max_length=20,
        choices=DonationSource.choices,
        blank=True,
        default='',
    )
    product_drive = models.ForeignKey(
        'supplybank.ProductDrive',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donations',
    )
    product_drive_participant = models.ForeignKey(
        'supplybank.ProductDriveParticipant',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donations',
    )
    manufacturer = models.ForeignKey(
        'supplybank.Manufacturer',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donations',
    )
    donation_site = models.ForeignKey(
        'supplybank.DonationSite',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donations',
    )
    money_raised_in_cents = models.PositiveIntegerField(default=0)

    # Distribution
    partner = models.ForeignKey(
        'supplybank.Partner',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='distributions',
    )
    delivery_method = models.CharField(
        max_length=20,
        choices=DeliveryMethod.choices,
        blank=True,
        default='',
    )
    shipping_cost_in_cents = models.PositiveIntegerField(default=0)
    agency_rep = models.CharField(max_length=255, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockTransactionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        ordering = ['-issued_at']
        indexes = [
            models.Index(fields=['organization', 'kind', 'issued_at'], name='sb_txn_org_kind_issued_idx'),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def reference(self) -> str:
        """Stable textual reference, kept on ledger entries after deletion."""
        return f"{self.kind}:{self.pk}"

    @property
    def is_committed(self) -> bool:
        return self.status == TransactionStatus.COMMITTED

    @property
    def total_quantity(self) -> int:
        return self.line_items.aggregate(
            t=Coalesce(Sum('quantity'), 0)
        )['t']

    @property
    def value_per_itemizable(self) -> int:
        """Fair market value of the line items, in cents."""
        return self.line_items.aggregate(
            t=Coalesce(Sum(F('quantity') * F('item__value_in_cents')), 0)
        )['t']

    def line_items_quantities(self) -> dict[int, int]:
        """Quantity per item id."""
        return dict(self.line_items.values_list('item_id', 'quantity'))

    def __str__(self) -> str:
        return f"{self.get_kind_display()} #{self.pk} @ {self.storage_location}"


class LineItem(models.Model):
    """
    One (item, quantity) entry of a transaction.

    Rules:
    - Quantity is unsigned; the transaction kind decides the direction
    - Frozen once the owning transaction is committed
    """

    transaction = models.ForeignKey(
        'supplybank.StockTransaction',
        on_delete=models.CASCADE,
        related_name='line_items',
    )
    item = models.ForeignKey(
        'supplybank.Item',
        on_delete=models.PROTECT,
        related_name='line_items',
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Line item')
        verbose_name_plural = _('Line items')
        ordering = ['pk']

    def save(self, *args, **kwargs):
        if self.transaction_id and self.transaction.is_committed:
            raise ValueError(
                "Line items of a committed transaction are immutable. "
                "Delete the transaction and create a new one."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.transaction.is_committed:
            raise ValueError(
                "Line items of a committed transaction are immutable. "
                "Delete the transaction and create a new one."
            )
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item}"
