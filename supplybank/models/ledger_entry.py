"""
LedgerEntry model: immutable record of quantity changes.
"""

from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from supplybank.models.enums import LedgerPhase


class LedgerEntry(models.Model):
    """
    Immutable record of one quantity change at one (location, item).

    Rules:
    - NEVER update() or delete()
    - Reversals are new entries with the inverse delta
    - Updates InventoryItem._quantity atomically on save()

    This is the ONLY model that changes on-hand quantity.

    Entries outlive the transaction that produced them: deleting the
    transaction nulls ``stock_transaction`` and ``reference`` keeps the
    link readable.
    """

    inventory_item = models.ForeignKey(
        'supplybank.InventoryItem',
        on_delete=models.PROTECT,
        related_name='ledger_entries',
        verbose_name=_('Inventory item'),
    )
    stock_transaction = models.ForeignKey(
        'supplybank.StockTransaction',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='ledger_entries',
        verbose_name=_('Transaction'),
    )
    phase = models.CharField(
        max_length=10,
        choices=LedgerPhase.choices,
        default=LedgerPhase.APPLY,
        verbose_name=_('Phase'),
    )
    delta = models.IntegerField(
        verbose_name=_('Delta'),
        help_text=_('Positive = in, negative = out'),
    )
    reference = models.CharField(
        max_length=50,
        verbose_name=_('Reference'),
        help_text=_('Ex: "purchase:12"'),
    )
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))

    class Meta:
        verbose_name = _('Ledger entry')
        verbose_name_plural = _('Ledger entries')
        ordering = ['timestamp', 'pk']
        constraints = [
            # A transaction is applied, and reversed, at most once
            models.UniqueConstraint(
                fields=['stock_transaction', 'phase', 'inventory_item'],
                name='unique_ledger_entry_per_transaction_phase',
            )
        ]
        indexes = [
            models.Index(fields=['inventory_item', 'timestamp'], name='sb_ledger_item_ts_idx'),
        ]

    def save(self, *args, **kwargs):
        """Save entry and update the inventory cache atomically."""
        if self.pk:
            raise ValueError(
                "Ledger entries are immutable. "
                "To correct, create a new entry with the inverse delta."
            )

        if not self.reference:
            raise ValueError("Reference is required")

        with transaction.atomic():
            super().save(*args, **kwargs)

            from supplybank.models.inventory_item import InventoryItem

            InventoryItem.objects.filter(pk=self.inventory_item_id).update(
                _quantity=F('_quantity') + self.delta,
                updated_at=timezone.now()
            )

    def delete(self, *args, **kwargs):
        """Prevent deletion: entries are immutable."""
        raise ValueError(
            "Ledger entries are immutable. "
            "To reverse, create a new entry with the inverse delta."
        )

    def __str__(self) -> str:
        sign = '+' if self.delta > 0 else ''
        return f"{sign}{self.delta} | {self.reference}"
