"""
Storage location ledger: turns transactions into quantity changes.

Each transaction kind maps to a list of signed deltas through the
EFFECTS table; apply() writes them as LedgerEntry rows, reverse() writes
the exact inverse of what apply() wrote.

All writes run under transaction.atomic() with row locks.
"""

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass

from django.db import transaction

from supplybank.exceptions import InsufficientStockError, IntegrityViolation
from supplybank.models.enums import AdjustmentDirection, LedgerPhase, TransactionKind
from supplybank.models.inventory_item import InventoryItem
from supplybank.models.ledger_entry import LedgerEntry

logger = logging.getLogger('supplybank')


@dataclass(frozen=True)
class Delta:
    """Signed quantity change at one (location, item)."""

    storage_location_id: int
    item_id: int
    quantity: int

    @property
    def key(self) -> tuple[int, int]:
        return (self.storage_location_id, self.item_id)

    def as_dict(self) -> dict:
        return asdict(self)


# ══════════════════════════════════════════════════════════════
# SIGN CONVENTIONS
# ══════════════════════════════════════════════════════════════


def _inbound(stock_transaction, line_items):
    return [
        Delta(stock_transaction.storage_location_id, line.item_id, line.quantity)
        for line in line_items
    ]


def _outbound(stock_transaction, line_items):
    return [
        Delta(stock_transaction.storage_location_id, line.item_id, -line.quantity)
        for line in line_items
    ]


def _adjustment(stock_transaction, line_items):
    if stock_transaction.direction == AdjustmentDirection.DECREASE:
        return _outbound(stock_transaction, line_items)
    return _inbound(stock_transaction, line_items)


def _transfer(stock_transaction, line_items):
    return _outbound(stock_transaction, line_items) + [
        Delta(stock_transaction.to_storage_location_id, line.item_id, line.quantity)
        for line in line_items
    ]


EFFECTS = {
    TransactionKind.ADJUSTMENT: _adjustment,
    TransactionKind.PURCHASE: _inbound,
    TransactionKind.DONATION: _inbound,
    TransactionKind.DISTRIBUTION: _outbound,
    TransactionKind.TRANSFER: _transfer,
}


def effects(stock_transaction, line_items) -> list[Delta]:
    """
    Deltas a transaction produces, one per (location, item).

    Repeated items are combined; zero net deltas are dropped.
    """
    totals: dict[tuple[int, int], int] = defaultdict(int)
    for delta in EFFECTS[TransactionKind(stock_transaction.kind)](stock_transaction, line_items):
        totals[delta.key] += delta.quantity

    return [
        Delta(location_id, item_id, quantity)
        for (location_id, item_id), quantity in sorted(totals.items())
        if quantity != 0
    ]


# ══════════════════════════════════════════════════════════════
# LEDGER
# ══════════════════════════════════════════════════════════════


class StorageLocationLedger:
    """Apply and reverse transactions against InventoryItem rows."""

    @classmethod
    def check_stock(cls, deltas: list[Delta]) -> None:
        """
        Unlocked pre-check: fail early if a decrement exceeds stock.

        The authoritative check runs again under lock in apply().

        Raises:
            InsufficientStockError: If any quantity would go negative
        """
        decrements = [d for d in deltas if d.quantity < 0]
        if not decrements:
            return

        on_hand = cls._on_hand(decrements)
        for delta in decrements:
            cls._ensure_non_negative(delta, on_hand.get(delta.key, 0))

    @classmethod
    def apply(cls, stock_transaction, line_items) -> list[Delta]:
        """
        Write the ledger entries of a transaction.

        All-or-nothing: if any resulting quantity would be negative, no
        entry is written.

        Raises:
            InsufficientStockError: If any quantity would go negative

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on every affected InventoryItem
            - Verifies stock after lock
        """
        deltas = effects(stock_transaction, line_items)

        with transaction.atomic():
            rows = cls._lock_rows(deltas)

            for delta in deltas:
                cls._ensure_non_negative(delta, rows[delta.key]._quantity)

            for delta in deltas:
                LedgerEntry.objects.create(
                    inventory_item=rows[delta.key],
                    stock_transaction=stock_transaction,
                    phase=LedgerPhase.APPLY,
                    delta=delta.quantity,
                    reference=stock_transaction.reference,
                )

        return deltas

    @classmethod
    def reverse(cls, stock_transaction) -> list[Delta]:
        """
        Undo a transaction by writing the inverse of its applied entries.

        The inverse is read back from the ledger, never recomputed from
        the current line items. Returning stock never fails; taking back
        stock that has since left the location means the history is
        inconsistent.

        Raises:
            IntegrityViolation('REVERSAL_FAILED'): If the transaction was
                already reversed or a quantity would go negative
        """
        with transaction.atomic():
            entries = list(
                LedgerEntry.objects.filter(stock_transaction=stock_transaction)
                .select_related('inventory_item')
            )
            if any(entry.phase == LedgerPhase.REVERSE for entry in entries):
                cls._fail_reversal(stock_transaction, 'already reversed')

            deltas = [
                Delta(
                    entry.inventory_item.storage_location_id,
                    entry.inventory_item.item_id,
                    -entry.delta,
                )
                for entry in entries
                if entry.phase == LedgerPhase.APPLY
            ]
            rows = cls._lock_rows(deltas)

            for delta in deltas:
                if rows[delta.key]._quantity + delta.quantity < 0:
                    cls._fail_reversal(
                        stock_transaction,
                        'stock already left the location',
                        storage_location_id=delta.storage_location_id,
                        item_id=delta.item_id,
                        available=rows[delta.key]._quantity,
                        requested=-delta.quantity,
                    )

            for delta in deltas:
                LedgerEntry.objects.create(
                    inventory_item=rows[delta.key],
                    stock_transaction=stock_transaction,
                    phase=LedgerPhase.REVERSE,
                    delta=delta.quantity,
                    reference=stock_transaction.reference,
                )

        return deltas

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _on_hand(cls, deltas: list[Delta]) -> dict[tuple[int, int], int]:
        location_ids = {d.storage_location_id for d in deltas}
        item_ids = {d.item_id for d in deltas}
        rows = InventoryItem.objects.filter(
            storage_location_id__in=location_ids,
            item_id__in=item_ids,
        ).values_list('storage_location_id', 'item_id', '_quantity')
        return {(loc, item): qty for loc, item, qty in rows}

    @classmethod
    def _lock_rows(cls, deltas: list[Delta]) -> dict[tuple[int, int], InventoryItem]:
        """Get or create the affected rows, then lock them in pk order."""
        pks = []
        for delta in deltas:
            row, _ = InventoryItem.objects.get_or_create(
                storage_location_id=delta.storage_location_id,
                item_id=delta.item_id,
            )
            pks.append(row.pk)

        locked = InventoryItem.objects.select_for_update().filter(pk__in=pks).order_by('pk')
        return {(row.storage_location_id, row.item_id): row for row in locked}

    @classmethod
    def _ensure_non_negative(cls, delta: Delta, on_hand: int) -> None:
        if on_hand + delta.quantity < 0:
            logger.info(
                "inventory.insufficient",
                extra={
                    "storage_location_id": delta.storage_location_id,
                    "item_id": delta.item_id,
                    "available": on_hand,
                    "requested": -delta.quantity,
                },
            )
            raise InsufficientStockError(
                storage_location_id=delta.storage_location_id,
                item_id=delta.item_id,
                available=on_hand,
                requested=-delta.quantity,
            )

    @classmethod
    def _fail_reversal(cls, stock_transaction, reason: str, **data):
        logger.error(
            "inventory.reverse_failed",
            extra={"reference": stock_transaction.reference, "reason": reason, **data},
        )
        raise IntegrityViolation(
            'REVERSAL_FAILED',
            f"Cannot reverse {stock_transaction.reference}: {reason}",
            transaction_id=stock_transaction.pk,
            **data,
        )
