"""
Inventory transactions: stage, commit and destroy.

Every kind shares one contract:

    validate()  rejects bad input before any ledger effect
    commit()    applies the ledger exactly once
    destroy()   reverses the ledger exactly once, then deletes

State-changing methods hold the storage location locks and run under
transaction.atomic().
"""

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from supplybank.conf import supplybank_settings
from supplybank.exceptions import NotFoundError, ValidationError
from supplybank.locks import location_locks
from supplybank.models.catalog import Item
from supplybank.models.enums import (
    AdjustmentDirection,
    DeliveryMethod,
    DonationSource,
    TransactionKind,
    TransactionStatus,
)
from supplybank.models.event import Event
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
from supplybank.money import to_cents
from supplybank.services.aggregate import InventoryAggregate
from supplybank.services.ledger import StorageLocationLedger, effects
from supplybank.signals import inventory_changed

logger = logging.getLogger('supplybank')

COMMON_FIELDS = {'comment', 'issued_at', 'user'}

KIND_FIELDS = {
    TransactionKind.ADJUSTMENT: {'direction'},
    TransactionKind.PURCHASE: {'vendor', 'purchased_from', 'amount_spent_in_cents'},
    TransactionKind.DONATION: {
        'source', 'product_drive', 'product_drive_participant',
        'manufacturer', 'donation_site', 'money_raised_in_cents',
    },
    TransactionKind.DISTRIBUTION: {
        'partner', 'delivery_method', 'shipping_cost_in_cents', 'agency_rep',
    },
    TransactionKind.TRANSFER: {'to_storage_location'},
}

REFERENCES = {
    'to_storage_location': StorageLocation,
    'vendor': Vendor,
    'partner': Partner,
    'product_drive': ProductDrive,
    'product_drive_participant': ProductDriveParticipant,
    'manufacturer': Manufacturer,
    'donation_site': DonationSite,
}

# Dollar amounts accepted in place of the *_in_cents columns
MONEY_FIELDS = {
    'amount_spent': 'amount_spent_in_cents',
    'money_raised': 'money_raised_in_cents',
    'shipping_cost': 'shipping_cost_in_cents',
}

DONATION_SOURCE_FIELDS = {
    DonationSource.PRODUCT_DRIVE: 'product_drive',
    DonationSource.MANUFACTURER: 'manufacturer',
    DonationSource.DONATION_SITE: 'donation_site',
}

# Records that only make sense for one donation source
DONATION_REFERENCE_FIELDS = {
    'product_drive': {DonationSource.PRODUCT_DRIVE},
    'product_drive_participant': {DonationSource.PRODUCT_DRIVE},
    'manufacturer': {DonationSource.MANUFACTURER},
    'donation_site': {DonationSource.DONATION_SITE},
}


def _resolve(model, value):
    """Model instance from an instance or a primary key."""
    if value is None or isinstance(value, model):
        return value
    try:
        return model.objects.get(pk=value)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(model.__name__, value) from None


def _parse_quantity(value) -> int:
    if isinstance(value, str):
        value = value.strip()
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError('INVALID_QUANTITY', quantity=value) from None

    if not number.is_finite() or number != number.to_integral_value() or number <= 0:
        raise ValidationError('INVALID_QUANTITY', quantity=value)
    return int(number)


class InventoryTransactions:
    """State-changing transaction methods."""

    # ══════════════════════════════════════════════════════════════
    # EXTERNAL INTERFACE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_transaction(cls, kind, storage_location_id, line_items, **fields) -> StockTransaction:
        """
        Create and commit a transaction in one unit of work.

        Args:
            kind: TransactionKind value
            storage_location_id: Location (or its pk); None uses the
                default location of ``organization`` (keyword)
            line_items: [{"item_id": 1, "quantity": 5}, ...] or [(item, 5), ...]
            **fields: comment, issued_at, user and the kind's own fields
                (vendor, partner, source, to_storage_location, ...)

        Raises:
            ValidationError: Malformed input, nothing written
            NotFoundError: A referenced record does not exist
            InsufficientStockError: Stock would go negative, nothing written
        """
        stock_transaction, lines = cls.build(kind, storage_location_id, line_items, **fields)
        cls.validate(stock_transaction, lines)

        # Fail before taking any lock
        StorageLocationLedger.check_stock(effects(stock_transaction, lines))

        with location_locks(*cls._lock_keys(stock_transaction)):
            with transaction.atomic():
                cls._save(stock_transaction, lines)
                cls._commit(stock_transaction)

        return stock_transaction

    @classmethod
    def delete_transaction(cls, transaction_id) -> None:
        """
        Reverse and delete a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
            IntegrityViolation: If its effect can no longer be reversed
        """
        cls.destroy(_resolve(StockTransaction, transaction_id))

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def stage(cls, kind, storage_location, line_items, **fields) -> StockTransaction:
        """
        Validate and save a DRAFT transaction. No ledger effect.

        Outbound lines are checked against current stock here too;
        commit() checks again under lock.

        Raises:
            ValidationError: Malformed input, nothing written
            InsufficientStockError: Stock would go negative, nothing written
        """
        stock_transaction, lines = cls.build(kind, storage_location, line_items, **fields)
        cls.validate(stock_transaction, lines)
        StorageLocationLedger.check_stock(effects(stock_transaction, lines))

        with transaction.atomic():
            cls._save(stock_transaction, lines)

        return stock_transaction

    @classmethod
    def commit(cls, stock_transaction: StockTransaction) -> StockTransaction:
        """
        Apply a DRAFT transaction to the ledger.

        Committing an already committed transaction does nothing, so a
        retried commit never counts twice.

        Raises:
            ValidationError: If the draft is no longer valid
            InsufficientStockError: If stock would go negative
            NotFoundError: If the transaction was deleted

        Concurrency:
            - Holds the location locks of the transaction
            - Runs under transaction.atomic()
            - Uses select_for_update() on the transaction row
        """
        with location_locks(*cls._lock_keys(stock_transaction)):
            cls._commit(stock_transaction)
        return stock_transaction

    @classmethod
    def destroy(cls, stock_transaction: StockTransaction) -> None:
        """
        Reverse a committed transaction, then delete it with its line items.

        Drafts are deleted without touching the ledger.

        Raises:
            NotFoundError: If the transaction was already deleted
            IntegrityViolation: If its effect can no longer be reversed
        """
        with location_locks(*cls._lock_keys(stock_transaction)):
            with transaction.atomic():
                locked = cls._lock_transaction(stock_transaction.pk)
                reference = locked.reference
                deltas = []
                if locked.is_committed:
                    deltas = StorageLocationLedger.reverse(locked)
                    cls._publish(locked, deltas, action='destroy')
                locked.delete()

        logger.info(
            "inventory.reverse",
            extra={
                "reference": reference,
                "organization_id": stock_transaction.organization_id,
                "deltas": len(deltas),
            },
        )

    # ══════════════════════════════════════════════════════════════
    # BUILD & VALIDATE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def build(cls, kind, storage_location, line_items, **fields) -> tuple[StockTransaction, list[LineItem]]:
        """
        Unsaved transaction and line items from loose input.

        Resolves primary keys to records, converts dollar amounts to
        cents and combines repeated items into one line.

        Raises:
            ValidationError: Unknown kind, field or malformed value
            NotFoundError: A referenced record does not exist
        """
        if kind not in TransactionKind.values:
            raise ValidationError('INVALID_KIND', kind=kind)
        kind = TransactionKind(kind)

        organization = _resolve(Organization, fields.pop('organization', None))
        if storage_location is None and organization is not None:
            storage_location = organization.default_storage_location_id
        if storage_location is None:
            raise ValidationError('MISSING_FIELD', field='storage_location')
        location = _resolve(StorageLocation, storage_location)

        stock_transaction = StockTransaction(
            organization_id=organization.pk if organization else location.organization_id,
            kind=kind,
            storage_location=location,
            **cls._normalize_fields(kind, fields),
        )
        if kind == TransactionKind.DISTRIBUTION and not stock_transaction.delivery_method:
            stock_transaction.delivery_method = DeliveryMethod.PICK_UP

        return stock_transaction, cls._parse_line_items(line_items)

    @classmethod
    def validate(cls, stock_transaction: StockTransaction, line_items: list[LineItem]) -> None:
        """
        Reject a transaction before it reaches the ledger.

        Raises:
            ValidationError: EMPTY_LINE_ITEMS, INVALID_QUANTITY,
                INACTIVE_ITEM, INACTIVE_LOCATION, CROSS_ORGANIZATION,
                MISSING_FIELD, SAME_LOCATION, INACTIVE_VENDOR,
                INACTIVE_PARTNER, INVALID_KIND
        """
        if stock_transaction.kind not in TransactionKind.values:
            raise ValidationError('INVALID_KIND', kind=stock_transaction.kind)

        if not line_items:
            raise ValidationError('EMPTY_LINE_ITEMS')

        cls._check_location(stock_transaction, stock_transaction.storage_location, 'storage_location')

        for line in line_items:
            if line.quantity is None or line.quantity <= 0:
                raise ValidationError('INVALID_QUANTITY', item_id=line.item_id, quantity=line.quantity)
            cls._check_owner(stock_transaction, line.item, 'item')
            if not line.item.active:
                raise ValidationError('INACTIVE_ITEM', item_id=line.item_id, item=line.item.name)

        for field in REFERENCES:
            related = getattr(stock_transaction, field)
            if related is not None:
                cls._check_owner(stock_transaction, related, field)

        VALIDATORS[TransactionKind(stock_transaction.kind)](stock_transaction)

    @classmethod
    def _validate_adjustment(cls, stock_transaction):
        if stock_transaction.direction not in AdjustmentDirection.values:
            raise ValidationError('MISSING_FIELD', field='direction')

    @classmethod
    def _validate_purchase(cls, stock_transaction):
        vendor = stock_transaction.vendor
        if vendor is not None and not vendor.active:
            raise ValidationError('INACTIVE_VENDOR', vendor_id=vendor.pk)

    @classmethod
    def _validate_donation(cls, stock_transaction):
        source = stock_transaction.source
        if source not in DonationSource.values:
            raise ValidationError('MISSING_FIELD', field='source')

        source = DonationSource(source)
        required = DONATION_SOURCE_FIELDS.get(source)
        if required and getattr(stock_transaction, required) is None:
            raise ValidationError('MISSING_FIELD', field=required, source=source)

        for field, sources in DONATION_REFERENCE_FIELDS.items():
            if source not in sources and getattr(stock_transaction, f"{field}_id") is not None:
                raise ValidationError('INVALID_FIELD', field=field, source=source)

    @classmethod
    def _validate_distribution(cls, stock_transaction):
        partner = stock_transaction.partner
        if partner is None:
            raise ValidationError('MISSING_FIELD', field='partner')
        if partner.is_deactivated:
            raise ValidationError('INACTIVE_PARTNER', partner_id=partner.pk)
        if stock_transaction.delivery_method not in DeliveryMethod.values:
            raise ValidationError('MISSING_FIELD', field='delivery_method')

    @classmethod
    def _validate_transfer(cls, stock_transaction):
        destination = stock_transaction.to_storage_location
        if destination is None:
            raise ValidationError('MISSING_FIELD', field='to_storage_location')
        if destination.pk == stock_transaction.storage_location_id:
            raise ValidationError('SAME_LOCATION', storage_location_id=destination.pk)
        cls._check_location(stock_transaction, destination, 'to_storage_location')

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _commit(cls, stock_transaction: StockTransaction) -> None:
        """Commit with the location locks already held."""
        with transaction.atomic():
            locked = cls._lock_transaction(stock_transaction.pk)
            cls._lock_locations(locked)

            if locked.is_committed:
                logger.info("inventory.commit.skipped", extra={"reference": locked.reference})
            else:
                lines = list(locked.line_items.select_related('item'))
                cls.validate(locked, lines)
                deltas = StorageLocationLedger.apply(locked, lines)

                locked.status = TransactionStatus.COMMITTED
                locked.committed_at = timezone.now()
                locked.save(update_fields=['status', 'committed_at', 'updated_at'])
                cls._publish(locked, deltas, action='commit')

                logger.info(
                    "inventory.commit",
                    extra={
                        "reference": locked.reference,
                        "organization_id": locked.organization_id,
                        "deltas": len(deltas),
                    },
                )

        stock_transaction.status = locked.status
        stock_transaction.committed_at = locked.committed_at

    @classmethod
    def _save(cls, stock_transaction, lines) -> None:
        stock_transaction.status = TransactionStatus.DRAFT
        stock_transaction.save()
        for line in lines:
            line.transaction = stock_transaction
        LineItem.objects.bulk_create(lines)

    @classmethod
    def _publish(cls, stock_transaction, deltas, action: str) -> None:
        """Record the event now; notify listeners once the commit lands."""
        organization_id = stock_transaction.organization_id
        transaction_id = stock_transaction.pk
        kind = stock_transaction.kind
        payload = [delta.as_dict() for delta in deltas]

        if supplybank_settings.EMIT_EVENTS:
            Event.objects.create(
                organization_id=organization_id,
                event_type=f"{kind}_event" if action == 'commit' else f"{kind}_destroy_event",
                eventable_kind=kind,
                eventable_id=transaction_id,
                data={'action': action, 'deltas': payload},
                user_id=stock_transaction.user_id,
            )

        InventoryAggregate.invalidate(organization_id)

        def notify():
            # Readers may have cached pre-commit rows in between
            InventoryAggregate.invalidate(organization_id)
            inventory_changed.send(
                sender=StockTransaction,
                transaction_id=transaction_id,
                organization_id=organization_id,
                kind=kind,
                action=action,
                deltas=payload,
            )

        transaction.on_commit(notify)

    @classmethod
    def _lock_transaction(cls, pk) -> StockTransaction:
        try:
            return StockTransaction.objects.select_for_update().get(pk=pk)
        except StockTransaction.DoesNotExist:
            raise NotFoundError('StockTransaction', pk) from None

    @classmethod
    def _lock_locations(cls, stock_transaction) -> None:
        """Row-lock the locations so deactivate() cannot interleave."""
        pks = [pk for _, pk in cls._lock_keys(stock_transaction)]
        list(StorageLocation.objects.select_for_update().filter(pk__in=pks).order_by('pk'))

    @classmethod
    def _lock_keys(cls, stock_transaction) -> list[tuple[int, int]]:
        keys = [(stock_transaction.organization_id, stock_transaction.storage_location_id)]
        if stock_transaction.to_storage_location_id:
            keys.append((stock_transaction.organization_id, stock_transaction.to_storage_location_id))
        return keys

    @classmethod
    def _check_owner(cls, stock_transaction, record, field: str) -> None:
        if record.organization_id != stock_transaction.organization_id:
            raise ValidationError(
                'CROSS_ORGANIZATION',
                field=field,
                pk=record.pk,
                organization_id=stock_transaction.organization_id,
            )

    @classmethod
    def _check_location(cls, stock_transaction, location, field: str) -> None:
        cls._check_owner(stock_transaction, location, field)
        if not location.is_active:
            raise ValidationError('INACTIVE_LOCATION', field=field, storage_location_id=location.pk)

    @classmethod
    def _normalize_fields(cls, kind, fields) -> dict:
        allowed = COMMON_FIELDS | KIND_FIELDS[kind]
        values = {}

        for name, value in fields.items():
            if name in MONEY_FIELDS:
                name, value = MONEY_FIELDS[name], to_cents(value, name)
            elif name.endswith('_in_cents'):
                value = cls._parse_cents(name, value)

            field = name[:-3] if name.endswith('_id') and name[:-3] in (*REFERENCES, 'user') else name
            if field not in allowed:
                raise ValidationError('INVALID_FIELD', field=name, kind=kind)

            if field in REFERENCES:
                value = _resolve(REFERENCES[field], value)
            elif field == 'user':
                value = _resolve(get_user_model(), value)
            elif value is None:
                continue
            values[field] = value

        return values

    @classmethod
    def _parse_cents(cls, name, value) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError('INVALID_AMOUNT', field=name, value=value)
        return value

    @classmethod
    def _parse_line_items(cls, line_items) -> list[LineItem]:
        """Resolve items and combine repeated ones, keeping first-seen order."""
        combined: dict[int, int] = {}
        for entry in line_items or []:
            if isinstance(entry, Mapping):
                item = entry.get('item', entry.get('item_id'))
                quantity = entry.get('quantity')
            else:
                try:
                    item, quantity = entry
                except (TypeError, ValueError):
                    raise ValidationError('INVALID_LINE_ITEM', entry=entry) from None

            pk = getattr(item, 'pk', item)
            try:
                pk = int(pk)
            except (TypeError, ValueError):
                raise NotFoundError('Item', pk) from None
            combined[pk] = combined.get(pk, 0) + _parse_quantity(quantity)

        found = Item.objects.in_bulk(list(combined))
        for pk in combined:
            if pk not in found:
                raise NotFoundError('Item', pk)

        return [LineItem(item=found[pk], quantity=quantity) for pk, quantity in combined.items()]


VALIDATORS = {
    TransactionKind.ADJUSTMENT: InventoryTransactions._validate_adjustment,
    TransactionKind.PURCHASE: InventoryTransactions._validate_purchase,
    TransactionKind.DONATION: InventoryTransactions._validate_donation,
    TransactionKind.DISTRIBUTION: InventoryTransactions._validate_distribution,
    TransactionKind.TRANSFER: InventoryTransactions._validate_transfer,
}
