"""
Tests for creating, committing and destroying transactions.
"""

import pytest

from supplybank import inventory
from supplybank.exceptions import (
    InsufficientStockError,
    IntegrityViolation,
    NotFoundError,
    ValidationError,
)
from supplybank.models import (
    AdjustmentDirection,
    DeliveryMethod,
    DonationSource,
    LedgerEntry,
    LedgerPhase,
    PartnerStatus,
    StockTransaction,
    StorageLocation,
    TransactionKind,
    TransactionStatus,
)


pytestmark = pytest.mark.django_db


class TestCreateTransaction:
    """Tests for inventory.create_transaction()."""

    def test_purchase_increases_quantity(self, stocked, diapers, vendor):
        """Purchase 5 X at A (10) → 15."""
        inventory.create_transaction(
            'purchase', stocked.pk, [{'item_id': diapers.pk, 'quantity': 5}], vendor=vendor
        )

        assert inventory.quantity_for(stocked, diapers) == 15

    def test_returns_committed_transaction(self, warehouse, diapers, vendor):
        purchase = inventory.create_transaction('purchase', warehouse.pk, [(diapers.pk, 5)], vendor=vendor)

        assert purchase.pk is not None
        assert purchase.status == TransactionStatus.COMMITTED
        assert purchase.committed_at is not None
        assert purchase.kind == TransactionKind.PURCHASE
        assert purchase.line_items_quantities() == {diapers.pk: 5}

    def test_accepts_instances_and_pks(self, warehouse, diapers, wipes, vendor):
        inventory.create_transaction(
            TransactionKind.PURCHASE,
            warehouse,
            [(diapers, 3), {'item': wipes, 'quantity': '4'}],
            vendor_id=vendor.pk,
        )

        assert inventory.quantity_for(warehouse, diapers) == 3
        assert inventory.quantity_for(warehouse, wipes) == 4

    def test_duplicate_items_are_combined(self, warehouse, diapers, vendor):
        purchase = inventory.purchase(warehouse, [(diapers, 3), (diapers, 4)], vendor=vendor)

        assert purchase.line_items.count() == 1
        assert purchase.line_items.get().quantity == 7
        assert inventory.quantity_for(warehouse, diapers) == 7

    def test_uses_organization_default_location(self, organization, warehouse, diapers):
        organization.default_storage_location = warehouse
        organization.save()

        inventory.create_transaction(
            'donation', None, [(diapers, 8)], organization=organization, source=DonationSource.MISC
        )

        assert inventory.quantity_for(warehouse, diapers) == 8

    def test_parses_money_strings(self, warehouse, diapers, vendor):
        purchase = inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor, amount_spent='$1,000.54')

        assert purchase.amount_spent_in_cents == 100054

    def test_distribution_defaults_to_pick_up(self, stocked, diapers, partner):
        distribution = inventory.distribute(stocked, [(diapers, 2)], partner=partner)

        assert distribution.delivery_method == DeliveryMethod.PICK_UP

    def test_adjustment_decrease(self, stocked, diapers):
        inventory.adjust(stocked, [(diapers, 4)], direction=AdjustmentDirection.DECREASE)

        assert inventory.quantity_for(stocked, diapers) == 6

    def test_donation_sources(self, warehouse, diapers, product_drive, manufacturer, donation_site):
        inventory.donate(warehouse, [(diapers, 1)], source=DonationSource.PRODUCT_DRIVE,
                         product_drive=product_drive)
        inventory.donate(warehouse, [(diapers, 2)], source=DonationSource.MANUFACTURER,
                         manufacturer=manufacturer)
        inventory.donate(warehouse, [(diapers, 3)], source=DonationSource.DONATION_SITE,
                         donation_site=donation_site, money_raised='12.50')

        assert inventory.quantity_for(warehouse, diapers) == 6
        assert StockTransaction.objects.of_kind(TransactionKind.DONATION).count() == 3
        assert StockTransaction.objects.get(donation_site=donation_site).money_raised_in_cents == 1250


class TestTransfer:
    """Tests for compound transfers."""

    def test_transfer_moves_stock(self, warehouse, office, diapers, vendor):
        """Transfer 5 X A(15)→B(0) → A 10, B 5."""
        inventory.adjust(warehouse, [(diapers, 15)])

        inventory.transfer(warehouse, office, [(diapers, 5)])

        assert inventory.quantity_for(warehouse, diapers) == 10
        assert inventory.quantity_for(office, diapers) == 5

    def test_insufficient_transfer_changes_nothing(self, stocked, office, diapers):
        with pytest.raises(InsufficientStockError):
            inventory.transfer(stocked, office, [(diapers, 11)])

        assert inventory.quantity_for(stocked, diapers) == 10
        assert inventory.quantity_for(office, diapers) == 0
        assert not StockTransaction.objects.of_kind(TransactionKind.TRANSFER).exists()

    def test_partial_shortage_aborts_every_line(self, stocked, office, diapers, wipes):
        with pytest.raises(InsufficientStockError):
            inventory.transfer(stocked, office, [(diapers, 5), (wipes, 1)])

        assert inventory.quantity_for(stocked, diapers) == 10
        assert inventory.quantity_for(office, diapers) == 0

    def test_destroy_transfer_moves_stock_back(self, stocked, office, diapers):
        transfer = inventory.transfer(stocked, office, [(diapers, 4)])

        inventory.delete_transaction(transfer.pk)

        assert inventory.quantity_for(stocked, diapers) == 10
        assert inventory.quantity_for(office, diapers) == 0


class TestValidation:
    """Malformed transactions are rejected before any ledger effect."""

    def test_unknown_kind(self, warehouse, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.create_transaction('recount', warehouse.pk, [(diapers, 1)])
        assert exc.value.code == 'INVALID_KIND'

    def test_empty_line_items(self, warehouse, vendor):
        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [], vendor=vendor)
        assert exc.value.code == 'EMPTY_LINE_ITEMS'

    @pytest.mark.parametrize('quantity', [0, -3, 2.5, 'many'])
    def test_invalid_quantity(self, warehouse, diapers, vendor, quantity):
        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(diapers, quantity)], vendor=vendor)
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_inactive_item(self, warehouse, diapers, vendor):
        diapers.deactivate()

        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor)
        assert exc.value.code == 'INACTIVE_ITEM'

    def test_inactive_location(self, office, diapers, vendor):
        office.deactivate()

        with pytest.raises(ValidationError) as exc:
            inventory.purchase(office, [(diapers, 1)], vendor=vendor)
        assert exc.value.code == 'INACTIVE_LOCATION'

    def test_item_of_another_organization(self, warehouse, other_organization, vendor):
        from supplybank.models import Item

        foreign = Item.objects.create(organization=other_organization, name='Pads')

        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(foreign, 1)], vendor=vendor)
        assert exc.value.code == 'CROSS_ORGANIZATION'

    def test_transfer_to_another_organization(self, stocked, diapers, other_organization):
        foreign = StorageLocation.objects.create(organization=other_organization, name='Bulk Storage')

        with pytest.raises(ValidationError) as exc:
            inventory.transfer(stocked, foreign, [(diapers, 1)])
        assert exc.value.code == 'CROSS_ORGANIZATION'
        assert inventory.quantity_for(stocked, diapers) == 10

    def test_transfer_to_same_location(self, stocked, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.transfer(stocked, stocked, [(diapers, 1)])
        assert exc.value.code == 'SAME_LOCATION'

    def test_transfer_without_destination(self, stocked, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.create_transaction('transfer', stocked.pk, [(diapers, 1)])
        assert exc.value.code == 'MISSING_FIELD'
        assert exc.value.data['field'] == 'to_storage_location'

    def test_adjustment_without_direction(self, warehouse, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.create_transaction('adjustment', warehouse.pk, [(diapers, 1)])
        assert exc.value.data['field'] == 'direction'

    def test_distribution_without_partner(self, stocked, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.create_transaction('distribution', stocked.pk, [(diapers, 1)])
        assert exc.value.data['field'] == 'partner'

    def test_deactivated_partner(self, stocked, diapers, partner):
        partner.status = PartnerStatus.DEACTIVATED
        partner.save()

        with pytest.raises(ValidationError) as exc:
            inventory.distribute(stocked, [(diapers, 1)], partner=partner)
        assert exc.value.code == 'INACTIVE_PARTNER'

    def test_inactive_vendor(self, warehouse, diapers, vendor):
        vendor.active = False
        vendor.save()

        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor)
        assert exc.value.code == 'INACTIVE_VENDOR'

    def test_donation_source_needs_its_record(self, warehouse, diapers):
        with pytest.raises(ValidationError) as exc:
            inventory.donate(warehouse, [(diapers, 1)], source=DonationSource.PRODUCT_DRIVE)
        assert exc.value.data['field'] == 'product_drive'

    def test_field_of_another_kind(self, warehouse, diapers, partner):
        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(diapers, 1)], partner=partner)
        assert exc.value.code == 'INVALID_FIELD'

    def test_negative_amount(self, warehouse, diapers, vendor):
        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor, amount_spent='-5')
        assert exc.value.code == 'INVALID_AMOUNT'

    def test_unknown_item(self, warehouse, vendor):
        with pytest.raises(NotFoundError) as exc:
            inventory.purchase(warehouse, [(999999, 1)], vendor=vendor)
        assert exc.value.data == {'model': 'Item', 'pk': 999999}

    def test_unknown_location(self, diapers):
        with pytest.raises(NotFoundError):
            inventory.create_transaction('donation', 999999, [(diapers, 1)], source='misc')

    def test_nothing_is_written(self, warehouse, diapers):
        with pytest.raises(ValidationError):
            inventory.create_transaction('adjustment', warehouse.pk, [(diapers, 1)])

        assert not StockTransaction.objects.exists()
        assert not LedgerEntry.objects.exists()


class TestInsufficientStock:
    """Outbound transactions never drive a quantity negative."""

    def test_distribution_exceeding_stock(self, stocked, diapers, partner):
        """A has 10 X; distribute 15 X → error, A stays 10."""
        with pytest.raises(InsufficientStockError) as exc:
            inventory.distribute(stocked, [(diapers, 15)], partner=partner)

        assert exc.value.available == 10
        assert exc.value.requested == 15
        assert exc.value.data['item_id'] == diapers.pk
        assert exc.value.data['storage_location_id'] == stocked.pk
        assert inventory.quantity_for(stocked, diapers) == 10
        assert not StockTransaction.objects.of_kind(TransactionKind.DISTRIBUTION).exists()

    def test_distribution_of_exact_stock(self, stocked, diapers, partner):
        inventory.distribute(stocked, [(diapers, 10)], partner=partner)

        assert inventory.quantity_for(stocked, diapers) == 0

    def test_decrease_adjustment_exceeding_stock(self, stocked, diapers):
        with pytest.raises(InsufficientStockError):
            inventory.adjust(stocked, [(diapers, 11)], direction=AdjustmentDirection.DECREASE)

    def test_stage_refuses_oversized_distribution(self, stocked, diapers, partner):
        """A has 10 X; staging a distribution of 50 X fails before anything is saved."""
        with pytest.raises(InsufficientStockError) as exc:
            inventory.stage(TransactionKind.DISTRIBUTION, stocked, [(diapers, 50)], partner=partner)

        assert exc.value.available == 10
        assert exc.value.requested == 50
        assert not StockTransaction.objects.of_kind(TransactionKind.DISTRIBUTION).exists()
        assert inventory.quantity_for(stocked, diapers) == 10

    def test_staged_draft_rechecked_at_commit(self, stocked, diapers, partner):
        draft = inventory.stage(TransactionKind.DISTRIBUTION, stocked, [(diapers, 8)], partner=partner)
        inventory.distribute(stocked, [(diapers, 5)], partner=partner)

        with pytest.raises(InsufficientStockError):
            inventory.commit(draft)

        draft.refresh_from_db()
        assert draft.status == TransactionStatus.DRAFT
        assert inventory.quantity_for(stocked, diapers) == 5


class TestCommit:
    """Tests for stage() and commit()."""

    def test_stage_has_no_effect(self, warehouse, diapers, vendor):
        draft = inventory.stage(TransactionKind.PURCHASE, warehouse, [(diapers, 5)], vendor=vendor)

        assert draft.status == TransactionStatus.DRAFT
        assert inventory.quantity_for(warehouse, diapers) == 0
        assert not LedgerEntry.objects.exists()

    def test_commit_applies_once(self, warehouse, diapers, vendor):
        draft = inventory.stage(TransactionKind.PURCHASE, warehouse, [(diapers, 5)], vendor=vendor)

        inventory.commit(draft)
        inventory.commit(draft)
        inventory.commit(StockTransaction.objects.get(pk=draft.pk))

        assert inventory.quantity_for(warehouse, diapers) == 5
        assert LedgerEntry.objects.filter(stock_transaction=draft).count() == 1

    def test_commit_returns_same_transaction(self, warehouse, diapers, vendor):
        draft = inventory.stage(TransactionKind.PURCHASE, warehouse, [(diapers, 5)], vendor=vendor)

        assert inventory.commit(draft) is draft
        assert draft.is_committed

    def test_commit_deleted_transaction(self, warehouse, diapers, vendor):
        draft = inventory.stage(TransactionKind.PURCHASE, warehouse, [(diapers, 5)], vendor=vendor)
        inventory.destroy(draft)

        with pytest.raises(NotFoundError):
            inventory.commit(draft)


class TestDestroy:
    """Tests for delete_transaction() and destroy()."""

    def test_delete_purchase_restores_quantity(self, stocked, diapers, vendor):
        """Purchase 5 X at A (10) → 15; delete it → 10."""
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)
        assert inventory.quantity_for(stocked, diapers) == 15

        inventory.delete_transaction(purchase.pk)

        assert inventory.quantity_for(stocked, diapers) == 10
        assert not StockTransaction.objects.filter(pk=purchase.pk).exists()

    def test_delete_distribution_returns_stock(self, stocked, diapers, partner):
        distribution = inventory.distribute(stocked, [(diapers, 6)], partner=partner)

        inventory.delete_transaction(distribution.pk)

        assert inventory.quantity_for(stocked, diapers) == 10

    def test_ledger_entries_survive(self, stocked, diapers, vendor):
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)
        reference = purchase.reference

        inventory.delete_transaction(purchase.pk)

        entries = LedgerEntry.objects.filter(reference=reference)
        assert [e.phase for e in entries] == [LedgerPhase.APPLY, LedgerPhase.REVERSE]
        assert [e.delta for e in entries] == [5, -5]
        assert all(e.stock_transaction_id is None for e in entries)

    def test_delete_twice(self, stocked, diapers, vendor):
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)
        inventory.delete_transaction(purchase.pk)

        with pytest.raises(NotFoundError):
            inventory.delete_transaction(purchase.pk)

        assert inventory.quantity_for(stocked, diapers) == 10

    def test_delete_draft_skips_ledger(self, warehouse, diapers, vendor):
        draft = inventory.stage(TransactionKind.PURCHASE, warehouse, [(diapers, 5)], vendor=vendor)

        inventory.destroy(draft)

        assert not StockTransaction.objects.exists()
        assert not LedgerEntry.objects.exists()

    def test_reverse_then_recommit_is_net_zero(self, stocked, office, diapers, vendor):
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)
        before = inventory.inventory_snapshot(stocked.organization_id)

        inventory.delete_transaction(purchase.pk)
        inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)

        assert inventory.inventory_snapshot(stocked.organization_id) == before

    def test_reversal_uses_recorded_deltas(self, stocked, diapers, vendor):
        """Editing line items of a committed transaction is refused; the ledger decides."""
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)
        line = purchase.line_items.get()
        line.quantity = 1
        with pytest.raises(ValueError):
            line.save()

        inventory.delete_transaction(purchase.pk)

        assert inventory.quantity_for(stocked, diapers) == 10

    def test_unreversible_purchase(self, office, diapers, vendor, partner):
        """Deleting a purchase whose stock already left is fatal."""
        purchase = inventory.purchase(office, [(diapers, 5)], vendor=vendor)
        inventory.distribute(office, [(diapers, 5)], partner=partner)

        with pytest.raises(IntegrityViolation) as exc:
            inventory.delete_transaction(purchase.pk)

        assert exc.value.code == 'REVERSAL_FAILED'
        assert inventory.quantity_for(office, diapers) == 0
        assert StockTransaction.objects.filter(pk=purchase.pk).exists()
        assert not LedgerEntry.objects.filter(phase=LedgerPhase.REVERSE).exists()


class TestFieldResolution:
    """Records given as primary keys resolve like instances."""

    def test_user_by_pk(self, warehouse, diapers, vendor, user):
        purchase = inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor, user=user.pk)

        assert purchase.user == user

    def test_user_id_keyword(self, warehouse, diapers, vendor, user):
        purchase = inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor, user_id=user.pk)

        assert purchase.user == user

    def test_unknown_user(self, warehouse, diapers, vendor):
        with pytest.raises(NotFoundError) as exc:
            inventory.purchase(warehouse, [(diapers, 1)], vendor=vendor, user=999999)

        assert exc.value.data['pk'] == 999999
        assert not StockTransaction.objects.exists()

    @pytest.mark.parametrize('make_entry', [
        lambda item: (item,),
        lambda item: (item, 1, 2),
        lambda item: item,
        lambda item: None,
    ], ids=['single', 'triple', 'bare-item', 'none'])
    def test_malformed_line_item(self, warehouse, diapers, vendor, make_entry):
        with pytest.raises(ValidationError) as exc:
            inventory.purchase(warehouse, [make_entry(diapers)], vendor=vendor)

        assert exc.value.code == 'INVALID_LINE_ITEM'
        assert not StockTransaction.objects.exists()


class TestDonationReferences:
    """Source-specific records only go with their own source."""

    def test_participant_with_product_drive(self, warehouse, diapers, product_drive, organization):
        from supplybank.models import ProductDriveParticipant

        participant = ProductDriveParticipant.objects.create(organization=organization, contact_name='Leslie')

        donation = inventory.donate(warehouse, [(diapers, 1)], source=DonationSource.PRODUCT_DRIVE,
                                    product_drive=product_drive, product_drive_participant=participant)

        assert donation.product_drive_participant == participant

    def test_participant_with_other_source(self, warehouse, diapers, manufacturer, organization):
        from supplybank.models import ProductDriveParticipant

        participant = ProductDriveParticipant.objects.create(organization=organization, contact_name='Leslie')

        with pytest.raises(ValidationError) as exc:
            inventory.donate(warehouse, [(diapers, 1)], source=DonationSource.MANUFACTURER,
                             manufacturer=manufacturer, product_drive_participant=participant)

        assert exc.value.code == 'INVALID_FIELD'
        assert exc.value.data['field'] == 'product_drive_participant'

    def test_manufacturer_with_misc_source(self, warehouse, diapers, manufacturer):
        with pytest.raises(ValidationError) as exc:
            inventory.donate(warehouse, [(diapers, 1)], source=DonationSource.MISC, manufacturer=manufacturer)

        assert exc.value.code == 'INVALID_FIELD'
        assert exc.value.data['field'] == 'manufacturer'
        assert not StockTransaction.objects.exists()
