"""
Tests for the read-only admin.
"""

import pytest
from django.contrib import admin
from django.urls import reverse

from supplybank import inventory
from supplybank.models import (
    Event,
    InventoryItem,
    LedgerEntry,
    StockTransaction,
    StorageLocation,
)


pytestmark = pytest.mark.django_db


class TestAdminRegistration:

    @pytest.mark.parametrize('model', [StockTransaction, InventoryItem, LedgerEntry, Event])
    def test_ledger_models_are_read_only(self, model, rf, admin_user):
        request = rf.get('/')
        request.user = admin_user
        model_admin = admin.site._registry[model]

        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_change_permission(request)
        assert not model_admin.has_delete_permission(request)

    @pytest.mark.parametrize('name', [
        'stocktransaction', 'inventoryitem', 'ledgerentry', 'event', 'storagelocation', 'item',
    ])
    def test_changelists_render(self, admin_client, stocked, name):
        response = admin_client.get(reverse(f'admin:supplybank_{name}_changelist'))

        assert response.status_code == 200


class TestDestroyAction:

    def test_reverses_selected_transactions(self, admin_client, stocked, diapers, vendor):
        purchase = inventory.purchase(stocked, [(diapers, 5)], vendor=vendor)

        response = admin_client.post(
            reverse('admin:supplybank_stocktransaction_changelist'),
            {'action': 'destroy_transactions', '_selected_action': [purchase.pk]},
        )

        assert response.status_code == 302
        assert not StockTransaction.objects.filter(pk=purchase.pk).exists()
        assert inventory.quantity_for(stocked, diapers) == 10

    def test_storage_location_is_editable(self, rf, admin_user):
        request = rf.get('/')
        request.user = admin_user

        assert admin.site._registry[StorageLocation].has_change_permission(request)
