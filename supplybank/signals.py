"""
Signals sent by SupplyBank.

inventory_changed is sent after the database commit of every
transaction commit or destroy, with keyword arguments:

    transaction_id:  id of the StockTransaction
    organization_id: id of its Organization
    kind:            TransactionKind value
    action:          "commit" or "destroy"
    deltas:          list of {"storage_location_id", "item_id", "quantity"}

Usage:
    from django.dispatch import receiver
    from supplybank.signals import inventory_changed

    @receiver(inventory_changed)
    def refresh_report(sender, organization_id, deltas, **kwargs):
        ...
"""

from django.dispatch import Signal

inventory_changed = Signal()
