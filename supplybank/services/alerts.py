"""
Low stock: items whose on-hand total dropped below their minimum.

Usage:
    from supplybank.services.alerts import check_low_stock

    # Run periodically or after distributions
    for item, on_hand in check_low_stock(organization):
        ...
"""

import logging

from supplybank.models.catalog import Item
from supplybank.services.aggregate import InventoryAggregate

logger = logging.getLogger('supplybank')


def check_low_stock(organization) -> list[tuple[Item, int]]:
    """
    Active items of an organization below on_hand_minimum_quantity.

    On-hand is the total over the organization's active locations.
    Items with a minimum of 0 never alert.

    Returns:
        List of (item, on_hand) tuples, ordered by item name.
    """
    totals = InventoryAggregate.item_totals(organization)
    items = Item.objects.for_organization(organization).active().filter(
        on_hand_minimum_quantity__gt=0
    ).order_by('name')

    low = []
    for item in items:
        on_hand = totals.get(item.pk, 0)
        if on_hand < item.on_hand_minimum_quantity:
            low.append((item, on_hand))
            logger.warning(
                "inventory.low_stock",
                extra={
                    "organization_id": item.organization_id,
                    "item_id": item.pk,
                    "minimum": item.on_hand_minimum_quantity,
                    "on_hand": on_hand,
                },
            )

    return low
