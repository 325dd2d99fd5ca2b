"""
Management command to fill an empty database with demo data.

Every stock change goes through the inventory service, so the seeded
ledger is consistent with the seeded quantities.

Usage:
    python manage.py seed_supplybank
    python manage.py seed_supplybank --organizations 2 --transactions 200 --seed 42
"""

from datetime import timezone as dt_timezone

from django.core.management.base import BaseCommand
from django.utils.text import slugify
from faker import Faker

from supplybank.models import (
    AdjustmentDirection,
    DeliveryMethod,
    DonationSite,
    DonationSource,
    Item,
    ItemCategory,
    Manufacturer,
    Organization,
    Partner,
    ProductDrive,
    ProductDriveParticipant,
    StorageLocation,
    TransactionKind,
    Vendor,
    WarehouseType,
)
from supplybank.service import Inventory

BASE_ITEMS = {
    'Diapers - Childrens': [
        'Kids (Newborn)', 'Kids (Size 1)', 'Kids (Size 2)', 'Kids (Size 3)',
        'Kids (Size 4)', 'Kids (Size 5)', 'Kids Pull-Ups (2T-3T)',
    ],
    'Diapers - Adult': ['Adult Briefs (Medium)', 'Adult Briefs (Large)'],
    'Period Supplies': ['Pads', 'Tampons', 'Liners'],
    'Miscellaneous': ['Wipes (Baby)', 'Diaper Rash Cream', 'Cloth Diapers'],
}

LOCATIONS = [
    ('Bulk Storage', WarehouseType.WAREHOUSE),
    ('Office Closet', WarehouseType.COMMERCIAL),
]


class Command(BaseCommand):
    """Seed demo data command."""

    help = 'Creates demo organizations, catalogs and a history of transactions'

    def add_arguments(self, parser):
        parser.add_argument('--organizations', type=int, default=1, help='Organizations to create')
        parser.add_argument('--transactions', type=int, default=50,
                            help='Random transactions per organization')
        parser.add_argument('--seed', type=int, help='Random seed for repeatable data')

    def handle(self, *args, **options):
        self.fake = Faker()
        if options['seed'] is not None:
            self.fake.seed_instance(options['seed'])

        for _ in range(options['organizations']):
            organization = self.seed_organization()
            self.seed_starting_inventory(organization)
            created = 0
            for _ in range(options['transactions']):
                if self.seed_transaction(organization) is not None:
                    created += 1
            self.stdout.write(
                self.style.SUCCESS(f'{organization.name}: {created} transaction(s) created')
            )

    # ══════════════════════════════════════════════════════════════
    # RECORDS
    # ══════════════════════════════════════════════════════════════

    def seed_organization(self) -> Organization:
        fake = self.fake
        name = f'{fake.last_name()} Diaper Bank'
        organization = Organization.objects.create(
            name=name,
            short_name=f'{slugify(name)[:40]}-{fake.unique.random_int(1000, 9999)}',
        )

        for category_name, item_names in BASE_ITEMS.items():
            category = ItemCategory.objects.create(organization=organization, name=category_name)
            for item_name in item_names:
                Item.objects.create(
                    organization=organization,
                    name=item_name,
                    category=category,
                    value_in_cents=fake.random_int(0, 150),
                    on_hand_minimum_quantity=fake.random_element([0, 0, 100, 250]),
                )

        locations = [
            StorageLocation.objects.create(
                organization=organization,
                name=location_name,
                address=f'{fake.street_address()}, {fake.city()}, {fake.state_abbr()} {fake.zipcode()}',
                warehouse_type=warehouse_type,
                square_footage=fake.random_int(100, 10000),
            )
            for location_name, warehouse_type in LOCATIONS
        ]
        organization.default_storage_location = locations[0]
        organization.save(update_fields=['default_storage_location', 'updated_at'])

        for _ in range(2):
            Vendor.objects.create(
                organization=organization,
                business_name=fake.company(),
                contact_name=fake.name(),
                email=fake.email(),
                phone=fake.phone_number()[:50],
                address=fake.street_address(),
                comment=fake.sentence(),
            )
            DonationSite.objects.create(
                organization=organization,
                name=f'{fake.city()} Library',
                address=fake.street_address(),
                contact_name=fake.name(),
                email=fake.email(),
            )
            Manufacturer.objects.create(organization=organization, name=fake.company())

        for _ in range(3):
            Partner.objects.create(organization=organization, name=fake.company(), email=fake.email())

        drive = ProductDrive.objects.create(
            organization=organization,
            name=f'{fake.month_name()} Diaper Drive',
            start_date=fake.date_between(start_date='-1y', end_date='-30d'),
            end_date=fake.date_between(start_date='-29d', end_date='today'),
        )
        ProductDriveParticipant.objects.create(
            organization=organization,
            business_name=fake.company(),
            contact_name=fake.name(),
            email=fake.email(),
        )
        self.stdout.write(f'Created {organization.name} ({drive.name})')
        return organization

    def seed_starting_inventory(self, organization):
        items = list(organization.items.all())
        for location in organization.storage_locations.all():
            Inventory.adjust(
                location,
                [(item, self.fake.random_int(500, 2000)) for item in items],
                direction=AdjustmentDirection.INCREASE,
                comment='Starting inventory',
            )

    # ══════════════════════════════════════════════════════════════
    # TRANSACTIONS
    # ══════════════════════════════════════════════════════════════

    def seed_transaction(self, organization):
        fake = self.fake
        kind = fake.random_element([
            TransactionKind.PURCHASE,
            TransactionKind.DONATION,
            TransactionKind.DISTRIBUTION,
            TransactionKind.DISTRIBUTION,
            TransactionKind.TRANSFER,
        ])
        locations = list(organization.storage_locations.active())
        location = fake.random_element(locations)
        issued_at = fake.date_time_between(start_date='-1y', end_date='now', tzinfo=dt_timezone.utc)

        if kind == TransactionKind.PURCHASE:
            return Inventory.purchase(
                location,
                self.incoming_lines(organization),
                vendor=fake.random_element(list(organization.vendors.all())),
                amount_spent_in_cents=fake.random_int(1000, 100000),
                issued_at=issued_at,
            )

        if kind == TransactionKind.DONATION:
            return self.seed_donation(organization, location, issued_at)

        lines = self.outgoing_lines(organization, location)
        if not lines:
            return None

        if kind == TransactionKind.DISTRIBUTION:
            return Inventory.distribute(
                location,
                lines,
                partner=fake.random_element(list(organization.partners.all())),
                delivery_method=fake.random_element(DeliveryMethod.values),
                agency_rep=fake.name(),
                issued_at=issued_at,
            )

        destination = fake.random_element([other for other in locations if other.pk != location.pk])
        return Inventory.transfer(location, destination, lines, comment=fake.sentence(), issued_at=issued_at)

    def seed_donation(self, organization, location, issued_at):
        fake = self.fake
        source = fake.random_element(DonationSource.values)
        fields = {'source': source, 'issued_at': issued_at}
        if source == DonationSource.PRODUCT_DRIVE:
            fields['product_drive'] = organization.product_drives.first()
            fields['product_drive_participant'] = organization.product_drive_participants.first()
        elif source == DonationSource.MANUFACTURER:
            fields['manufacturer'] = fake.random_element(list(organization.manufacturers.all()))
        elif source == DonationSource.DONATION_SITE:
            fields['donation_site'] = fake.random_element(list(organization.donation_sites.all()))
        else:
            fields['comment'] = fake.sentence()
        return Inventory.donate(location, self.incoming_lines(organization), **fields)

    def incoming_lines(self, organization):
        items = list(organization.items.active())
        picked = fake_sample(self.fake, items, self.fake.random_int(1, 4))
        return [(item, self.fake.random_int(10, 300)) for item in picked]

    def outgoing_lines(self, organization, location):
        """Lines sized from what the location holds, so they never fail."""
        on_hand = Inventory.inventory_for(organization).get(location.pk, {})
        active = set(organization.items.active().values_list('pk', flat=True))
        available = [(item_id, qty) for item_id, qty in on_hand.items() if qty > 0 and item_id in active]
        picked = fake_sample(self.fake, available, self.fake.random_int(1, 4))
        return [(item_id, self.fake.random_int(1, min(qty, 50))) for item_id, qty in picked]


def fake_sample(fake, population, count):
    """Distinct random elements, at most len(population)."""
    count = min(count, len(population))
    if not count:
        return []
    return fake.random_sample(population, length=count)
