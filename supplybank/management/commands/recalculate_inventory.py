"""
Management command to rebuild cached quantities from the ledger.

Usage:
    python manage.py recalculate_inventory
    python manage.py recalculate_inventory --organization 3
    python manage.py recalculate_inventory --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from supplybank.models import Organization
from supplybank.service import Inventory


class Command(BaseCommand):
    """Recalculate inventory command."""

    help = 'Compares every InventoryItem with its ledger and fixes drift'

    def add_arguments(self, parser):
        parser.add_argument(
            '--organization',
            type=int,
            help='Only audit this organization id'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without fixing it'
        )

    def handle(self, *args, **options):
        organization = None
        if options['organization'] is not None:
            try:
                organization = Organization.objects.get(pk=options['organization'])
            except Organization.DoesNotExist:
                raise CommandError(f"Organization {options['organization']} not found") from None

        drifted = Inventory.audit(organization, fix=not options['dry_run'])

        for row, cached, ledger_total in drifted:
            self.stdout.write(f'{row.storage_location} / {row.item}: {cached} -> {ledger_total}')

        if options['dry_run']:
            self.stdout.write(f'{len(drifted)} inventory item(s) would be recalculated')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{len(drifted)} inventory item(s) recalculated')
            )
