"""
Initial migration for SupplyBank models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create SupplyBank models: catalog, locations, parties, transactions and ledger."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('short_name', models.SlugField(help_text='Unique identifier (ex: pawnee-diaper-bank)', unique=True, verbose_name='Short name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Organization',
                'verbose_name_plural': 'Organizations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ItemCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('description', models.TextField(blank=True, default='')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='item_categories', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Item category',
                'verbose_name_plural': 'Item categories',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(fields=('organization', 'name'), name='unique_item_category_per_organization')],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('value_in_cents', models.PositiveIntegerField(default=0, verbose_name='Fair market value (cents)')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('on_hand_minimum_quantity', models.PositiveIntegerField(default=0, help_text='Low stock is reported when the organization total drops below this.', verbose_name='Minimum on hand')),
                ('on_hand_recommended_quantity', models.PositiveIntegerField(blank=True, null=True, verbose_name='Recommended on hand')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='items', to='supplybank.itemcategory', verbose_name='Category')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Items',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(fields=('organization', 'name'), name='unique_item_name_per_organization')],
            },
        ),
        migrations.CreateModel(
            name='StorageLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('address', models.CharField(blank=True, default='', max_length=255, verbose_name='Address')),
                ('warehouse_type', models.CharField(blank=True, choices=[('residential', 'Residential space used'), ('self_storage', 'Consumer, self-storage or container space'), ('commercial', 'Commercial/office/business space that includes warehouse space'), ('warehouse', 'Warehouse with loading bay')], default='', max_length=20, verbose_name='Warehouse type')),
                ('square_footage', models.PositiveIntegerField(blank=True, null=True)),
                ('discarded_at', models.DateTimeField(blank=True, db_index=True, null=True, verbose_name='Deactivated at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='storage_locations', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Storage location',
                'verbose_name_plural': 'Storage locations',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(fields=('organization', 'name'), name='unique_storage_location_name_per_organization')],
            },
        ),
        migrations.AddField(
            model_name='organization',
            name='default_storage_location',
            field=models.ForeignKey(blank=True, help_text='Used when a transaction is created without a location.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='supplybank.storagelocation', verbose_name='Default storage location'),
        ),
        migrations.CreateModel(
            name='Vendor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('business_name', models.CharField(max_length=255, verbose_name='Business name')),
                ('contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=50)),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('comment', models.TextField(blank=True, default='')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vendors', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Vendor',
                'verbose_name_plural': 'Vendors',
                'ordering': ['business_name'],
            },
        ),
        migrations.CreateModel(
            name='Partner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('status', models.CharField(choices=[('invited', 'Invited'), ('approved', 'Approved'), ('deactivated', 'Deactivated')], default='approved', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partners', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Partner',
                'verbose_name_plural': 'Partners',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='DonationSite',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('active', models.BooleanField(default=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='donation_sites', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Donation site',
                'verbose_name_plural': 'Donation sites',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Manufacturer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='manufacturers', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Manufacturer',
                'verbose_name_plural': 'Manufacturers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductDrive',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_drives', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Product drive',
                'verbose_name_plural': 'Product drives',
                'ordering': ['-start_date', 'name'],
            },
        ),
        migrations.CreateModel(
            name='ProductDriveParticipant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('business_name', models.CharField(blank=True, default='', max_length=255)),
                ('contact_name', models.CharField(max_length=255, verbose_name='Contact name')),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_drive_participants', to='supplybank.organization')),
            ],
            options={
                'verbose_name': 'Product drive participant',
                'verbose_name_plural': 'Product drive participants',
                'ordering': ['contact_name'],
            },
        ),
        migrations.CreateModel(
            name='StockTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('adjustment', 'Adjustment'), ('purchase', 'Purchase'), ('donation', 'Donation'), ('distribution', 'Distribution'), ('transfer', 'Transfer')], db_index=True, max_length=20, verbose_name='Kind')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('committed', 'Committed')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('issued_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Issued at')),
                ('comment', models.TextField(blank=True, default='', verbose_name='Comment')),
                ('committed_at', models.DateTimeField(blank=True, null=True)),
                ('direction', models.CharField(blank=True, choices=[('increase', 'Increase'), ('decrease', 'Decrease')], default='', max_length=10)),
                ('purchased_from', models.CharField(blank=True, default='', max_length=255)),
                ('amount_spent_in_cents', models.PositiveIntegerField(default=0)),
                ('source', models.CharField(blank=True, choices=[('product_drive', 'Product Drive'), ('manufacturer', 'Manufacturer'), ('donation_site', 'Donation Site'), ('misc', 'Misc. Donation')], default='', max_length=20)),
                ('money_raised_in_cents', models.PositiveIntegerField(default=0)),
                ('delivery_method', models.CharField(blank=True, choices=[('pick_up', 'Pick up'), ('delivery', 'Delivery'), ('shipped', 'Shipped')], default='', max_length=20)),
                ('shipping_cost_in_cents', models.PositiveIntegerField(default=0)),
                ('agency_rep', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_transactions', to='supplybank.organization')),
                ('storage_location', models.ForeignKey(help_text='Transfers move stock out of this location.', on_delete=django.db.models.deletion.PROTECT, related_name='stock_transactions', to='supplybank.storagelocation', verbose_name='Storage location')),
                ('to_storage_location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='incoming_transfers', to='supplybank.storagelocation', verbose_name='Destination')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
                ('vendor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='supplybank.vendor')),
                ('product_drive', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='supplybank.productdrive')),
                ('product_drive_participant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='supplybank.productdriveparticipant')),
                ('manufacturer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='supplybank.manufacturer')),
                ('donation_site', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donations', to='supplybank.donationsite')),
                ('partner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='distributions', to='supplybank.partner')),
            ],
            options={
                'verbose_name': 'Transaction',
                'verbose_name_plural': 'Transactions',
                'ordering': ['-issued_at'],
                'indexes': [models.Index(fields=['organization', 'kind', 'issued_at'], name='sb_txn_org_kind_issued_idx')],
            },
        ),
        migrations.CreateModel(
            name='LineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='line_items', to='supplybank.item')),
                ('transaction', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='supplybank.stocktransaction')),
            ],
            options={
                'verbose_name': 'Line item',
                'verbose_name_plural': 'Line items',
                'ordering': ['pk'],
            },
        ),
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('_quantity', models.IntegerField(default=0, verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_items', to='supplybank.item', verbose_name='Item')),
                ('storage_location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_items', to='supplybank.storagelocation', verbose_name='Storage location')),
            ],
            options={
                'verbose_name': 'Inventory item',
                'verbose_name_plural': 'Inventory items',
                'constraints': [
                    models.UniqueConstraint(fields=('storage_location', 'item'), name='unique_inventory_item_per_location'),
                    models.CheckConstraint(condition=models.Q(('_quantity__gte', 0)), name='inventory_item_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('phase', models.CharField(choices=[('apply', 'Apply'), ('reverse', 'Reverse')], default='apply', max_length=10, verbose_name='Phase')),
                ('delta', models.IntegerField(help_text='Positive = in, negative = out', verbose_name='Delta')),
                ('reference', models.CharField(help_text='Ex: "purchase:12"', max_length=50, verbose_name='Reference')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('inventory_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='supplybank.inventoryitem', verbose_name='Inventory item')),
                ('stock_transaction', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ledger_entries', to='supplybank.stocktransaction', verbose_name='Transaction')),
            ],
            options={
                'verbose_name': 'Ledger entry',
                'verbose_name_plural': 'Ledger entries',
                'ordering': ['timestamp', 'pk'],
                'indexes': [models.Index(fields=['inventory_item', 'timestamp'], name='sb_ledger_item_ts_idx')],
                'constraints': [models.UniqueConstraint(fields=('stock_transaction', 'phase', 'inventory_item'), name='unique_ledger_entry_per_transaction_phase')],
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_type', models.CharField(db_index=True, help_text='Ex: "purchase_event", "purchase_destroy_event"', max_length=50, verbose_name='Type')),
                ('eventable_kind', models.CharField(max_length=20, verbose_name='Transaction kind')),
                ('eventable_id', models.PositiveBigIntegerField(db_index=True, verbose_name='Transaction id')),
                ('data', models.JSONField(blank=True, default=dict)),
                ('event_time', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='supplybank.organization')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Event',
                'verbose_name_plural': 'Events',
                'ordering': ['event_time', 'pk'],
            },
        ),
    ]
