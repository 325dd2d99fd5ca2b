"""
Pytest fixtures for SupplyBank tests.
"""

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache

from supplybank.models import (
    DonationSite,
    Item,
    ItemCategory,
    Manufacturer,
    Organization,
    Partner,
    ProductDrive,
    StorageLocation,
    Vendor,
    WarehouseType,
)
from supplybank.service import Inventory


User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Snapshots must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def organization(db):
    """Create the organization most tests work in."""
    return Organization.objects.create(
        name='Pawnee Diaper Bank',
        short_name='pawnee',
    )


@pytest.fixture
def other_organization(db):
    """A second organization, for cross-organization checks."""
    return Organization.objects.create(
        name='SF Diaper Bank',
        short_name='sf',
    )


@pytest.fixture
def category(organization):
    return ItemCategory.objects.create(organization=organization, name='Diapers')


@pytest.fixture
def diapers(organization, category):
    """Create a test item (X in the scenarios)."""
    return Item.objects.create(
        organization=organization,
        name='Kids (Size 4)',
        category=category,
        value_in_cents=25,
    )


@pytest.fixture
def wipes(organization):
    """Create a second test item."""
    return Item.objects.create(
        organization=organization,
        name='Wipes (Baby)',
        value_in_cents=10,
    )


@pytest.fixture
def warehouse(organization):
    """Storage location A."""
    return StorageLocation.objects.create(
        organization=organization,
        name='Bulk Storage',
        address='1234 Main St, Pawnee, IN',
        warehouse_type=WarehouseType.WAREHOUSE,
    )


@pytest.fixture
def office(organization):
    """Storage location B."""
    return StorageLocation.objects.create(
        organization=organization,
        name='Office Closet',
        warehouse_type=WarehouseType.COMMERCIAL,
    )


@pytest.fixture
def vendor(organization):
    return Vendor.objects.create(organization=organization, business_name='Target')


@pytest.fixture
def partner(organization):
    return Partner.objects.create(organization=organization, name='Pawnee Family Services')


@pytest.fixture
def donation_site(organization):
    return DonationSite.objects.create(organization=organization, name='Pawnee Library')


@pytest.fixture
def manufacturer(organization):
    return Manufacturer.objects.create(organization=organization, name='Huggies')


@pytest.fixture
def product_drive(organization):
    return ProductDrive.objects.create(organization=organization, name='Summer Drive')


@pytest.fixture
def stocked(warehouse, diapers):
    """Warehouse holding 10 diapers (A has 10 X)."""
    Inventory.adjust(warehouse, [(diapers, 10)], comment='Starting inventory')
    return warehouse
