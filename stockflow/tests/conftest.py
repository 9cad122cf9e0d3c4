"""
Pytest fixtures for Stockflow tests.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockflow import inventory
from stockflow.adapters import reset_tenant_store
from stockflow.snapshots import LineItem
from stockflow.tenancy import Tenant


User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_tenant_store():
    """Each test loads the tenant store from its own settings."""
    reset_tenant_store()
    yield
    reset_tenant_store()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='alice',
        email='alice@example.com',
        password='testpass123',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username='bob', password='testpass123')


@pytest.fixture
def tenant(user):
    """Tenant for the test user."""
    return Tenant(user.pk)


@pytest.fixture
def other_tenant(other_user):
    return Tenant(other_user.pk)


@pytest.fixture
def widget_line():
    """One line of 10 widgets at 2.50."""
    return LineItem('Widget', 10, Decimal('2.50'), product_code='ABCDE')


@pytest.fixture
def widget(tenant):
    """StockItem ABCDE with 10 units on hand."""
    item_id = inventory.ledger.upsert(
        tenant,
        product_code='ABCDE',
        product_name='Widget',
        quantity=10,
        unit_price=Decimal('2.50'),
    )
    return inventory.ledger.get(tenant, item_id)


@pytest.fixture
def receipt_header():
    return {'receive_from': 'Acme Supplies', 'responsible': 'Carol'}


@pytest.fixture
def delivery_header():
    return {'delivery_address': '1 Main Street', 'operation_type': 'Sale'}


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def tomorrow():
    """Return tomorrow's date."""
    return date.today() + timedelta(days=1)
