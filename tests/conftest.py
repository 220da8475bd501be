"""
Shared fixtures for the herdbook test suite.
"""

from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Cached counts must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        username='herd_manager',
        email='manager@herdbook.test',
        password='testpass123',
    )


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_api_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================

@pytest.fixture
def make_animal():
    """Factory for animals with sensible defaults."""
    from livestock.models import Animal

    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        fields = {
            'tag_id': f'TAG-{counter["n"]:04d}',
            'name': f'Animal {counter["n"]}',
            'species': 'Goat',
            'purchase_cost': Decimal('1000.00'),
        }
        fields.update(overrides)
        return Animal.objects.create(**fields)

    return _make


@pytest.fixture
def animal(make_animal):
    return make_animal(tag_id='GOAT-001', name='Nanny')


@pytest.fixture
def make_item():
    """Factory for inventory items."""
    from inventory.models import InventoryItem

    def _make(**overrides):
        fields = {
            'name': 'Oxytetracycline',
            'category': 'Medication',
            'quantity': Decimal('10'),
            'unit': 'vial',
            'cost_price': Decimal('25.00'),
        }
        fields.update(overrides)
        return InventoryItem.objects.create(**fields)

    return _make


@pytest.fixture
def medication(make_item):
    return make_item()
