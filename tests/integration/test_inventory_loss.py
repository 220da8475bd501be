"""
Tests for inventory loss records and stock movements.

Covers total_loss computation, unit cost lookup, the Inventory Loss expense,
the negative stock policies and the restock endpoint.
"""

from decimal import Decimal

import pytest

pytestmark = pytest.mark.django_db


@pytest.fixture
def feed(make_item):
    return make_item(
        name='Layer Mash',
        category='Feed',
        quantity=Decimal('10'),
        unit='bag',
        cost_price=Decimal('0'),
        price=Decimal('180.00'),
    )


# =============================================================================
# LOSS TOTALS AND EXPENSE
# =============================================================================

class TestInventoryLossTotals:
    """Tests for total_loss and the finance line it books."""

    def test_total_loss_and_expense(self, api_client, medication):
        from finance.models import FinanceRecord

        response = api_client.post('/api/inventory-loss/', {
            'inventory_item': str(medication.id),
            'loss_type': 'Expired',
            'quantity': '5',
            'unit_cost': '200',
            'reason': 'Past expiry date',
        }, format='json')

        assert response.status_code == 201
        assert response.data['total_loss'] == '1000.00'
        assert response.data['item_name'] == 'Oxytetracycline'
        assert response.data['cascade_status'] == 'APPLIED'

        medication.refresh_from_db()
        assert medication.quantity == Decimal('5')

        expense = FinanceRecord.objects.get(source_reference=f"inventory-loss:{response.data['id']}")
        assert expense.amount == Decimal('1000.00')
        assert expense.category == 'Inventory Loss'
        assert expense.title == 'Expired - Oxytetracycline'
        assert expense.description == 'Past expiry date'
        assert expense.related_inventory_id == medication.id

    def test_zero_value_loss_books_no_expense(self, medication):
        from finance.models import FinanceRecord
        from inventory.models import InventoryLossRecord

        record = InventoryLossRecord.objects.create(
            inventory_item=medication,
            loss_type='Damaged',
            quantity=Decimal('2'),
            unit_cost=Decimal('0'),
        )

        assert record.total_loss == Decimal('0')
        assert record.cascade_status == 'APPLIED'
        assert not FinanceRecord.objects.exists()

        medication.refresh_from_db()
        assert medication.quantity == Decimal('8')

    def test_unit_cost_defaults_to_cost_price(self, api_client, medication):
        response = api_client.post('/api/inventory-loss/', {
            'inventory_item': str(medication.id),
            'loss_type': 'Lost',
            'quantity': '3',
        }, format='json')

        assert response.status_code == 201
        assert response.data['unit_cost'] == '25.00'
        assert response.data['total_loss'] == '75.00'

    def test_zero_unit_cost_is_looked_up(self, api_client, medication):
        response = api_client.post('/api/inventory-loss/', {
            'inventory_item': str(medication.id),
            'loss_type': 'Damaged',
            'quantity': '2',
            'unit_cost': '0',
        }, format='json')

        assert response.status_code == 201
        assert response.data['unit_cost'] == '25.00'
        assert response.data['total_loss'] == '50.00'

    def test_unit_cost_falls_back_to_price(self, api_client, feed):
        response = api_client.post('/api/inventory-loss/', {
            'inventory_item': str(feed.id),
            'loss_type': 'Wasted',
            'quantity': '2',
        }, format='json')

        assert response.status_code == 201
        assert response.data['total_loss'] == '360.00'

    def test_rejects_zero_quantity(self, api_client, medication):
        response = api_client.post('/api/inventory-loss/', {
            'inventory_item': str(medication.id),
            'loss_type': 'Lost',
            'quantity': '0',
        }, format='json')

        assert response.status_code == 400
        assert 'quantity' in response.data

    def test_list_filters_by_type(self, api_client, medication):
        from inventory.models import InventoryLossRecord

        InventoryLossRecord.objects.create(inventory_item=medication, loss_type='Expired', quantity=Decimal('1'))
        InventoryLossRecord.objects.create(inventory_item=medication, loss_type='Damaged', quantity=Decimal('1'))

        response = api_client.get('/api/inventory-loss/', {'type': 'Expired'})

        assert response.status_code == 200
        assert response.data['count'] == 1
        assert response.data['results'][0]['loss_type'] == 'Expired'


# =============================================================================
# NEGATIVE STOCK POLICY
# =============================================================================

class TestNegativeStockPolicy:
    """Losses larger than the stock on hand."""

    def _lose(self, item, quantity):
        from inventory.models import InventoryLossRecord

        return InventoryLossRecord.objects.create(
            inventory_item=item,
            loss_type='Lost',
            quantity=Decimal(quantity),
            unit_cost=Decimal('1'),
        )

    def test_allow_goes_negative(self, settings, medication):
        settings.INVENTORY_NEGATIVE_STOCK_POLICY = 'allow'

        record = self._lose(medication, '15')

        medication.refresh_from_db()
        assert medication.quantity == Decimal('-5')
        assert record.cascade_status == 'APPLIED'

    def test_clamp_floors_at_zero(self, settings, medication):
        settings.INVENTORY_NEGATIVE_STOCK_POLICY = 'clamp'

        record = self._lose(medication, '15')

        medication.refresh_from_db()
        assert medication.quantity == Decimal('0')
        assert record.cascade_status == 'APPLIED'

    def test_reject_fails_the_cascade(self, settings, medication):
        from finance.models import FinanceRecord

        settings.INVENTORY_NEGATIVE_STOCK_POLICY = 'reject'

        record = self._lose(medication, '15')

        record.refresh_from_db()
        medication.refresh_from_db()
        assert medication.quantity == Decimal('10')
        assert record.cascade_status == 'FAILED'
        assert 'deduct_stock' in record.cascade_error
        assert not FinanceRecord.objects.exists()

    def test_reject_allows_loss_within_stock(self, settings, medication):
        settings.INVENTORY_NEGATIVE_STOCK_POLICY = 'reject'

        self._lose(medication, '10')

        medication.refresh_from_db()
        assert medication.quantity == Decimal('0')

    def test_invalid_policy_is_a_configuration_error(self, settings):
        from django.core.exceptions import ImproperlyConfigured
        from inventory.services import StockLedger

        settings.INVENTORY_NEGATIVE_STOCK_POLICY = 'sometimes'

        with pytest.raises(ImproperlyConfigured):
            StockLedger()


# =============================================================================
# ITEMS AND RESTOCK
# =============================================================================

class TestInventoryItems:
    """Tests for item CRUD and restocking."""

    def test_restock_increments_quantity(self, api_client, medication):
        response = api_client.post(f'/api/inventory/{medication.id}/restock/', {'quantity': '15'}, format='json')

        assert response.status_code == 200
        assert response.data['quantity'] == '25.00'

    def test_restock_requires_positive_quantity(self, api_client, medication):
        response = api_client.post(f'/api/inventory/{medication.id}/restock/', {'quantity': '-1'}, format='json')

        assert response.status_code == 400

    def test_patch_cannot_change_quantity(self, api_client, medication):
        response = api_client.patch(f'/api/inventory/{medication.id}/', {
            'quantity': '500',
            'min_stock': '3',
        }, format='json')

        assert response.status_code == 200
        medication.refresh_from_db()
        assert medication.quantity == Decimal('10')
        assert medication.min_stock == Decimal('3')

    def test_create_item(self, api_client):
        response = api_client.post('/api/inventory/', {
            'name': '  Ivermectin ',
            'category': 'Medication',
            'quantity': '12',
            'unit': 'bottle',
        }, format='json')

        assert response.status_code == 201
        assert response.data['name'] == 'Ivermectin'
        assert response.data['total_consumed'] == '0.00'
