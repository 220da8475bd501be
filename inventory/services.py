"""
Inventory Services

StockLedger is the only writer of InventoryItem.quantity. Every change is a
single UPDATE with an F() expression, so two treatments consuming the same
medication at once both land.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from cascades.exceptions import InsufficientStock, RelatedAggregateMissing
from .models import InventoryItem

logger = logging.getLogger(__name__)


class StockPolicy:
    ALLOW = 'allow'
    CLAMP = 'clamp'
    REJECT = 'reject'

    CHOICES = (ALLOW, CLAMP, REJECT)


def configured_stock_policy():
    policy = getattr(settings, 'INVENTORY_NEGATIVE_STOCK_POLICY', StockPolicy.ALLOW)
    policy = (policy or StockPolicy.ALLOW).lower()
    if policy not in StockPolicy.CHOICES:
        raise ImproperlyConfigured(
            f"INVENTORY_NEGATIVE_STOCK_POLICY must be one of {StockPolicy.CHOICES}, got '{policy}'"
        )
    return policy


class StockLedger:
    """
    Atomic stock movements for inventory items.

    Example Usage:
        ledger = StockLedger()
        ledger.consume(item.id, 1, count_consumption=True)
        ledger.restock(item.id, Decimal('50'))
    """

    def __init__(self, policy=None):
        self.policy = policy or configured_stock_policy()

    def consume(self, item_id, quantity, count_consumption=False):
        """
        Take ``quantity`` out of stock.

        Raises:
            RelatedAggregateMissing: the item does not exist
            InsufficientStock: policy is 'reject' and stock is below quantity
        """
        quantity = Decimal(str(quantity))
        queryset = InventoryItem.objects.filter(pk=item_id)

        updates = {'updated_at': timezone.now()}
        if self.policy == StockPolicy.CLAMP:
            updates['quantity'] = Greatest(
                F('quantity') - quantity,
                Value(Decimal('0')),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            )
        else:
            updates['quantity'] = F('quantity') - quantity

        if count_consumption:
            updates['total_consumed'] = F('total_consumed') + quantity

        if self.policy == StockPolicy.REJECT:
            queryset = queryset.filter(quantity__gte=quantity)

        if queryset.update(**updates) == 0:
            if not InventoryItem.objects.filter(pk=item_id).exists():
                raise RelatedAggregateMissing('InventoryItem', item_id)
            raise InsufficientStock(item_id, quantity)

        logger.debug(f"Consumed {quantity} of inventory item {item_id} (policy={self.policy})")

    def restock(self, item_id, quantity):
        """Add ``quantity`` to stock."""
        quantity = Decimal(str(quantity))
        updated = InventoryItem.objects.filter(pk=item_id).update(
            quantity=F('quantity') + quantity,
            updated_at=timezone.now(),
        )
        if updated == 0:
            raise RelatedAggregateMissing('InventoryItem', item_id)
        logger.debug(f"Restocked inventory item {item_id} with {quantity}")
