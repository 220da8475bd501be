"""
Inventory cascades.

InventoryLossRecord → deduct the lost quantity from the item, then book one
"Inventory Loss" expense when the loss has a value.
"""

from cascades.engine import Cascade, CascadeStep, registry
from finance.models import FinanceCategory
from finance.services import record_cascade_expense, source_reference_for
from .models import InventoryLossRecord
from .services import StockLedger


def _deduct_stock(record):
    StockLedger().consume(record.inventory_item_id, record.quantity)


def _record_loss_expense(record):
    record_cascade_expense(
        source_reference_for('inventory-loss', record.pk),
        category=FinanceCategory.INVENTORY_LOSS,
        title=f"{record.loss_type} - {record.item_name or 'Inventory Item'}",
        description=record.reason or f"{record.loss_type} inventory loss",
        amount=record.total_loss,
        date=record.date,
        related_inventory_id=record.inventory_item_id,
        recorded_by=record.reported_by,
    )


INVENTORY_LOSS_CASCADE = Cascade('inventory_loss', [
    CascadeStep('deduct_stock', _deduct_stock),
    CascadeStep(
        'record_loss_expense',
        _record_loss_expense,
        condition=lambda record: record.total_loss > 0,
    ),
])


registry.register(InventoryLossRecord, INVENTORY_LOSS_CASCADE)
