"""
Inventory Signals

InventoryLossRecord creation → stock deduction and Inventory Loss expense.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .cascades import INVENTORY_LOSS_CASCADE
from .models import InventoryLossRecord


@receiver(post_save, sender=InventoryLossRecord)
def apply_inventory_loss(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    INVENTORY_LOSS_CASCADE.run(instance)
