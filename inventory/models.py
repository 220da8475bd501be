"""
Inventory Models

Handles:
- Stock items (feed, medication, supplies) with a running quantity
- Inventory loss records (wasted, damaged, lost, expired stock)

Stock quantity is written by cascades from HealthRecord (medication
consumption) and InventoryLossRecord creation, and by restocking.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from cascades.models import CascadeTrackedModel


# =============================================================================
# INVENTORY ITEM - stock aggregate
# =============================================================================

class InventoryItem(models.Model):
    """
    A stock line. ``name`` is the key bulk imports reconcile against.

    ``quantity`` is only ever changed through StockLedger, which uses
    single-statement updates so concurrent consumers do not overwrite
    each other.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        help_text="Units on hand. Can go negative under the 'allow' stock policy."
    )
    unit = models.CharField(max_length=30, blank=True)
    cost_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    price = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    min_stock = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_consumed = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        help_text="Units consumed by treatments"
    )
    date_added = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category', 'name'], name='inv_items_category_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})".strip()

    @property
    def is_low_stock(self):
        return self.quantity <= self.min_stock

    @property
    def loss_unit_cost(self):
        """Unit cost used to value a loss when the caller does not give one."""
        return self.cost_price or self.price or Decimal('0')


# =============================================================================
# INVENTORY LOSS RECORD
# =============================================================================

class InventoryLossType(models.TextChoices):
    WASTED = 'Wasted', 'Wasted'
    DAMAGED = 'Damaged', 'Damaged'
    LOST = 'Lost', 'Lost'
    EXPIRED = 'Expired', 'Expired'


class InventoryLossRecord(CascadeTrackedModel):
    """
    Stock written off. Creating one deducts the quantity from the item and,
    when the loss has a value, books an Inventory Loss expense.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    inventory_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name='loss_records'
    )
    item_name = models.CharField(max_length=200, blank=True, help_text="Denormalized for display")
    loss_type = models.CharField(max_length=10, choices=InventoryLossType.choices, db_index=True)
    quantity = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    unit_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    total_loss = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    date = models.DateTimeField(default=timezone.now, db_index=True)
    reason = models.TextField(blank=True)
    reported_by = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_loss_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['inventory_item', 'date'], name='inv_loss_item_date_idx'),
            models.Index(fields=['loss_type', 'date'], name='inv_loss_type_date_idx'),
        ]

    def __str__(self):
        return f"{self.loss_type} - {self.item_name or self.inventory_item_id} x {self.quantity}"

    def save(self, *args, **kwargs):
        # Auto-calculate total loss
        self.total_loss = (self.quantity or Decimal('0')) * (self.unit_cost or Decimal('0'))
        super().save(*args, **kwargs)
