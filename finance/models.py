"""
Finance Models

The finance ledger: income and expense lines. Cascades create expense lines
for mortality and inventory losses; every other change is a direct user edit.
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class FinanceType(models.TextChoices):
    INCOME = 'Income', 'Income'
    EXPENSE = 'Expense', 'Expense'


class FinanceCategory:
    """Categories booked by cascades. Users may enter any other category."""
    MORTALITY_LOSS = 'Mortality Loss'
    INVENTORY_LOSS = 'Inventory Loss'


class FinanceRecord(models.Model):
    """
    A single ledger line.

    ``source_reference`` identifies the trigger record a cascade created
    this line for (e.g. ``mortality:<uuid>``). It is unique, so one trigger
    record can never produce two ledger lines.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateTimeField(default=timezone.now, db_index=True)
    type = models.CharField(max_length=10, choices=FinanceType.choices, db_index=True)
    category = models.CharField(max_length=100, db_index=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    payment_method = models.CharField(
        max_length=20,
        choices=[
            ('Cash', 'Cash'),
            ('Bank Transfer', 'Bank Transfer'),
            ('Check', 'Check'),
            ('Mobile Money', 'Mobile Money'),
        ],
        default='Cash'
    )
    vendor = models.CharField(max_length=200, blank=True)
    invoice_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(
        max_length=10,
        choices=[('Pending', 'Pending'), ('Completed', 'Completed')],
        default='Completed'
    )

    related_animal = models.ForeignKey(
        'livestock.Animal',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='finance_records'
    )
    related_inventory = models.ForeignKey(
        'inventory.InventoryItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='finance_records'
    )
    source_reference = models.CharField(
        max_length=80,
        unique=True,
        null=True,
        blank=True,
        editable=False,
        help_text="Trigger record this line was created for by a cascade"
    )

    recorded_by = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'finance_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['type', 'date'], name='finance_type_date_idx'),
        ]

    def __str__(self):
        return f"{self.type} - {self.title} ({self.amount})"
