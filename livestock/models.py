"""
Livestock Models

Handles:
- Animals (individually tagged, archived instead of deleted)
- Locations animals are kept at
- Event records that cascade into the animal and related aggregates:
  weight captures, health treatments and mortality
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from cascades.models import CascadeTrackedModel


class AnimalStatus(models.TextChoices):
    ALIVE = 'Alive', 'Alive'
    DEAD = 'Dead', 'Dead'
    SOLD = 'Sold', 'Sold'
    ARCHIVED = 'Archived', 'Archived'


# =============================================================================
# LOCATION
# =============================================================================

class Location(models.Model):
    """A paddock, pen or pasture animals are kept at."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'locations'
        ordering = ['name']

    def __str__(self):
        return self.name


# =============================================================================
# ANIMAL - primary aggregate
# =============================================================================

class Animal(models.Model):
    """
    A single tagged animal.

    Status and weight are also written by cascades from MortalityRecord,
    WeightRecord and HealthRecord creation. Animals are never deleted;
    archive() takes them out of the active herd.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Identification
    tag_id = models.CharField(
        max_length=50,
        unique=True,
        help_text="Human-assigned ear tag, unique across the farm"
    )
    name = models.CharField(max_length=100, blank=True, db_index=True)
    species = models.CharField(max_length=50, blank=True, db_index=True)
    breed = models.CharField(max_length=100, blank=True, db_index=True)
    animal_class = models.CharField(max_length=50, blank=True)
    gender = models.CharField(
        max_length=10,
        choices=[('Male', 'Male'), ('Female', 'Female')],
        blank=True
    )
    date_of_birth = models.DateField(null=True, blank=True)
    color = models.CharField(max_length=50, blank=True)
    acquisition_type = models.CharField(
        max_length=20,
        choices=[
            ('Bred on farm', 'Bred on farm'),
            ('Purchased', 'Purchased'),
            ('Donated', 'Donated'),
            ('Other', 'Other'),
        ],
        blank=True
    )
    acquisition_date = models.DateField(null=True, blank=True)

    # Status
    status = models.CharField(
        max_length=10,
        choices=AnimalStatus.choices,
        default=AnimalStatus.ALIVE,
        db_index=True
    )
    is_archived = models.BooleanField(default=False, db_index=True)
    archived_at = models.DateTimeField(null=True, blank=True)
    archived_reason = models.CharField(max_length=200, blank=True)

    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='animals'
    )

    # Weight (written by WeightRecord and HealthRecord cascades)
    current_weight = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Most recently captured weight (kg)"
    )
    weight_date = models.DateTimeField(null=True, blank=True)
    recorded_by = models.CharField(max_length=100, blank=True)

    # Financial tracking
    purchase_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    margin_percent = models.DecimalField(max_digits=5, decimal_places=2, default=30)
    projected_sales_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    total_feed_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    total_medication_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'animals'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['species', 'status'], name='animals_species_status_idx'),
            models.Index(fields=['is_archived', 'created_at'], name='animals_archived_created_idx'),
            models.Index(fields=['created_at', 'id'], name='animals_created_id_idx'),
        ]

    def __str__(self):
        return f"{self.tag_id} ({self.species or 'unknown species'})"

    @property
    def total_investment(self):
        return (
            (self.purchase_cost or Decimal('0'))
            + (self.total_feed_cost or Decimal('0'))
            + (self.total_medication_cost or Decimal('0'))
        )

    def archive(self, reason=''):
        self.is_archived = True
        self.archived_at = timezone.now()
        self.archived_reason = reason or ''
        self.status = AnimalStatus.ARCHIVED
        self.save(update_fields=['is_archived', 'archived_at', 'archived_reason', 'status', 'updated_at'])


# =============================================================================
# WEIGHT RECORD
# =============================================================================

class WeightRecord(CascadeTrackedModel):
    """A weight capture. Creating one overwrites the animal's current weight."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    animal = models.ForeignKey(Animal, on_delete=models.CASCADE, related_name='weight_records')
    weight_kg = models.DecimalField(
        max_digits=8, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))]
    )
    date = models.DateTimeField(default=timezone.now, db_index=True)
    recorded_by = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'weight_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['animal', 'date'], name='weight_animal_date_idx'),
        ]

    def __str__(self):
        return f"{self.animal.tag_id} - {self.weight_kg}kg on {self.date:%Y-%m-%d}"


# =============================================================================
# HEALTH RECORD
# =============================================================================

TREATMENT_ROUTE_CHOICES = [
    ('IM', 'Intramuscular'),
    ('Oral', 'Oral'),
    ('Subcutaneous', 'Subcutaneous'),
    ('Spraying', 'Spraying'),
    ('Backline', 'Backline'),
    ('Topical', 'Topical'),
    ('IV', 'Intravenous'),
    ('Other', 'Other'),
]


class HealthRecord(CascadeTrackedModel):
    """
    A health check or treatment for one animal.

    Holds up to two treatment entries (A and B). Each entry may reference a
    medication inventory item; one unit of it is consumed when the record is
    created. Entry B only counts when needs_multiple_treatments is set.
    A positive post_weight overwrites the animal's current weight.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    animal = models.ForeignKey(Animal, on_delete=models.CASCADE, related_name='health_records')
    date = models.DateTimeField(default=timezone.now, db_index=True)

    is_routine = models.BooleanField(default=False)
    symptoms = models.TextField(blank=True)
    possible_cause = models.CharField(max_length=200, blank=True)
    diagnosis = models.CharField(max_length=200, blank=True)
    prescribed_days = models.PositiveIntegerField(default=0)
    vaccines = models.CharField(max_length=100, blank=True)
    pre_weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    # Treatment A (primary)
    treatment_a_type = models.CharField(max_length=50, blank=True)
    treatment_a_medication = models.ForeignKey(
        'inventory.InventoryItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    treatment_a_medication_name = models.CharField(max_length=100, blank=True)
    treatment_a_dosage = models.CharField(max_length=50, blank=True)
    treatment_a_route = models.CharField(max_length=20, choices=TREATMENT_ROUTE_CHOICES, blank=True)

    # Treatment B (secondary, optional)
    needs_multiple_treatments = models.BooleanField(default=False)
    treatment_b_type = models.CharField(max_length=50, blank=True)
    treatment_b_medication = models.ForeignKey(
        'inventory.InventoryItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    treatment_b_medication_name = models.CharField(max_length=100, blank=True)
    treatment_b_dosage = models.CharField(max_length=50, blank=True)
    treatment_b_route = models.CharField(max_length=20, choices=TREATMENT_ROUTE_CHOICES, blank=True)

    # Post treatment
    treated_by = models.CharField(max_length=100, blank=True)
    post_observation = models.TextField(blank=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    recovery_status = models.CharField(
        max_length=20,
        choices=[
            ('Under Treatment', 'Under Treatment'),
            ('Improving', 'Improving'),
            ('Recovered', 'Recovered'),
            ('Regressing', 'Regressing'),
        ],
        blank=True
    )
    post_weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'health_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['animal', 'date'], name='health_animal_date_idx'),
            models.Index(fields=['recovery_status'], name='health_recovery_idx'),
        ]

    def __str__(self):
        return f"{self.animal.tag_id} - health record {self.date:%Y-%m-%d}"

    def consumed_medication_ids(self):
        """Inventory item ids this record consumes one unit of, in slot order."""
        ids = []
        if self.treatment_a_medication_id:
            ids.append(self.treatment_a_medication_id)
        if self.needs_multiple_treatments and self.treatment_b_medication_id:
            ids.append(self.treatment_b_medication_id)
        return ids


# =============================================================================
# MORTALITY RECORD
# =============================================================================

class MortalityRecord(CascadeTrackedModel):
    """
    Death of an animal.

    Creating one marks the animal Dead and books the loss in the finance
    ledger. When estimated_value is not supplied it is derived from the
    animal's projected sales price, falling back to its accumulated costs.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    animal = models.ForeignKey(Animal, on_delete=models.CASCADE, related_name='mortality_records')
    date_of_death = models.DateTimeField(db_index=True)
    cause = models.CharField(max_length=200, blank=True)
    symptoms = models.TextField(blank=True)
    days_sick = models.PositiveIntegerField(default=0)
    weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    # === FINANCIAL IMPACT ===
    estimated_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Value of the animal at death; derived when left at 0"
    )
    value_lost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Loss booked to the finance ledger"
    )

    disposal_method = models.CharField(max_length=50, blank=True)
    reported_by = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mortality_records'
        ordering = ['-date_of_death']
        indexes = [
            models.Index(fields=['animal', 'date_of_death'], name='mortality_animal_date_idx'),
        ]

    def __str__(self):
        return f"{self.animal.tag_id} - died {self.date_of_death:%Y-%m-%d}"
